from marshmallow import fields

from models.schemas.common import LenientSchema, not_blank


class CitySchema(LenientSchema):
    name = fields.String(required=True, validate=not_blank("City name is required"))
