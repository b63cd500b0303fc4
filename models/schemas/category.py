from marshmallow import fields

from models.schemas.common import LenientSchema, not_blank


class CategorySchema(LenientSchema):
    name = fields.String(required=True, validate=not_blank("Category name is required"))
