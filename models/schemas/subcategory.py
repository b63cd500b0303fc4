from marshmallow import fields

from models.schemas.common import LenientSchema, not_blank, positive_id


class SubcategorySchema(LenientSchema):
    categoryId = positive_id("Category ID must be a positive number", required=True)
    name = fields.String(required=True, validate=not_blank("Subcategory name is required"))
