from marshmallow import fields, validate

from models.schemas.common import LenientSchema, not_blank, positive_id


class SkillCreateSchema(LenientSchema):
    subcategoryId = positive_id("Subcategory ID must be a positive number", required=True)
    title = fields.String(required=True, validate=not_blank("Title is required"))
    description = fields.String(required=True, validate=not_blank("Description is required"))
    type_of_proposal = fields.String(
        required=True,
        validate=validate.OneOf(["offer", "request"], error="type_of_proposal must be offer or request"),
    )
    images = fields.List(fields.String(), load_default=list)


class SkillUpdateSchema(SkillCreateSchema):
    """Same fields, all optional; load with partial=True."""
