from marshmallow import fields, validate

from models.schemas.common import LenientSchema, positive_id


class LikeCreateSchema(LenientSchema):
    toUserId = positive_id("toUserId must be a positive number", required=True)
    # numeric strings are accepted here, like the form-data clients send
    skillId = positive_id("skillId must be a positive number", strict=False, allow_none=True)


class LikesInfoSchema(LenientSchema):
    userIds = fields.List(
        fields.Integer(strict=True),
        required=True,
        validate=validate.Length(min=1, error="userIds must be a non-empty array"),
    )
