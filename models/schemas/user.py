from marshmallow import RAISE, Schema, fields, validate

from models.schemas.common import not_blank, positive_id


class UserUpdateSchema(Schema):
    """
    Profile update. Strict: any key not listed here (password, id, email,
    avatarUrl, ...) is a validation error instead of being silently merged.
    """

    class Meta:
        unknown = RAISE

    name = fields.String(validate=not_blank("Name must not be empty"))
    firstName = fields.String()
    lastName = fields.String()
    dateOfBirth = fields.String()
    gender = fields.String(validate=validate.OneOf(["M", "F"], error="Gender must be M or F"))
    cityId = positive_id("City ID must be a positive number")
