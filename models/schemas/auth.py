from marshmallow import fields, validate

from models.schemas.common import LenientSchema, not_blank, positive_id


class RegisterSchema(LenientSchema):
    """Registration form (multipart/form-data, every value arrives as a string)."""

    email = fields.Email(required=True, error_messages={"invalid": "Invalid email"})
    password = fields.String(
        required=True,
        load_only=True,
        validate=validate.Length(min=6, error="Password must be at least 6 characters"),
    )
    name = fields.String(required=True, validate=not_blank("Name is required"))
    firstName = fields.String(required=True, validate=not_blank("First name is required"))
    lastName = fields.String(required=True, validate=not_blank("Last name is required"))
    dateOfBirth = fields.String(required=True, validate=not_blank("Date of birth is required"))
    gender = fields.String(
        required=True,
        validate=validate.OneOf(["M", "F"], error="Gender must be M or F"),
    )
    cityId = positive_id("City ID must be a positive number", strict=False, required=True)


class LoginSchema(LenientSchema):
    email = fields.Email(required=True, error_messages={"invalid": "Invalid email"})
    password = fields.String(required=True, load_only=True, validate=not_blank("Password is required"))


class RefreshSchema(LenientSchema):
    refreshToken = fields.String(allow_none=True)
