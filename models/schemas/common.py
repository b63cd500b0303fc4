from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate


def not_blank(message: str):
    """Reject empty and whitespace-only strings with a field-specific message."""
    def _validator(value: str) -> None:
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(message)
    return _validator


def positive_id(message: str, strict: bool = True, **kwargs) -> fields.Integer:
    """Integer id field. strict=False also accepts numeric strings (form data, query params)."""
    return fields.Integer(
        strict=strict,
        validate=validate.Range(min=1, error=message),
        **kwargs,
    )


class LenientSchema(Schema):
    """Base for request schemas that silently drop keys they do not declare."""

    class Meta:
        unknown = EXCLUDE


def flatten_errors(messages, prefix: str = "") -> list[dict]:
    """
    Turn marshmallow's nested error dict into [{"field": "a.b", "message": "..."}].
    """
    out: list[dict] = []
    if isinstance(messages, dict):
        for key, value in messages.items():
            name = "" if key == "_schema" else str(key)
            path = f"{prefix}.{name}" if prefix and name else (prefix or name)
            out.extend(flatten_errors(value, path))
    elif isinstance(messages, (list, tuple)):
        for item in messages:
            if isinstance(item, (dict, list, tuple)):
                out.extend(flatten_errors(item, prefix))
            else:
                out.append({"field": prefix, "message": str(item)})
    else:
        out.append({"field": prefix, "message": str(messages)})
    return out
