"""
Error taxonomy shared by the storage, security and HTTP layers.

The HTTP-facing errors subclass Werkzeug exceptions so that raising one
anywhere inside a request produces the right status code; api.errors turns
them into the JSON error envelope.
"""
from werkzeug.exceptions import Conflict, Forbidden, InternalServerError, NotFound, Unauthorized


class InvalidTokenError(Exception):
    """A JWT failed signature, expiry, shape or type checks."""


class AuthenticationError(Unauthorized):
    description = "Access token is missing"


class AuthorizationError(Forbidden):
    description = "Access to this resource is forbidden"


class TokenRevokedError(Forbidden):
    description = "Refresh token has been revoked"


class NotFoundError(NotFound):
    description = "Resource not found"


class ConflictError(Conflict):
    description = "Resource already exists"


class StorageError(InternalServerError):
    description = "Storage failure"
