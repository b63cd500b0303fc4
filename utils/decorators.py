from __future__ import annotations
import logging
from functools import wraps
from flask import request, g
from utils.exceptions import AuthenticationError, AuthorizationError, InvalidTokenError
from utils.security import decode_access_token

logger = logging.getLogger(__name__)


def _bearer_token() -> str | None:
    auth = request.headers.get("Authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def jwt_required():
    """
    Require a valid access token.
    No token -> 401, bad/expired/wrong-class token -> 403.
    Sets g.current_user = {"id", "email"}.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = _bearer_token()
            if token is None:
                raise AuthenticationError()
            try:
                g.current_user = decode_access_token(token)
            except InvalidTokenError as e:
                logger.info("Rejected access token: %s", e)
                raise AuthorizationError(description="Invalid or expired token")
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def jwt_optional():
    """
    Resolve the caller if a valid access token is present, otherwise carry on
    anonymously (g.current_user = None).
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.current_user = None
            token = _bearer_token()
            if token is not None:
                try:
                    g.current_user = decode_access_token(token)
                except InvalidTokenError as e:
                    logger.debug("Ignoring invalid optional token: %s", e)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def self_required(param: str = "user_id"):
    """
    Only the owner may touch /users/<user_id>. Stack below @jwt_required().
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            current = getattr(g, "current_user", None)
            if not current:
                raise AuthenticationError(description="Not authenticated")
            if current.get("id") != kwargs.get(param):
                raise AuthorizationError()
            return fn(*args, **kwargs)

        return wrapper

    return decorator
