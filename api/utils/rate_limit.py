"""
Request rate limiting (per client IP, 15 minute windows).

- every request counts against RATE_LIMIT_DEFAULT
- login and register additionally count failed attempts against AUTH_RATE_LIMIT

Limits are read from app.config on each request, so one limiter serves
every app built by create_app().
"""
from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

AUTH_RATE_LIMIT_MESSAGE = "Too many authentication attempts, please try again later"


def _default_limit() -> str:
    return current_app.config["RATE_LIMIT_DEFAULT"]


def _auth_limit() -> str:
    return current_app.config["AUTH_RATE_LIMIT"]


def _failed(response) -> bool:
    return response.status_code >= 400


limiter = Limiter(get_remote_address, default_limits=[_default_limit])


def auth_rate_limit(fn):
    """Stacks on top of the app-wide default; successful attempts are not counted."""
    return limiter.limit(
        _auth_limit,
        error_message=AUTH_RATE_LIMIT_MESSAGE,
        deduct_when=_failed,
        override_defaults=False,
    )(fn)
