"""
Environment-aware configuration.
Secrets, token lifetimes, storage and upload locations, CORS.
Everything is read once here; the rest of the app only looks at app.config.
"""
import os
import re
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present

DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"
DEFAULT_JWT_REFRESH_SECRET = "your-refresh-secret-key-change-in-production"

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(value: str) -> timedelta:
    """Parse "15m", "30d", "12h", "45s" or a bare number of seconds."""
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_UNITS[unit]: int(amount)})


def _public_url() -> str:
    url = os.getenv("PUBLIC_URL") or os.getenv("API_URL")
    if url:
        return url.rstrip("/")
    host = os.getenv("HOST", "localhost")
    port = os.getenv("PORT", "3001")
    return f"http://{host}:{port}"


class BaseConfig:
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    _origins = os.getenv("ALLOWED_ORIGINS", "*")
    CORS_ORIGINS = "*" if _origins.strip() == "*" else [o.strip() for o in _origins.split(",")]

    JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", DEFAULT_JWT_REFRESH_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRES = parse_duration(os.getenv("JWT_EXPIRES_IN", "15m"))
    REFRESH_TOKEN_EXPIRES = parse_duration(os.getenv("JWT_REFRESH_EXPIRES_IN", "30d"))

    DB_PATH = os.getenv("DB_PATH") or os.getenv("DATABASE_PATH") or os.path.join(os.getcwd(), "public", "db")
    UPLOAD_ROOT = os.getenv("UPLOADS_PATH") or os.path.join(os.getcwd(), "public", "uploads")
    UPLOAD_DIR = os.getenv("UPLOAD_DIR")  # defaults to UPLOAD_ROOT/avatars in create_app
    PUBLIC_URL = _public_url()
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024
    ALLOWED_AVATAR_MIMETYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")

    # Flask-Limiter; RATE_LIMIT_MAX / AUTH_RATE_LIMIT_MAX are requests per 15 minutes
    RATELIMIT_ENABLED = True
    RATE_LIMIT_DEFAULT = f"{int(os.getenv('RATE_LIMIT_MAX', '100'))} per 15 minutes"
    AUTH_RATE_LIMIT = f"{int(os.getenv('AUTH_RATE_LIMIT_MAX', '5'))} per 15 minutes"
    RATELIMIT_STORAGE_URI = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")
    RATELIMIT_HEADERS_ENABLED = True


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    APP_ENV = "dev"


class TestingConfig(BaseConfig):
    TESTING = True
    APP_ENV = "test"
    JWT_SECRET = "test-access-secret-0123456789abcdef"
    JWT_REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"
    PUBLIC_URL = "http://localhost"
    RATELIMIT_ENABLED = False


class ProductionConfig(BaseConfig):
    DEBUG = False
    APP_ENV = "prod"


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig


def validate_config(config) -> None:
    """
    Refuse to start a production app with the shipped secrets.
    Development and testing keep the insecure defaults.
    """
    if config.get("APP_ENV", "dev").lower() not in ["prod", "production"]:
        return
    access = config.get("JWT_SECRET")
    refresh = config.get("JWT_REFRESH_SECRET")
    if not access or access == DEFAULT_JWT_SECRET:
        raise RuntimeError("JWT_SECRET must be set in production")
    if not refresh or refresh == DEFAULT_JWT_REFRESH_SECRET:
        raise RuntimeError("JWT_REFRESH_SECRET must be set in production")
    if access == refresh:
        raise RuntimeError("JWT_SECRET and JWT_REFRESH_SECRET must differ")
