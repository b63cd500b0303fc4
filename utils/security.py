"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT
- two token classes (access / refresh), each signed with its own secret and
  tagged with a "type" claim so one can never stand in for the other
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from flask import current_app

from utils.exceptions import InvalidTokenError

ph = PasswordHasher()

ACCESS = "access"
REFRESH = "refresh"


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2 (random salt, embedded cost)."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against an Argon2 hash. False on any mismatch."""
    if not password or not password_hash:
        return False
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Unique token id; keeps two tokens signed in the same second distinct."""
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _secret(token_type: str) -> str:
    key = "JWT_SECRET" if token_type == ACCESS else "JWT_REFRESH_SECRET"
    return current_app.config[key]


def _create_token(identity: Mapping[str, Any], token_type: str) -> str:
    lifetime = current_app.config["ACCESS_TOKEN_EXPIRES" if token_type == ACCESS else "REFRESH_TOKEN_EXPIRES"]
    now = _now()
    payload = {
        "id": identity["id"],
        "email": identity["email"],
        "type": token_type,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
        "jti": generate_jti(),
    }
    return jwt.encode(payload, _secret(token_type), algorithm=current_app.config["JWT_ALGORITHM"])


def create_access_token(identity: Mapping[str, Any]) -> str:
    return _create_token(identity, ACCESS)


def create_refresh_token(identity: Mapping[str, Any]) -> str:
    return _create_token(identity, REFRESH)


def create_tokens(identity: Mapping[str, Any]) -> Dict[str, str]:
    return {
        "accessToken": create_access_token(identity),
        "refreshToken": create_refresh_token(identity),
    }


def _decode(token: str, expected_type: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT. Raises InvalidTokenError on a bad signature,
    expiry, missing claims or a token of the other class.
    """
    try:
        decoded = jwt.decode(
            token,
            _secret(expected_type),
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidTokenError("Token expired")
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError(f"Invalid token: {exc}")

    if decoded.get("type") != expected_type:
        raise InvalidTokenError("Wrong token type")
    if "id" not in decoded or "email" not in decoded:
        raise InvalidTokenError("Token payload is incomplete")
    return {"id": decoded["id"], "email": decoded["email"]}


def decode_access_token(token: str) -> Dict[str, Any]:
    """Identity {id, email} of a valid access token, else InvalidTokenError."""
    return _decode(token, ACCESS)


def verify_refresh_token(token: str) -> Optional[Dict[str, Any]]:
    """Identity {id, email} of a valid refresh token, None for anything else."""
    try:
        return _decode(token, REFRESH)
    except InvalidTokenError:
        return None
