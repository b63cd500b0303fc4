"""
Authentication blueprint:
- POST /auth/register  (multipart form with avatar)
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- GET  /auth/me

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and long-lived refresh tokens, each class
  signed with its own secret
- Keeps exactly one refresh token per user in the refresh-token store, so a
  new login supersedes the previous refresh token and logout revokes it
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, g, abort

from api.utils.rate_limit import auth_rate_limit
from api.utils.uploads import (
    UploadError,
    avatar_url,
    create_thumbnails,
    remove_avatar,
    save_avatar,
    validate_avatar,
)
from models.base_model import utcnow_iso
from models.city import CityRepository
from models.refresh_token import RefreshTokenRepository
from models.schemas.auth import LoginSchema, RefreshSchema, RegisterSchema
from models.user import UserRepository
from utils.decorators import jwt_required
from utils.exceptions import NotFoundError, TokenRevokedError
from utils.security import (
    create_access_token,
    create_tokens,
    hash_password,
    verify_password,
    verify_refresh_token,
)

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()

INVALID_CREDENTIALS = "Invalid email or password"

users = UserRepository()
cities = CityRepository()
refresh_tokens = RefreshTokenRepository()


def _issue_tokens(user: dict) -> dict:
    """Sign both tokens and make the refresh token the user's only live one."""
    tokens = create_tokens({"id": user["id"], "email": user["email"]})
    refresh_tokens.save(user["id"], tokens["refreshToken"])
    return tokens


@bp.post("/register")
@auth_rate_limit
def register():
    """
    Register a new user with an avatar.
    ---
    tags:
      - Auth
    consumes:
      - multipart/form-data
    parameters:
      - { in: formData, name: email, type: string, required: true }
      - { in: formData, name: password, type: string, required: true }
      - { in: formData, name: name, type: string, required: true }
      - { in: formData, name: firstName, type: string, required: true }
      - { in: formData, name: lastName, type: string, required: true }
      - { in: formData, name: dateOfBirth, type: string, required: true }
      - { in: formData, name: gender, type: string, enum: [M, F], required: true }
      - { in: formData, name: cityId, type: integer, required: true }
      - { in: formData, name: avatar, type: file, required: true }
    responses:
      201:
        description: Created, returns user and both tokens
      400:
        description: Validation error, missing or unreadable avatar (min 200x200), duplicate email or unknown city
    """
    data = register_schema.load(request.form.to_dict())

    avatar = request.files.get("avatar")
    if avatar is None or not avatar.filename:
        abort(400, description="Avatar is required")
    try:
        validate_avatar(avatar)
    except UploadError as e:
        abort(400, description=str(e))

    logger.info("Registration attempt for %s", data["email"])

    if users.find_by_email(data["email"]):
        abort(400, description="User with this email already exists")

    if not cities.get(data["cityId"]):
        abort(400, description=f"City with ID {data['cityId']} not found")

    pw_hash = hash_password(data["password"])
    filename = save_avatar(avatar)
    create_thumbnails(filename)
    now = utcnow_iso()
    user = {
        "email": data["email"],
        "password": pw_hash,
        "name": data["name"],
        "firstName": data["firstName"],
        "lastName": data["lastName"],
        "dateOfBirth": data["dateOfBirth"],
        "gender": data["gender"],
        "cityId": data["cityId"],
        "avatarUrl": avatar_url(filename),
        "dateOfRegistration": now,
        "lastLoginDatetime": now,
    }
    try:
        user = users.add(user)
    except Exception:
        remove_avatar(filename)
        raise

    try:
        tokens = _issue_tokens(user)
    except Exception:
        # keep the email free for a retry
        users.delete(user["id"])
        remove_avatar(filename)
        raise

    logger.info("User %s registered", user["id"])

    return jsonify({"user": users.to_public(user), **tokens}), 201


@bp.post("/login")
@auth_rate_limit
def login():
    """
    Login: return the user with access and refresh tokens
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns user and tokens)
      400:
        description: Validation error
      401:
        description: Invalid email or password
    """
    data = login_schema.load(request.get_json(silent=True) or {})

    user = users.find_by_email(data["email"])
    if not user or not verify_password(data["password"], user.get("password")):
        logger.warning("Failed login for %s", data["email"])
        abort(401, description=INVALID_CREDENTIALS)

    user = users.update(user["id"], {"lastLoginDatetime": utcnow_iso()})
    tokens = _issue_tokens(user)
    logger.info("User %s logged in", user["id"])

    return jsonify({"user": users.to_public(user), **tokens}), 200


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new access token (the refresh token is kept)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: OK (returns accessToken)
      400:
        description: refreshToken missing
      403:
        description: Invalid, expired or revoked refresh token
    """
    token = refresh_schema.load(request.get_json(silent=True) or {}).get("refreshToken")
    if not token:
        abort(400, description="Refresh token is required")

    identity = verify_refresh_token(token)
    if identity is None:
        abort(403, description="Invalid or expired refresh token")

    if not refresh_tokens.is_valid(identity["id"], token):
        logger.warning("Revoked refresh token presented for user %s", identity["id"])
        raise TokenRevokedError()

    return jsonify({"accessToken": create_access_token(identity)}), 200


@bp.post("/logout")
@jwt_required()
def logout():
    """
    Logout: revokes the supplied refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: Logged out (also when nothing had to be revoked)
      401:
        description: Unauthorized
    """
    token = refresh_schema.load(request.get_json(silent=True) or {}).get("refreshToken")
    if token:
        refresh_tokens.revoke(g.current_user["id"], token)
    logger.info("User %s logged out", g.current_user["id"])
    return jsonify({"message": "Logged out successfully"}), 200


@bp.get("/me")
@jwt_required()
def me():
    """
    Get current user info
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
      404:
        description: User no longer exists
    """
    user = users.get(g.current_user["id"])
    if not user:
        raise NotFoundError(description="User not found")
    return jsonify(users.to_public(user)), 200
