from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, g, abort

from models.city import CityRepository
from models.like import LikeRepository
from models.refresh_token import RefreshTokenRepository
from models.schemas.user import UserUpdateSchema
from models.user import UserRepository
from utils.decorators import jwt_optional, jwt_required, self_required

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__)

user_update_schema = UserUpdateSchema()

users = UserRepository()
likes = LikeRepository()
cities = CityRepository()
refresh_tokens = RefreshTokenRepository()


def _viewer_id() -> int | None:
    current = getattr(g, "current_user", None)
    return current["id"] if current else None


def _with_likes(user: dict, all_likes: list) -> dict:
    return {**users.to_public(user), **likes.summary(all_likes, user["id"], _viewer_id())}


@bp.get("/users")
@jwt_optional()
def list_users():
    """
    List all users with like counters
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK; isLikedByCurrentUser is false for anonymous callers
    """
    all_likes = likes.all()
    return jsonify([_with_likes(u, all_likes) for u in users.all()])


@bp.get("/users/<int:user_id>")
@jwt_optional()
def get_user(user_id: int):
    """
    Get one user with like counters
    ---
    tags:
      - Users
    parameters:
      - in: path
        name: user_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    user = users.get(user_id)
    if not user:
        abort(404, description="User not found")
    return jsonify(_with_likes(user, likes.all()))


@bp.put("/users/<int:user_id>")
@jwt_required()
@self_required()
def update_user(user_id: int):
    """
    Update own profile. password, email, id and other unlisted keys are rejected.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: integer
        required: true
      - in: body
        name: body
        schema:
          type: object
          properties:
            name: { type: string }
            firstName: { type: string }
            lastName: { type: string }
            dateOfBirth: { type: string }
            gender: { type: string, enum: [M, F] }
            cityId: { type: integer }
    responses:
      200: { description: OK }
      400: { description: Validation error }
      401: { description: Unauthorized }
      403: { description: Not your profile }
      404: { description: Not found }
    """
    data = user_update_schema.load(request.get_json(silent=True) or {})
    if "cityId" in data and not cities.get(data["cityId"]):
        abort(400, description=f"City with ID {data['cityId']} not found")

    user = users.update(user_id, data)
    if not user:
        abort(404, description="User not found")
    logger.info("User %s updated fields %s", user_id, sorted(data))
    return jsonify(users.to_public(user))


@bp.delete("/users/<int:user_id>")
@jwt_required()
@self_required()
def delete_user(user_id: int):
    """
    Delete own account
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: integer
        required: true
    responses:
      204: { description: Deleted }
      403: { description: Not your account }
      404: { description: Not found }
    """
    if not users.delete(user_id):
        abort(404, description="User not found")
    refresh_tokens.delete_by_user_id(user_id)
    logger.info("User %s deleted", user_id)
    return ("", 204)
