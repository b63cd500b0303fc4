from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, g, abort

from models.base_model import utcnow_iso
from models.like import LikeRepository
from models.schemas.like import LikeCreateSchema, LikesInfoSchema
from models.user import UserRepository
from utils.decorators import jwt_optional, jwt_required
from utils.exceptions import AuthorizationError, ConflictError

logger = logging.getLogger(__name__)

bp = Blueprint("likes", __name__)

like_create_schema = LikeCreateSchema()
likes_info_schema = LikesInfoSchema()

likes = LikeRepository()
users = UserRepository()


def _viewer_id() -> int | None:
    current = getattr(g, "current_user", None)
    return current["id"] if current else None


@bp.post("/likes/users-info")
@jwt_optional()
def users_likes_info():
    """
    Like counters for several users at once
    ---
    tags: [Likes]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            userIds: { type: array, items: { type: integer } }
    responses:
      200: { description: "[{userId, likesCount, isLikedByCurrentUser}]" }
      400: { description: userIds missing or empty }
    """
    data = likes_info_schema.load(request.get_json(silent=True) or {})
    all_likes = likes.all()
    viewer = _viewer_id()
    result = [{"userId": uid, **likes.summary(all_likes, uid, viewer)} for uid in data["userIds"]]
    logger.debug("Likes info for %d users (viewer %s)", len(result), viewer)
    return jsonify(result)


@bp.get("/likes/users-info/<int:user_id>")
@jwt_optional()
def user_likes_info(user_id: int):
    """
    Like counters for one user
    ---
    tags: [Likes]
    parameters:
      - { in: path, name: user_id, type: integer, required: true }
    responses:
      200: { description: "{userId, likesCount, isLikedByCurrentUser}" }
    """
    return jsonify({"userId": user_id, **likes.summary(likes.all(), user_id, _viewer_id())})


@bp.get("/likes/<int:like_id>")
def get_like(like_id: int):
    """
    Get a like by id
    ---
    tags: [Likes]
    parameters:
      - { in: path, name: like_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    like = likes.get(like_id)
    if not like:
        abort(404, description="Like not found")
    return jsonify(like)


@bp.post("/likes")
@jwt_required()
def create_like():
    """
    Like another user (optionally for one of their skills)
    ---
    tags: [Likes]
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            toUserId: { type: integer }
            skillId: { type: integer }
    responses:
      201: { description: Created }
      400: { description: Validation error, self-like or unknown user }
      409: { description: Already liked }
    """
    data = like_create_schema.load(request.get_json(silent=True) or {})
    from_user_id = g.current_user["id"]
    to_user_id = data["toUserId"]

    if from_user_id == to_user_id:
        abort(400, description="You cannot like yourself")
    if not users.get(to_user_id):
        abort(400, description=f"User with ID {to_user_id} not found")
    if likes.find_pair(from_user_id, to_user_id):
        raise ConflictError(description="Like already exists")

    like = {"fromUserId": from_user_id, "toUserId": to_user_id}
    if data.get("skillId") is not None:
        like["skillId"] = data["skillId"]
    like["createdAt"] = utcnow_iso()
    return jsonify(likes.add(like)), 201


@bp.delete("/likes/<int:like_id>")
@jwt_required()
def delete_like(like_id: int):
    """
    Remove one of your own likes
    ---
    tags: [Likes]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: like_id, type: integer, required: true }
    responses:
      204: { description: Deleted }
      403: { description: Not your like }
      404: { description: Not found }
    """
    like = likes.get(like_id)
    if not like:
        abort(404, description="Like not found")
    if like.get("fromUserId") != g.current_user["id"]:
        raise AuthorizationError()
    likes.delete(like_id)
    return ("", 204)


@bp.delete("/likes")
@jwt_required()
def delete_like_by_user():
    """
    Remove your like of the user given by ?toUserId=
    ---
    tags: [Likes]
    security:
      - Bearer: []
    parameters:
      - { in: query, name: toUserId, type: integer, required: true }
    responses:
      204: { description: Deleted }
      400: { description: toUserId missing }
      404: { description: Not found }
    """
    to_user_id = request.args.get("toUserId", type=int)
    if to_user_id is None:
        abort(400, description="toUserId is required")
    like = likes.find_pair(g.current_user["id"], to_user_id)
    if not like:
        abort(404, description="Like not found")
    likes.delete(like["id"])
    return ("", 204)
