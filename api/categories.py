from __future__ import annotations

from flask import Blueprint, request, jsonify, abort

from models.category import CategoryRepository
from models.schemas.category import CategorySchema
from utils.decorators import jwt_required

bp = Blueprint("categories", __name__)

category_schema = CategorySchema()

categories = CategoryRepository()


@bp.get("/categories")
def list_categories():
    """
    List categories
    ---
    tags: [Categories]
    responses:
      200: { description: OK }
    """
    return jsonify(categories.all())


@bp.get("/categories/<int:category_id>")
def get_category(category_id: int):
    """
    Get a category by id
    ---
    tags: [Categories]
    parameters:
      - in: path
        name: category_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    c = categories.get(category_id)
    if not c:
        abort(404, description="Category not found")
    return jsonify(c)


@bp.post("/categories")
@jwt_required()
def create_category():
    """
    Create a category
    ---
    tags: [Categories]
    security:
      - Bearer: []
    consumes: [application/json]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string }
    responses:
      201: { description: Created }
      400: { description: Validation error }
    """
    data = category_schema.load(request.get_json(silent=True) or {})
    c = categories.add(data)
    return jsonify(c), 201


@bp.put("/categories/<int:category_id>")
@jwt_required()
def update_category(category_id: int):
    """
    Update a category
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string }
    responses:
      200: { description: OK }
      400: { description: Validation error }
      404: { description: Not found }
    """
    data = category_schema.load(request.get_json(silent=True) or {})
    c = categories.update(category_id, data)
    if not c:
        abort(404, description="Category not found")
    return jsonify(c)


@bp.delete("/categories/<int:category_id>")
@jwt_required()
def delete_category(category_id: int):
    """
    Delete a category
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: integer
        required: true
    responses:
      204: { description: Deleted }
      404: { description: Not found }
    """
    if not categories.delete(category_id):
        abort(404, description="Category not found")
    return ("", 204)
