from __future__ import annotations

from flask import Blueprint, request, jsonify, abort

from models.category import CategoryRepository
from models.schemas.subcategory import SubcategorySchema
from models.subcategory import SubcategoryRepository
from utils.decorators import jwt_required

bp = Blueprint("subcategories", __name__)

subcategory_schema = SubcategorySchema()

subcategories = SubcategoryRepository()
categories = CategoryRepository()


def _require_category(category_id: int) -> None:
    if not categories.get(category_id):
        abort(400, description=f"Category with ID {category_id} not found")


@bp.get("/subcategories")
def list_subcategories():
    """
    List subcategories, optionally of one category
    ---
    tags: [Subcategories]
    parameters:
      - { in: query, name: categoryId, type: integer }
    responses:
      200: { description: OK }
    """
    category_id = request.args.get("categoryId", type=int)
    if category_id is not None:
        return jsonify(subcategories.find(categoryId=category_id))
    return jsonify(subcategories.all())


@bp.get("/subcategories/<int:subcategory_id>")
def get_subcategory(subcategory_id: int):
    """
    Get a subcategory by id
    ---
    tags: [Subcategories]
    parameters:
      - { in: path, name: subcategory_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    s = subcategories.get(subcategory_id)
    if not s:
        abort(404, description="Subcategory not found")
    return jsonify(s)


@bp.post("/subcategories")
@jwt_required()
def create_subcategory():
    """
    Create a subcategory inside an existing category
    ---
    tags: [Subcategories]
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            categoryId: { type: integer }
            name: { type: string }
    responses:
      201: { description: Created }
      400: { description: Validation error or unknown category }
    """
    data = subcategory_schema.load(request.get_json(silent=True) or {})
    _require_category(data["categoryId"])
    return jsonify(subcategories.add(data)), 201


@bp.put("/subcategories/<int:subcategory_id>")
@jwt_required()
def update_subcategory(subcategory_id: int):
    """
    Update a subcategory
    ---
    tags: [Subcategories]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: subcategory_id, type: integer, required: true }
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            categoryId: { type: integer }
            name: { type: string }
    responses:
      200: { description: OK }
      400: { description: Validation error or unknown category }
      404: { description: Not found }
    """
    data = subcategory_schema.load(request.get_json(silent=True) or {})
    if not subcategories.get(subcategory_id):
        abort(404, description="Subcategory not found")
    _require_category(data["categoryId"])
    return jsonify(subcategories.update(subcategory_id, data))


@bp.delete("/subcategories/<int:subcategory_id>")
@jwt_required()
def delete_subcategory(subcategory_id: int):
    """
    Delete a subcategory
    ---
    tags: [Subcategories]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: subcategory_id, type: integer, required: true }
    responses:
      204: { description: Deleted }
      404: { description: Not found }
    """
    if not subcategories.delete(subcategory_id):
        abort(404, description="Subcategory not found")
    return ("", 204)
