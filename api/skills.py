from __future__ import annotations

from flask import Blueprint, request, jsonify, g, abort

from models.base_model import utcnow_iso
from models.schemas.skill import SkillCreateSchema, SkillUpdateSchema
from models.skill import SkillRepository
from models.subcategory import SubcategoryRepository
from utils.decorators import jwt_required

bp = Blueprint("skills", __name__)

skill_create_schema = SkillCreateSchema()
skill_update_schema = SkillUpdateSchema(partial=True)

skills = SkillRepository()
subcategories = SubcategoryRepository()

PROPOSAL_TYPES = ("offer", "request")


@bp.get("/skills")
def list_skills():
    """
    List skills (filters: userId, subcategoryId, type_of_proposal)
    ---
    tags: [Skills]
    parameters:
      - { in: query, name: userId, type: integer }
      - { in: query, name: subcategoryId, type: integer }
      - { in: query, name: type_of_proposal, type: string, enum: [offer, request] }
    responses:
      200: { description: OK }
    """
    criteria = {}
    user_id = request.args.get("userId", type=int)
    subcategory_id = request.args.get("subcategoryId", type=int)
    proposal = request.args.get("type_of_proposal")
    if user_id is not None:
        criteria["userId"] = user_id
    if subcategory_id is not None:
        criteria["subcategoryId"] = subcategory_id
    if proposal:
        if proposal not in PROPOSAL_TYPES:
            abort(400, description="type_of_proposal must be offer or request")
        criteria["type_of_proposal"] = proposal
    return jsonify(skills.find(**criteria))


@bp.get("/skills/<int:skill_id>")
def get_skill(skill_id: int):
    """
    Get a skill by id
    ---
    tags: [Skills]
    parameters:
      - { in: path, name: skill_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    skill = skills.get(skill_id)
    if not skill:
        abort(404, description="Skill not found")
    return jsonify(skill)


@bp.post("/skills")
@jwt_required()
def create_skill():
    """
    Create a skill owned by the caller
    ---
    tags: [Skills]
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            subcategoryId: { type: integer }
            title: { type: string }
            description: { type: string }
            type_of_proposal: { type: string, enum: [offer, request] }
            images: { type: array, items: { type: string } }
    responses:
      201: { description: Created }
      400: { description: Validation error or unknown subcategory }
    """
    data = skill_create_schema.load(request.get_json(silent=True) or {})
    if not subcategories.get(data["subcategoryId"]):
        abort(400, description=f"Subcategory with ID {data['subcategoryId']} not found")

    skill = skills.add({
        **data,
        "userId": g.current_user["id"],
        "modified_datetime": utcnow_iso(),
    })
    return jsonify(skill), 201


@bp.put("/skills/<int:skill_id>")
@jwt_required()
def update_skill(skill_id: int):
    """
    Partially update a skill
    ---
    tags: [Skills]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: skill_id, type: integer, required: true }
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            subcategoryId: { type: integer }
            title: { type: string }
            description: { type: string }
            type_of_proposal: { type: string, enum: [offer, request] }
            images: { type: array, items: { type: string } }
    responses:
      200: { description: OK }
      400: { description: Validation error or unknown subcategory }
      404: { description: Not found }
    """
    data = skill_update_schema.load(request.get_json(silent=True) or {})
    if not skills.get(skill_id):
        abort(404, description="Skill not found")
    if "subcategoryId" in data and not subcategories.get(data["subcategoryId"]):
        abort(400, description=f"Subcategory with ID {data['subcategoryId']} not found")

    skill = skills.update(skill_id, {**data, "modified_datetime": utcnow_iso()})
    return jsonify(skill)


@bp.delete("/skills/<int:skill_id>")
@jwt_required()
def delete_skill(skill_id: int):
    """
    Delete a skill
    ---
    tags: [Skills]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: skill_id, type: integer, required: true }
    responses:
      204: { description: Deleted }
      404: { description: Not found }
    """
    if not skills.delete(skill_id):
        abort(404, description="Skill not found")
    return ("", 204)
