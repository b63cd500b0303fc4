from __future__ import annotations

from flask import Blueprint, request, jsonify, abort

from models.city import CityRepository
from models.schemas.city import CitySchema
from utils.decorators import jwt_required

bp = Blueprint("cities", __name__)

city_schema = CitySchema()

cities = CityRepository()


@bp.get("/cities")
def list_cities():
    """
    List cities
    ---
    tags: [Cities]
    responses:
      200: { description: OK }
    """
    return jsonify(cities.all())


@bp.get("/cities/<int:city_id>")
def get_city(city_id: int):
    """
    Get a city by id
    ---
    tags: [Cities]
    parameters:
      - { in: path, name: city_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    city = cities.get(city_id)
    if not city:
        abort(404, description="City not found")
    return jsonify(city)


@bp.post("/cities")
@jwt_required()
def create_city():
    """
    Create a city
    ---
    tags: [Cities]
    security:
      - Bearer: []
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
    data = city_schema.load(request.get_json(silent=True) or {})
    return jsonify(cities.add(data)), 201


@bp.put("/cities/<int:city_id>")
@jwt_required()
def update_city(city_id: int):
    """
    Rename a city
    ---
    tags: [Cities]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: city_id, type: integer, required: true }
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    data = city_schema.load(request.get_json(silent=True) or {})
    city = cities.update(city_id, data)
    if not city:
        abort(404, description="City not found")
    return jsonify(city)


@bp.delete("/cities/<int:city_id>")
@jwt_required()
def delete_city(city_id: int):
    """
    Delete a city
    ---
    tags: [Cities]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: city_id, type: integer, required: true }
    responses:
      204: { description: Deleted }
      404: { description: Not found }
    """
    if not cities.delete(city_id):
        abort(404, description="City not found")
    return ("", 204)
