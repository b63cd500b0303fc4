from flask import Blueprint

bp = Blueprint("health", __name__)

@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
        schema:
          type: object
          properties:
            status:
              type: string
              example: ok
            message:
              type: string
              example: SkillSwap API is running
    """
    return {"status": "ok", "message": "SkillSwap API is running"}, 200
