from flask import jsonify
from werkzeug.exceptions import HTTPException, NotFound
from marshmallow import ValidationError
import logging

from models.schemas.common import flatten_errors

logger = logging.getLogger(__name__)

TOO_MANY_REQUESTS = "Too many requests from this IP, please try again later"


def error_response(error: str, status: int, details: list | None = None, **extra):
    payload = {"error": error, **extra}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def register_error_handlers(app):
    # 404 Not Found (unknown route or abort(404) without a description)
    @app.errorhandler(404)
    def not_found(e):
        description = getattr(e, "description", None)
        if description and description != NotFound.description:
            return error_response(description, 404)
        return error_response(
            "Not Found",
            404,
            message="Endpoint not found. See /api for the list of available endpoints.",
        )

    # 429 from the rate limiter; per-route limits carry their own message
    @app.errorhandler(429)
    def too_many_requests(e):
        limit = getattr(e, "limit", None)
        message = getattr(limit, "error_message", None) or TOO_MANY_REQUESTS
        return error_response(message, 429)

    # Marshmallow validation errors map to 400 with per-field details
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        logger.debug("Validation failed: %s", err.messages)
        return error_response("Validation error", 400, details=flatten_errors(err.messages))

    # Werkzeug HTTPExceptions (abort() and utils.exceptions) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 500
        if status >= 500:
            logger.error("%s: %s", err.__class__.__name__, err.description, exc_info=err.__cause__)
            return error_response("Internal server error", status)
        return error_response(err.description, status)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        return error_response("Internal server error", 500)
