import logging
import os

from flask import Flask, send_from_directory
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config, validate_config
from .errors import register_error_handlers
from .utils.rate_limit import limiter
from models import storage  # FileStorage singleton bound to DB_PATH below

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "SkillSwap API",
        "version": API_VERSION,
        "description": "REST API for the SkillSwap skill-exchange platform: users, skills, categories, cities and likes.",
    },
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}

ENDPOINTS = {
    "health": "/api/health",
    "auth": "/api/auth",
    "users": "/api/users",
    "skills": "/api/skills",
    "categories": "/api/categories",
    "subcategories": "/api/subcategories",
    "cities": "/api/cities",
    "likes": "/api/likes",
}


def api_info(include_api_path: bool = False) -> dict:
    info = {"message": "SkillSwap API", "version": API_VERSION}
    if include_api_path:
        info["api"] = "/api"
    info["endpoints"] = ENDPOINTS
    return info


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    `overrides` is applied on top of the selected config class (tests use it
    to point DB_PATH and UPLOAD_ROOT at temporary directories).
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)
    if not app.config.get("UPLOAD_DIR"):
        app.config["UPLOAD_DIR"] = os.path.join(app.config["UPLOAD_ROOT"], "avatars")
    validate_config(app.config)

    storage.init_app(app)

    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    )

    # Per-IP request limits (disabled under TestingConfig)
    limiter.init_app(app)

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp
    from .skills import bp as skills_bp
    from .categories import bp as categories_bp
    from .subcategories import bp as subcategories_bp
    from .cities import bp as cities_bp
    from .likes import bp as likes_bp

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(users_bp, url_prefix="/api")
    app.register_blueprint(skills_bp, url_prefix="/api")
    app.register_blueprint(categories_bp, url_prefix="/api")
    app.register_blueprint(subcategories_bp, url_prefix="/api")
    app.register_blueprint(cities_bp, url_prefix="/api")
    app.register_blueprint(likes_bp, url_prefix="/api")

    from .commands import register_commands
    register_commands(app)

    @app.route("/")
    def root():
        return api_info(include_api_path=True), 200

    @app.route("/api", strict_slashes=False)
    def api_root():
        return api_info(), 200

    # Uploaded avatars: /uploads/avatars/<file> -> UPLOAD_ROOT/avatars/<file>
    @app.route("/uploads/<path:filename>")
    def uploads(filename):
        return send_from_directory(app.config["UPLOAD_ROOT"], filename)

    logger.info("SkillSwap API created (env=%s, uploads=%s)", app.config["APP_ENV"], app.config["UPLOAD_DIR"])
    return app
