import logging
from typing import Any, Mapping

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import storage
from utils.auth_flow import AuthFlow
from utils.security import TokenCodec, CredentialVerifier
from utils.whitelist import RefreshWhitelist

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Shop Auth API",
        "version": "1.0.0",
        "description": "Signup, login, token refresh, cart and checkout.",
    },
    "basePath": "/",
    "schemes": ["http"],
    "securityDefinitions": {
        "AccessToken": {"type": "apiKey", "name": "access_token", "in": "header"},
        "RefreshToken": {"type": "apiKey", "name": "refresh_token", "in": "header"},
    },
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


# Supplied by the environment in production; the factory refuses to start without them
REQUIRED_SETTINGS = (
    "JWT_SECRET",
    "DATABASE_URL",
    "ACCESS_TOKEN_EXPIRES",
    "REFRESH_TOKEN_EXPIRES",
    "PASSWORD_HASH_TIME_COST",
    "PASSWORD_HASH_MEMORY_COST",
)


def build_auth_flow(config: Mapping[str, Any]) -> AuthFlow:
    """Wire codec, verifier and whitelist from a finished config."""
    codec = TokenCodec(
        secret=config["JWT_SECRET"],
        access_ttl=config["ACCESS_TOKEN_EXPIRES"],
        refresh_ttl=config["REFRESH_TOKEN_EXPIRES"],
        algorithm=config["JWT_ALGORITHM"],
        issuer=config["JWT_ISSUER"],
    )
    verifier = CredentialVerifier(
        time_cost=config["PASSWORD_HASH_TIME_COST"],
        memory_cost=config["PASSWORD_HASH_MEMORY_COST"],
    )
    whitelist = RefreshWhitelist(storage, ttl=config["REFRESH_TOKEN_EXPIRES"])
    return AuthFlow(storage, codec, verifier, whitelist)


def create_app(config_name: str | None = None, overrides: Mapping[str, Any] | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    `overrides` is applied on top of the selected config class (tests use it).
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    missing = [key for key in REQUIRED_SETTINGS if app.config.get(key) in (None, "")]
    if missing:
        raise RuntimeError(f"Missing required settings: {', '.join(missing)}")

    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)
    register_error_handlers(app)

    storage.reload(app.config["DATABASE_URL"])
    # Signing secret and TTLs are fixed here for the life of the process
    app.extensions["auth_flow"] = build_auth_flow(app.config)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .cart import bp as cart_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(cart_bp)

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Shop Auth API",
            "docs": "/apidocs/",
            "health": "/health",
        }, 200

    return app
