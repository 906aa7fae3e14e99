from flask import Flask, current_app
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config, finalize_config
from .errors import register_error_handlers
from models import DBStorage
from utils.log import configure_logging
from utils.sweeper import TokenSweeper
from utils.tokens import RefreshTokenStore

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Bookmark Management API",
        "version": "1.0.0",
        "description": "REST API for managing personal bookmarks, categories and tags.",
    },
    "basePath": "/",
    "schemes": ["http"],
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


def get_storage() -> DBStorage:
    """The application's DBStorage (set up by create_app)."""
    return current_app.extensions["storage"]


def get_refresh_tokens() -> RefreshTokenStore:
    return current_app.extensions["refresh_tokens"]


def create_app(config_name: str | None = None, config_overrides: dict | None = None,
               storage: DBStorage | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    The database handle, refresh-token store and sweeper are created here,
    one set per app, and kept in app.extensions.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    if config_overrides:
        app.config.update(config_overrides)
    finalize_config(app.config)

    if not app.testing:
        configure_logging(app.config["LOG_LEVEL"])

    origins = [o.strip() for o in str(app.config.get("CORS_ORIGINS", "*")).split(",") if o.strip()]
    CORS(
        app,
        resources={r"/*": {"origins": origins}},
        allow_headers=["Authorization", "Content-Type"],
        max_age=86400,
    )

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    if storage is None:
        storage = DBStorage(app.config["DATABASE_URL"], echo=app.config["SQL_ECHO"])
    storage.reload()
    refresh_tokens = RefreshTokenStore(storage, app.config["JWT_REFRESH_LIFETIME"])
    sweeper = TokenSweeper(refresh_tokens, interval_s=app.config["TOKEN_SWEEP_INTERVAL_SECONDS"])
    app.extensions["storage"] = storage
    app.extensions["refresh_tokens"] = refresh_tokens
    app.extensions["token_sweeper"] = sweeper

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp
    from .categories import bp as categories_bp
    from .tags import bp as tags_bp
    from .bookmarks import bp as bookmarks_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(categories_bp, url_prefix="/api/categories")
    app.register_blueprint(tags_bp, url_prefix="/api/tags")
    app.register_blueprint(bookmarks_bp, url_prefix="/api/bookmarks")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # This calls scoped_session.remove(), preventing connection leaks
        storage.close()

    if app.config["TOKEN_SWEEP_ENABLED"]:
        sweeper.start()

    return app
