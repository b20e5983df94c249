from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix
from marshmallow import ValidationError
from flask_smorest import Api

from .config import load_config
from .extensions import db, redis_connection, cors
from .cli import register_commands
from .routes import register_publish_routes
from .services.social.errors import PostNotFoundError
from .utils.error_handlers import (
    handle_permission_error, handle_validation_error, handle_post_not_found,
)


def create_publish_app(config_overrides=None, init_extensions=True):
    app = Flask(__name__)

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=1)

    load_config(app)
    if config_overrides:
        app.config.update(config_overrides)

    app.config["API_TITLE"] = "Crosspost Publish API"
    app.config["API_VERSION"] = "v1"
    app.config["OPENAPI_VERSION"] = "3.0.3"
    app.config["OPENAPI_URL_PREFIX"] = "/api"
    app.config["OPENAPI_JSON_PATH"] = "openapi.json"
    app.config["OPENAPI_SWAGGER_UI_PATH"] = "/docs"
    app.config["OPENAPI_SWAGGER_UI_URL"] = "https://cdn.jsdelivr.net/npm/swagger-ui-dist/"

    api = Api(app)

    if init_extensions:
        db.init_app(app)
        redis_connection.init_app(app)
    cors.init_app(app)

    app.errorhandler(PermissionError)(handle_permission_error)
    app.errorhandler(ValidationError)(handle_validation_error)
    app.errorhandler(PostNotFoundError)(handle_post_not_found)

    register_publish_routes(app, api)
    register_commands(app)

    return app
