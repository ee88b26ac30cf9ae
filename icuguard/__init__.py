import os

from flask import Flask
from flask_cors import CORS


def _allowed_origins(app):
    if app.config['CORS_ALLOW_ALL']:
        return '*'
    origins = [app.config.get('FRONTEND_URL')] + list(app.config['CORS_ORIGINS'])
    return [origin for origin in origins if origin]


def create_app(config_name=None, config_overrides=None):
    """Flask application factory"""
    app = Flask(__name__)

    # Load configuration
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    from config import config
    app.config.from_object(config.get(config_name, config['default']))
    if config_overrides:
        app.config.update(config_overrides)

    # app.logger is the "icuguard" logger, parent of every module logger here
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions
    from icuguard.extensions import limiter, request_sanitizer
    origins = _allowed_origins(app)
    app.logger.info('CORS configuration: %s', origins)
    CORS(app, origins=origins, supports_credentials=True)
    limiter.init_app(app)
    request_sanitizer.init_app(app)

    from icuguard.middleware.security_headers import set_security_headers
    app.after_request(set_security_headers)

    from icuguard.errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from icuguard.routes import health_bp
    app.register_blueprint(health_bp)

    from icuguard.cli import register_commands
    register_commands(app)

    return app
