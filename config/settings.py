"""
Configuration settings for different environments
"""
import logging
import os
import secrets

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default='false'):
    return os.environ.get(name, default).lower() in ['true', 'on', '1']


def _env_list(name, default=''):
    return [item.strip() for item in os.environ.get(name, default).split(',') if item.strip()]


def _require_in_production(var_name, default):
    """Return env var value. Outside development, warn loudly if still using default."""
    value = os.environ.get(var_name, '')
    if value:
        return value
    env = os.environ.get('FLASK_ENV', 'development')
    if env != 'development' and default:
        logging.getLogger(__name__).warning(
            '%s is using an insecure default. Set it via environment variable!', var_name
        )
    return default


class Config:
    """Base configuration"""
    ENV_NAME = 'base'
    SECRET_KEY = _require_in_production('SECRET_KEY', 'dev-only-' + secrets.token_hex(16))
    DEPLOY_ENV = os.environ.get('DEPLOY_ENV', 'unknown')

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # CORS: explicit frontend plus local dev servers; CORS_ALLOW_ALL for quick testing
    FRONTEND_URL = os.environ.get('FRONTEND_URL')
    CORS_ALLOW_ALL = _env_flag('CORS_ALLOW_ALL')
    CORS_ORIGINS = _env_list(
        'CORS_ORIGINS', 'http://localhost:3001,http://localhost:3002,http://localhost:5173'
    )

    # Request limits
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB

    # Rate limiting (Flask-Limiter reads RATELIMIT_*)
    RATELIMIT_ENABLED = True
    RATELIMIT_DEFAULT = os.environ.get('RATELIMIT_DEFAULT', '1000 per hour')
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL') or 'memory://'
    RATELIMIT_HEADERS_ENABLED = True

    # Security headers
    CONTENT_SECURITY_POLICY = (
        "default-src 'self'; style-src 'self' 'unsafe-inline'; "
        "script-src 'self'; img-src 'self' data: https:"
    )
    ENFORCE_HSTS = False

    # Input sanitization
    SANITIZE_SKIP_PREFIXES = tuple(_env_list('SANITIZE_SKIP_PREFIXES', '/api/uploads/,/api/webhooks/'))
    SANITIZE_REPLACE_OPERATOR_KEYS = True
    SANITIZE_REPLACE_WITH = '_'
    SANITIZE_COLLAPSE_REPEATED_PARAMS = True
    SANITIZE_REJECT_SQL_INJECTION = _env_flag('SANITIZE_REJECT_SQL_INJECTION')

    # Policy overrides; None keeps the built-in lists
    SANITIZER_DANGEROUS_KEYS = None
    SANITIZER_ALLOWED_OPERATORS = None
    SANITIZER_ALLOWED_URL_SCHEMES = None


class DevelopmentConfig(Config):
    """Development configuration"""
    ENV_NAME = 'development'
    DEBUG = True
    TESTING = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')
    RATELIMIT_DEFAULT = os.environ.get('RATELIMIT_DEFAULT', '10000 per hour')


class ProductionConfig(Config):
    """Production configuration"""
    ENV_NAME = 'production'
    DEBUG = False
    TESTING = False

    # Enforce HTTPS
    ENFORCE_HSTS = True
    CORS_ALLOW_ALL = False
