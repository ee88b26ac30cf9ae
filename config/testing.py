"""
Testing configuration for the ICU Guard API
"""
from config.settings import Config


class TestingConfig(Config):
    """Testing configuration with deterministic, isolated defaults"""

    ENV_NAME = 'testing'
    TESTING = True
    DEBUG = False

    SECRET_KEY = 'test-secret-key'
    DEPLOY_ENV = 'test'

    # Disable rate limiting in tests
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = 'memory://'

    # Logging
    LOG_LEVEL = 'WARNING'

    # CORS - allow local dev servers in tests
    FRONTEND_URL = None
    CORS_ALLOW_ALL = False
    CORS_ORIGINS = ['http://localhost:5173', 'http://localhost:3000']

    # Sanitization, independent of the environment
    SANITIZE_SKIP_PREFIXES = ('/api/uploads/', '/api/webhooks/')
    SANITIZE_REPLACE_OPERATOR_KEYS = False
    SANITIZE_COLLAPSE_REPEATED_PARAMS = False
    SANITIZE_REJECT_SQL_INJECTION = False
