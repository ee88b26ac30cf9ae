"""
Shared Flask extension instances.

Created as a separate module so blueprints can import them without pulling
in the application factory.
"""

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from icuguard.middleware.sanitize_request import RequestSanitizer

# Storage and default limits come from RATELIMIT_* config at init_app() time.
limiter = Limiter(key_func=get_remote_address)

request_sanitizer = RequestSanitizer()
