"""
Centralized error handling
Every error leaves the API as JSON: {"success": false, "message": ...}
"""
from flask import jsonify
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """Error carrying the HTTP status code it should be rendered with"""

    def __init__(self, message, status_code=500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SecurityPolicyViolation(ApiError):
    """Request rejected by the input sanitizer"""

    def __init__(self, message='Request rejected by input policy', fields=None):
        super().__init__(message, status_code=400)
        self.fields = list(fields or [])


def _error_response(message, status_code):
    return jsonify({'success': False, 'message': message}), status_code


def register_error_handlers(app):
    """Attach JSON error handlers to the Flask app"""

    @app.errorhandler(ApiError)
    def handle_api_error(e):
        app.logger.warning('API error (%s): %s', e.status_code, e.message)
        return _error_response(e.message, e.status_code)

    @app.errorhandler(429)
    def ratelimit_handler(e):
        # RateLimitExceeded carries the breached limit; its window length is
        # the upper bound on the wait. Plain 429 aborts fall back to a minute.
        limit = getattr(e, 'limit', None)
        rate_item = getattr(limit, 'limit', None)
        retry_after_seconds = rate_item.get_expiry() if rate_item is not None else 60
        return jsonify({
            'error': 'Too many requests from this IP, please try again later.',
            'retry_after': retry_after_seconds,
        }), 429

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return _error_response(e.description, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        app.logger.exception('Unhandled error: %s', e)
        return _error_response('An unexpected error occurred.', 500)
