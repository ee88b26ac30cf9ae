"""
Request sanitization middleware
Rewrites body, query and path parameters before they reach route handlers
"""
import logging

from flask import current_app, request
from werkzeug.datastructures import ImmutableMultiDict

from icuguard.errors import SecurityPolicyViolation
from icuguard.sanitize import (
    DEFAULT_POLICY,
    SanitizerPolicy,
    replace_operator_keys,
    sanitize_object,
)
from icuguard.utils.validators import find_sql_injection

logger = logging.getLogger(__name__)

_REQUEST_FIELDS = ('body', 'query', 'params')


def sanitize_request(req, call_next=None, policy=DEFAULT_POLICY):
    """
    Framework-neutral adapter: sanitize ``body``, ``query`` and ``params``

    Each attribute that exists and is not None is replaced with its
    structurally sanitized copy. Absent fields are left alone.

    Args:
        req: Any object exposing optional body/query/params attributes
        call_next: Optional continuation invoked with the request
        policy (SanitizerPolicy): Policy passed to sanitize_object

    Returns:
        The continuation's result, or the request itself
    """
    for name in _REQUEST_FIELDS:
        value = getattr(req, name, None)
        if value is not None:
            setattr(req, name, sanitize_object(value, policy))

    if call_next is not None:
        return call_next(req)
    return req


class RequestSanitizer:
    """
    Flask extension applying the sanitizer to every incoming request

    Handles the JSON body, form data, query args and view args. Paths listed
    in SANITIZE_SKIP_PREFIXES (file uploads, webhooks) are left untouched so
    binary payloads and third-party signatures are not corrupted.
    """

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        app.config.setdefault('SANITIZE_SKIP_PREFIXES', ())
        app.config.setdefault('SANITIZE_REPLACE_OPERATOR_KEYS', False)
        app.config.setdefault('SANITIZE_REPLACE_WITH', '_')
        app.config.setdefault('SANITIZE_COLLAPSE_REPEATED_PARAMS', False)
        app.config.setdefault('SANITIZE_REJECT_SQL_INJECTION', False)

        app.extensions['request_sanitizer'] = SanitizerPolicy.from_config(app.config)
        app.before_request(self.sanitize_current_request)

    @staticmethod
    def policy():
        return current_app.extensions['request_sanitizer']

    def sanitize_current_request(self):
        config = current_app.config
        if request.path.startswith(tuple(config['SANITIZE_SKIP_PREFIXES'])):
            return None

        policy = self.policy()
        collapse = config['SANITIZE_COLLAPSE_REPEATED_PARAMS']

        # Inspect raw input; escaping would hide quote-based patterns.
        if config['SANITIZE_REJECT_SQL_INJECTION']:
            self._reject_sql_injection(policy)

        if request.is_json:
            raw = request.get_json(silent=True)
            if raw is not None:
                # Swap werkzeug's parsed-JSON cache so request.get_json()
                # and request.json return the clean copy downstream.
                clean = self._clean(raw, policy)
                request._cached_json = (clean, clean)

        if request.args:
            request.args = self._clean_multidict(request.args, policy, collapse)

        if request.form:
            request.form = self._clean_multidict(request.form, policy, collapse)

        if request.view_args:
            request.view_args = self._clean(request.view_args, policy)

        return None

    def _clean(self, data, policy):
        if current_app.config['SANITIZE_REPLACE_OPERATOR_KEYS']:
            data = replace_operator_keys(
                data, current_app.config['SANITIZE_REPLACE_WITH'], policy
            )
        return sanitize_object(data, policy)

    def _clean_multidict(self, multidict, policy, collapse):
        values = multidict.to_dict(flat=False)
        if collapse:
            # HTTP parameter pollution: keep only the last occurrence.
            values = {key: items[-1:] for key, items in values.items()}
        return ImmutableMultiDict(self._clean(values, policy))

    def _reject_sql_injection(self, policy):
        suspicious = find_sql_injection(request.args.to_dict(flat=False), policy, 'query')
        if request.is_json:
            suspicious.extend(
                find_sql_injection(request.get_json(silent=True), policy, 'body')
            )
        if request.form:
            suspicious.extend(
                find_sql_injection(request.form.to_dict(flat=False), policy, 'form')
            )

        if suspicious:
            logger.warning(
                'Rejected %s %s: suspicious SQL in %s',
                request.method, request.path, ', '.join(suspicious),
            )
            raise SecurityPolicyViolation(fields=suspicious)
