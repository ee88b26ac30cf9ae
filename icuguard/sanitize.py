"""Input sanitization utilities to prevent XSS and injection attacks.

Every function here is pure: inputs are never mutated and a fresh structure
is returned. Behaviour is driven by a :class:`SanitizerPolicy`, which defaults
to :data:`DEFAULT_POLICY` and can be overridden per deployment.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

# One-pass translation table: null bytes are dropped, HTML specials encoded.
_ESCAPE_TABLE = str.maketrans({
    '\0': None,
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#x27;',
    '/': '&#x2F;',
})

DEFAULT_SQL_PATTERNS = (
    re.compile(r'(\bOR\b|\bAND\b)\s+\d+\s*=\s*\d+', re.IGNORECASE),
    re.compile(r'UNION\s+SELECT', re.IGNORECASE),
    re.compile(r'DROP\s+TABLE', re.IGNORECASE),
    re.compile(r'INSERT\s+INTO', re.IGNORECASE),
    re.compile(r'DELETE\s+FROM', re.IGNORECASE),
    re.compile(r'UPDATE\s+\w+\s+SET', re.IGNORECASE),
    re.compile(r'--'),
    re.compile(r';.*--'),
    re.compile(r"'\s*OR\s*'1'\s*=\s*'1", re.IGNORECASE),
)


@dataclass(frozen=True)
class SanitizerPolicy:
    """Allow-lists and deny-lists used by the sanitizers."""

    dangerous_keys: frozenset = frozenset({'__proto__', 'constructor', 'prototype'})
    operator_marker: str = '$'
    allowed_operators: frozenset = frozenset({
        '$eq', '$ne', '$gt', '$gte', '$lt', '$lte',
        '$in', '$nin', '$and', '$or', '$not', '$exists',
    })
    blocked_url_prefixes: tuple = ('javascript:', 'data:')
    relative_url_prefixes: tuple = ('/', './', '../')
    allowed_url_schemes: frozenset = frozenset({'http', 'https'})
    sql_patterns: tuple = field(default=DEFAULT_SQL_PATTERNS, repr=False)

    @classmethod
    def from_config(cls, config):
        """Build a policy from a Flask-style config mapping.

        Recognised keys are ``SANITIZER_DANGEROUS_KEYS``,
        ``SANITIZER_ALLOWED_OPERATORS`` and ``SANITIZER_ALLOWED_URL_SCHEMES``.
        Keys that are missing or ``None`` keep the defaults.
        """
        overrides = {}
        for config_key, attr in (
            ('SANITIZER_DANGEROUS_KEYS', 'dangerous_keys'),
            ('SANITIZER_ALLOWED_OPERATORS', 'allowed_operators'),
            ('SANITIZER_ALLOWED_URL_SCHEMES', 'allowed_url_schemes'),
        ):
            value = config.get(config_key)
            if value is not None:
                overrides[attr] = frozenset(value)
        return cls(**overrides)

    def is_operator(self, key):
        return isinstance(key, str) and key.startswith(self.operator_marker)


DEFAULT_POLICY = SanitizerPolicy()


@dataclass(frozen=True)
class QueryFilterResult:
    """Outcome of :func:`filter_query`.

    ``dropped_keys`` holds the dotted path of every operator that was removed,
    so callers can tell a stripped filter apart from an empty one.
    ``blocked_operators`` holds the raw operator keys in the same order.
    """

    sanitized: object
    dropped_keys: tuple = ()
    blocked_operators: tuple = ()

    @property
    def was_modified(self):
        return bool(self.dropped_keys)


def _rebuild(sequence, items):
    # namedtuples take positional fields, so go through _make
    if isinstance(sequence, list):
        return list(items)
    if hasattr(sequence, '_make'):
        return type(sequence)._make(items)
    return tuple(items)


def sanitize_string(value):
    """Escape HTML entities in a string.

    Removes null bytes and converts ``& < > " ' /`` to their HTML entity
    equivalents so that user-supplied strings cannot inject markup or script
    tags. Non-string values are returned unchanged.

    The escaping is applied in a single pass, but calling this twice on the
    same text escapes it twice (``&`` becomes ``&amp;amp;``).
    """
    if not isinstance(value, str):
        return value
    return value.translate(_ESCAPE_TABLE)


def sanitize_object(data, policy=DEFAULT_POLICY):
    """Recursively walk a dict/list structure and sanitize keys and strings.

    Keys listed in ``policy.dangerous_keys`` are dropped. Non-string leaves
    (int, float, bool, None) are returned unchanged.
    """
    if isinstance(data, Mapping):
        sanitized = {}
        for key, value in data.items():
            if key in policy.dangerous_keys:
                continue
            sanitized[sanitize_string(key)] = sanitize_object(value, policy)
        return sanitized
    if isinstance(data, (list, tuple)):
        return _rebuild(data, (sanitize_object(item, policy) for item in data))
    return sanitize_string(data)


def _filter_value(value, path, dropped, policy):
    if isinstance(value, Mapping):
        cleaned = {}
        for key, item in value.items():
            key_path = '{}.{}'.format(path, key) if path else str(key)
            if policy.is_operator(key) and key not in policy.allowed_operators:
                dropped.append((key_path, key))
                continue
            cleaned[key] = _filter_value(item, key_path, dropped, policy)
        return cleaned
    if isinstance(value, (list, tuple)):
        return _rebuild(value, (
            _filter_value(item, '{}.{}'.format(path, index), dropped, policy)
            for index, item in enumerate(value)
        ))
    return value


def filter_query(query, policy=DEFAULT_POLICY):
    """Strip query operators that are not on the allow-list.

    Args:
        query: A query-filter mapping, possibly nested.
        policy (SanitizerPolicy): Operator allow-list to enforce.

    Returns:
        QueryFilterResult: The cleaned filter and the paths of every dropped
        operator. Non-mapping input is returned unchanged.
    """
    if not isinstance(query, Mapping):
        return QueryFilterResult(sanitized=query)

    dropped = []
    sanitized = _filter_value(query, '', dropped, policy)
    return QueryFilterResult(
        sanitized=sanitized,
        dropped_keys=tuple(path for path, _ in dropped),
        blocked_operators=tuple(key for _, key in dropped),
    )


def sanitize_mongo_query(query, policy=DEFAULT_POLICY):
    """Validate and sanitize MongoDB query operators.

    Prevents NoSQL injection through operator injection. A warning is logged
    for every operator that gets dropped.
    """
    result = filter_query(query, policy)
    for operator in result.blocked_operators:
        logger.warning('Blocked dangerous MongoDB operator: %s', operator)
    return result.sanitized


def _replace_key(key, replace_with, policy):
    if not isinstance(key, str):
        return key
    if key.startswith(policy.operator_marker):
        key = replace_with + key[len(policy.operator_marker):]
    return key.replace('.', replace_with)


def replace_operator_keys(data, replace_with='_', policy=DEFAULT_POLICY):
    """Rewrite operator-shaped keys instead of dropping them.

    A leading operator marker and every ``.`` in a key are replaced with
    ``replace_with``, so ``{"$gt": ""}`` turns into ``{"_gt": ""}``.
    """
    if isinstance(data, Mapping):
        rewritten = {}
        for key, value in data.items():
            new_key = _replace_key(key, replace_with, policy)
            if new_key != key:
                logger.warning('Sanitized key detected: %s', key)
            rewritten[new_key] = replace_operator_keys(value, replace_with, policy)
        return rewritten
    if isinstance(data, (list, tuple)):
        return _rebuild(data, (replace_operator_keys(item, replace_with, policy) for item in data))
    return data


def sanitize_url(url, policy=DEFAULT_POLICY):
    """Sanitize a URL to prevent open redirect and script injection.

    Relative paths pass through; absolute URLs are only kept when their scheme
    is allowed. Anything else collapses to an empty string.
    """
    if not isinstance(url, str):
        return ''

    url = url.strip()
    lowered = url.lower()
    if lowered.startswith(policy.blocked_url_prefixes):
        return ''

    if url.startswith(policy.relative_url_prefixes):
        return url

    try:
        parsed = urlsplit(url)
    except ValueError:
        return ''

    if parsed.scheme in policy.allowed_url_schemes and parsed.netloc:
        return url
    return ''
