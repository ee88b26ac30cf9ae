"""
Validation utilities
"""
import re
from collections.abc import Mapping

from icuguard.sanitize import DEFAULT_POLICY

_EMAIL_PATTERN = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')
_PHONE_PATTERN = re.compile(r'[0-9+\-\s()]{10,20}')


def is_valid_email(email):
    """
    Validate email format

    A coarse syntactic check (something@something.something), not RFC 5322.

    Args:
        email (str): Email address to validate

    Returns:
        bool: True if valid, False otherwise
    """
    if not isinstance(email, str):
        return False

    return _EMAIL_PATTERN.fullmatch(email) is not None


def is_valid_phone(phone):
    """
    Validate phone number format

    Accepts 10 to 20 characters made of digits, spaces, ``+``, ``-`` and
    parentheses.

    Args:
        phone (str): Phone number to validate

    Returns:
        bool: True if valid, False otherwise
    """
    if not isinstance(phone, str):
        return False

    return _PHONE_PATTERN.fullmatch(phone) is not None


def has_sql_injection(value, policy=DEFAULT_POLICY):
    """
    Check a string for common SQL injection patterns

    This is a heuristic for defense in depth. It produces false positives
    (any text containing ``--``) and misses plenty of real attacks, so it
    never replaces parameterized queries.

    Args:
        value (str): Text to inspect
        policy (SanitizerPolicy): Supplies the pattern list

    Returns:
        bool: True if any pattern matches
    """
    if not isinstance(value, str):
        return False

    return any(pattern.search(value) for pattern in policy.sql_patterns)


def find_sql_injection(data, policy=DEFAULT_POLICY, path=''):
    """
    Collect the dotted paths of every string leaf flagged by has_sql_injection

    Args:
        data: Scalar or nested dict/list structure
        policy (SanitizerPolicy): Supplies the pattern list
        path (str): Prefix for reported paths

    Returns:
        list: Paths of suspicious values, in traversal order
    """
    if isinstance(data, Mapping):
        found = []
        for key, value in data.items():
            child = '{}.{}'.format(path, key) if path else str(key)
            found.extend(find_sql_injection(value, policy, child))
        return found

    if isinstance(data, (list, tuple)):
        found = []
        for index, item in enumerate(data):
            child = '{}.{}'.format(path, index) if path else str(index)
            found.extend(find_sql_injection(item, policy, child))
        return found

    if has_sql_injection(data, policy):
        return [path]
    return []
