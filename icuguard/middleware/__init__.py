"""Middleware package"""
from .sanitize_request import RequestSanitizer, sanitize_request
from .security_headers import set_security_headers

__all__ = [
    'RequestSanitizer',
    'sanitize_request',
    'set_security_headers',
]
