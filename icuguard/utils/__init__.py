"""Utilities package"""
from .validators import is_valid_email, is_valid_phone, has_sql_injection, find_sql_injection

__all__ = [
    'is_valid_email',
    'is_valid_phone',
    'has_sql_injection',
    'find_sql_injection',
]
