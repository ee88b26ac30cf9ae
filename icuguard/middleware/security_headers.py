"""
Security headers applied to every response
"""
from flask import current_app


def set_security_headers(response):
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
    response.headers['Permissions-Policy'] = 'camera=(), microphone=(), geolocation=()'
    response.headers['Content-Security-Policy'] = current_app.config['CONTENT_SECURITY_POLICY']
    if current_app.config.get('ENFORCE_HSTS'):
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
    return response
