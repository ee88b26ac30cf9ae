"""
Health check endpoints for container orchestrators
"""
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

from icuguard.extensions import limiter

health_bp = Blueprint('health', __name__)

_started_at = time.monotonic()


def _base_status():
    return {
        'status': 'healthy',
        'service': 'icuguard',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'uptime': round(time.monotonic() - _started_at, 3),
        'environment': current_app.config['ENV_NAME'],
        'deployEnv': current_app.config['DEPLOY_ENV'],
    }


@health_bp.route('/health')
@limiter.exempt
def health():
    return jsonify(_base_status()), 200


@health_bp.route('/health/detailed')
@limiter.exempt
def health_detailed():
    """Report the status of each service the API depends on."""
    status = _base_status()
    sanitizer_ready = 'request_sanitizer' in current_app.extensions
    status['services'] = {
        'api': 'operational',
        'sanitizer': 'operational' if sanitizer_ready else 'disabled',
    }
    if not sanitizer_ready:
        status['status'] = 'degraded'

    status_code = 200 if status['status'] == 'healthy' else 503
    return jsonify(status), status_code


@health_bp.route('/ready')
@limiter.exempt
def ready():
    if 'request_sanitizer' not in current_app.extensions:
        return jsonify({'ready': False, 'reason': 'request sanitizer not initialised'}), 503
    return jsonify({'ready': True}), 200


@health_bp.route('/live')
@limiter.exempt
def live():
    return jsonify({'alive': True}), 200
