"""
Pytest configuration and fixtures for ICU Guard tests
"""
import pytest
from flask import Blueprint, jsonify, request

from icuguard import create_app


def _echo_blueprint():
    """Routes that reflect what a handler sees after the middleware ran"""
    bp = Blueprint('echo', __name__)

    def _snapshot(**view_args):
        body = request.get_json(silent=True)
        return jsonify({
            'body': body,
            'json': request.json if body is not None else None,
            'args': request.args.to_dict(flat=False),
            'form': request.form.to_dict(flat=False),
            'view_args': view_args,
        })

    bp.add_url_rule('/echo', 'echo', _snapshot, methods=['GET', 'POST'])
    bp.add_url_rule('/echo/<name>', 'echo_name', _snapshot, methods=['GET', 'POST'])
    bp.add_url_rule('/api/webhooks/echo', 'webhook_echo', _snapshot, methods=['POST'])

    @bp.route('/boom')
    def boom():
        raise RuntimeError('kaboom')

    return bp


def _build_app(**overrides):
    app = create_app('testing', config_overrides=overrides)
    app.register_blueprint(_echo_blueprint())
    return app


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing"""
    return _build_app()


@pytest.fixture(scope='function')
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def app_factory():
    """Build apps with config overrides (sanitizer flags, policy lists)"""
    return _build_app


@pytest.fixture
def runner(app):
    """Flask CLI runner"""
    return app.test_cli_runner()
