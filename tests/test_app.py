"""
Application tests
Health endpoints, security headers, error handling and CLI commands
"""
import json

from flask import abort

from icuguard import create_app
from icuguard.errors import ApiError


class TestHealth:
    """Test health, readiness and liveness endpoints"""

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['status'] == 'healthy'
        assert data['environment'] == 'testing'
        assert data['deployEnv'] == 'test'
        assert 'timestamp' in data
        assert data['uptime'] >= 0

    def test_health_detailed(self, client):
        response = client.get('/health/detailed')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['services'] == {'api': 'operational', 'sanitizer': 'operational'}

    def test_ready_and_live(self, client):
        assert json.loads(client.get('/ready').data) == {'ready': True}
        assert json.loads(client.get('/live').data) == {'alive': True}


class TestSecurityHeaders:
    """Test response hardening"""

    def test_headers_present(self, client):
        response = client.get('/health')

        assert response.headers['X-Content-Type-Options'] == 'nosniff'
        assert response.headers['X-Frame-Options'] == 'DENY'
        assert "default-src 'self'" in response.headers['Content-Security-Policy']
        assert 'Strict-Transport-Security' not in response.headers

    def test_hsts_when_enforced(self, app_factory):
        client = app_factory(ENFORCE_HSTS=True).test_client()

        response = client.get('/live')

        assert response.headers['Strict-Transport-Security'].startswith('max-age=')


class TestErrorHandling:
    """Test JSON error responses"""

    def test_not_found_is_json(self, client):
        response = client.get('/does-not-exist')

        assert response.status_code == 404
        data = json.loads(response.data)
        assert data['success'] is False
        assert data['message']

    def test_unhandled_exception_is_generic_500(self, client):
        response = client.get('/boom')

        assert response.status_code == 500
        data = json.loads(response.data)
        assert data == {'success': False, 'message': 'An unexpected error occurred.'}

    def test_rate_limit_returns_json_429(self, app_factory):
        client = app_factory(RATELIMIT_ENABLED=True, RATELIMIT_DEFAULT='1 per hour').test_client()

        assert client.get('/echo').status_code == 200
        response = client.get('/echo')

        assert response.status_code == 429
        data = json.loads(response.data)
        assert data['error'] == 'Too many requests from this IP, please try again later.'
        assert data['retry_after'] == 3600
        assert 'Retry-After' in response.headers

    def test_plain_429_falls_back_to_a_minute(self):
        app = create_app('testing')

        @app.route('/busy')
        def busy():
            abort(429)

        response = app.test_client().get('/busy')

        assert response.status_code == 429
        assert json.loads(response.data)['retry_after'] == 60

    def test_api_error_uses_status_code(self):
        app = create_app('testing')

        @app.route('/missing-room')
        def missing_room():
            raise ApiError('ICU room not found', 404)

        response = app.test_client().get('/missing-room')

        assert response.status_code == 404
        assert json.loads(response.data) == {'success': False, 'message': 'ICU room not found'}


class TestConfig:
    """Test config selection in the factory"""

    def test_unknown_name_falls_back_to_default(self):
        app = create_app('staging')

        assert app.config['ENV_NAME'] == 'development'

    def test_overrides_applied(self):
        app = create_app('testing', config_overrides={'DEPLOY_ENV': 'ward-7'})

        assert app.config['DEPLOY_ENV'] == 'ward-7'


class TestCli:
    """Test the sanitizer CLI commands"""

    def test_check_url_rejected(self, runner):
        result = runner.invoke(args=['check-url', 'javascript:alert(1)'])

        assert result.exit_code == 0
        assert 'rejected: javascript:alert(1)' in result.output

    def test_check_url_allowed(self, runner):
        result = runner.invoke(args=['check-url', 'https://example.com'])

        assert 'allowed: https://example.com' in result.output

    def test_check_input(self, runner):
        result = runner.invoke(args=['check-input', "' OR '1'='1"])

        assert result.exit_code == 0
        assert 'escaped: &#x27; OR &#x27;1&#x27;=&#x27;1' in result.output
        assert 'email: invalid' in result.output
        assert 'phone: invalid' in result.output
        assert 'sql injection: suspicious' in result.output

    def test_check_query(self, runner):
        result = runner.invoke(args=['check-query', '{"age": {"$gte": 5, "$where": "1"}}'])

        assert result.exit_code == 0
        assert 'sanitized: {"age": {"$gte": 5}}' in result.output
        assert 'dropped: age.$where' in result.output

    def test_check_query_invalid_json(self, runner):
        result = runner.invoke(args=['check-query', '{oops'])

        assert result.exit_code != 0
        assert 'not valid JSON' in result.output
