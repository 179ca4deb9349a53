"""
Tests for error handlers, security headers and secret checks
"""
import os
import pytest
from sqlalchemy.exc import OperationalError

from security import validate_secret_key


@pytest.mark.unit
class TestSecretKeyValidation:
    """Tests for signing secret validation"""

    def test_short_key_is_rejected(self):
        assert validate_secret_key('short') is False

    def test_empty_key_is_rejected(self):
        assert validate_secret_key('') is False

    def test_weak_key_is_rejected(self):
        assert validate_secret_key('password' * 5) is False

    def test_random_key_is_accepted(self):
        assert validate_secret_key(os.urandom(32).hex()) is True


@pytest.mark.integration
class TestErrorHandlers:
    """Tests for JSON error responses"""

    def test_unexpected_error_shows_detail_outside_production(self, app, test_env_vars):
        @app.route('/api/boom')
        def boom():
            raise RuntimeError('kaboom')

        response = app.test_client().get('/api/boom')
        assert response.status_code == 500
        error = response.get_json()['error']
        assert error['code'] == 'INTERNAL_ERROR'
        assert error['message'] == 'kaboom'

    def test_unexpected_error_is_generic_in_production(self, app, test_env_vars):
        @app.route('/api/boom')
        def boom():
            raise RuntimeError('secret internals')

        os.environ['FLASK_ENV'] = 'production'
        response = app.test_client().get('/api/boom')
        assert response.status_code == 500
        assert 'secret internals' not in response.get_data(as_text=True)

    def test_database_errors_are_classified(self, app):
        @app.route('/api/db-down')
        def db_down():
            raise OperationalError('SELECT 1', {}, Exception('could not connect to server'))

        response = app.test_client().get('/api/db-down')
        assert response.status_code == 503
        assert response.get_json()['error']['code'] == 'CONNECTION_ERROR'

    def test_method_not_allowed_is_json(self, client):
        response = client.patch('/api/quotes')
        assert response.status_code == 405
        assert response.get_json()['error']['code'] == 'METHOD_NOT_ALLOWED'

    def test_cors_preflight(self, client):
        response = client.options('/api/quotes', headers={
            'Origin': 'http://localhost:3000',
            'Access-Control-Request-Method': 'POST'
        })
        assert response.status_code == 200
        assert 'Access-Control-Allow-Origin' in response.headers
