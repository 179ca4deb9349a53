"""
Tests for authentication: password hashing, tokens and the /api/auth routes
"""
import pytest
import jwt

from auth import hash_password, verify_password, create_access_token, decode_access_token
from errors import AuthenticationError


@pytest.mark.unit
class TestPasswords:
    """Tests for password hashing"""

    def test_hash_is_not_plaintext(self):
        pwhash = hash_password('s3cret-password')
        assert pwhash != 's3cret-password'
        assert pwhash.startswith('pbkdf2:sha256')

    def test_verify_password(self):
        pwhash = hash_password('s3cret-password')
        assert verify_password(pwhash, 's3cret-password') is True
        assert verify_password(pwhash, 'wrong-password') is False


@pytest.mark.unit
class TestTokens:
    """Tests for access token issue and verification"""

    def test_round_trip(self, app):
        with app.app_context():
            token = create_access_token('user-1', role='admin')
            payload = decode_access_token(token)
        assert payload['sub'] == 'user-1'
        assert payload['role'] == 'admin'

    def test_expired_token_is_rejected(self, app):
        with app.app_context():
            token = create_access_token('user-1', expires_minutes=-1)
            with pytest.raises(AuthenticationError, match='expired'):
                decode_access_token(token)

    def test_token_signed_with_other_key_is_rejected(self, app):
        forged = jwt.encode({'sub': 'user-1'}, 'another-key-that-is-long-enough-32', algorithm='HS256')
        with app.app_context():
            with pytest.raises(AuthenticationError):
                decode_access_token(forged)


@pytest.mark.integration
class TestAuthRoutes:
    """Tests for registration, login and /me"""

    def test_register_returns_user_without_hash(self, client):
        response = client.post('/api/auth/register', json={
            'email': 'New@Example.com', 'password': 'long-password', 'name': 'New'
        })
        assert response.status_code == 201
        data = response.get_json()
        assert data['email'] == 'new@example.com'
        assert data['role'] == 'user'
        assert 'password_hash' not in data

    def test_duplicate_email_conflicts(self, client, user):
        response = client.post('/api/auth/register', json={
            'email': 'OWNER@example.com', 'password': 'long-password'
        })
        assert response.status_code == 409
        assert response.get_json()['error']['code'] == 'CONFLICT'

    def test_invalid_registration(self, client):
        response = client.post('/api/auth/register', json={'email': 'bad', 'password': 'x'})
        assert response.status_code == 400
        fields = [d['field'] for d in response.get_json()['error']['details']]
        assert 'email' in fields
        assert 'password' in fields

    def test_whitespace_padded_short_password_is_rejected(self, client):
        response = client.post('/api/auth/register', json={
            'email': 'padded@example.com', 'password': '       x'
        })
        assert response.status_code == 400
        assert [d['field'] for d in response.get_json()['error']['details']] == ['password']

    def test_password_whitespace_is_significant(self, client):
        client.post('/api/auth/register', json={
            'email': 'spaces@example.com', 'password': '  long-password  '
        })
        login = client.post('/api/auth/login', json={
            'email': 'spaces@example.com', 'password': '  long-password  '
        })
        assert login.status_code == 200

        trimmed = client.post('/api/auth/login', json={
            'email': 'spaces@example.com', 'password': 'long-password'
        })
        assert trimmed.status_code == 401

    def test_login_returns_bearer_token(self, client, user):
        response = client.post('/api/auth/login', json={
            'email': 'owner@example.com', 'password': 'correct-horse-battery'
        })
        assert response.status_code == 200
        data = response.get_json()
        assert data['token_type'] == 'bearer'
        assert data['access_token']
        assert data['user']['email'] == 'owner@example.com'

    def test_login_with_wrong_password(self, client, user):
        response = client.post('/api/auth/login', json={
            'email': 'owner@example.com', 'password': 'not-the-password'
        })
        assert response.status_code == 401
        assert response.get_json()['error']['code'] == 'UNAUTHORIZED'

    def test_login_with_unknown_email(self, client):
        response = client.post('/api/auth/login', json={
            'email': 'ghost@example.com', 'password': 'whatever-password'
        })
        assert response.status_code == 401

    def test_me(self, client, auth_headers):
        response = client.get('/api/auth/me', headers=auth_headers)
        assert response.status_code == 200
        assert response.get_json()['email'] == 'owner@example.com'

    def test_protected_route_requires_token(self, client):
        response = client.get('/api/quotes')
        assert response.status_code == 401
        assert response.get_json()['error']['code'] == 'UNAUTHORIZED'

    def test_malformed_authorization_header(self, client):
        response = client.get('/api/quotes', headers={'Authorization': 'Token abc'})
        assert response.status_code == 401

    def test_garbage_token(self, client):
        response = client.get('/api/quotes', headers={'Authorization': 'Bearer not.a.jwt'})
        assert response.status_code == 401

    def test_token_for_deleted_user(self, app, client):
        with app.app_context():
            token = create_access_token('00000000-0000-0000-0000-000000000000')
        response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401
