"""
Pytest configuration and shared fixtures
"""
import os
import sys
import copy
import pytest
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

DEFAULT_PASSWORD = 'correct-horse-battery'


@pytest.fixture
def app_config():
    """Fixture providing test configuration"""
    from config import TestingConfig
    return TestingConfig


@pytest.fixture
def test_env_vars():
    """Fixture restoring the environment after a test changes it"""
    original_env = os.environ.copy()

    os.environ['FLASK_ENV'] = 'testing'
    os.environ['SECRET_KEY'] = 'test-secret-key-minimum-32-chars-long-for-security'

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def app():
    """Application bound to a fresh in-memory SQLite database"""
    from app_init import create_app
    from database.connection import drop_db

    flask_app = create_app('testing')
    yield flask_app
    drop_db()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Transactional session for repository-level tests"""
    from database.connection import get_db_session

    with get_db_session() as session:
        yield session


# ============================================================================
# USERS
# ============================================================================

@pytest.fixture
def register_user(client):
    """Register a user through the API and return ``(user, headers)``"""
    def _register(email, password=DEFAULT_PASSWORD, name='Test User'):
        response = client.post('/api/auth/register', json={
            'email': email,
            'password': password,
            'name': name
        })
        assert response.status_code == 201, response.get_json()
        return response.get_json(), login(client, email, password)
    return _register


def login(client, email, password=DEFAULT_PASSWORD):
    response = client.post('/api/auth/login', json={'email': email, 'password': password})
    assert response.status_code == 200, response.get_json()
    token = response.get_json()['access_token']
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def user(register_user):
    return register_user('owner@example.com', name='Quote Owner')


@pytest.fixture
def auth_headers(user):
    return user[1]


@pytest.fixture
def other_auth_headers(register_user):
    return register_user('intruder@example.com', name='Someone Else')[1]


@pytest.fixture
def admin_headers(app, client):
    """Admin users cannot self-register, so the row is created directly"""
    from database.connection import get_db_session
    from services.users_repository import UsersRepository

    with get_db_session() as session:
        UsersRepository(session).create_user({
            'email': 'admin@example.com',
            'password': DEFAULT_PASSWORD,
            'name': 'Admin',
            'role': 'admin'
        })
    return login(client, 'admin@example.com')


# ============================================================================
# PAYLOAD FACTORIES
# ============================================================================

QUOTE_PAYLOAD = {
    'client_name': 'Ada Client',
    'email': 'ada@example.com',
    'phone': '+1 555 0100',
    'project_name': 'Kitchen remodel',
    'installation_address': '1 Main Street, Springfield',
    'status': 'draft',
    'total': 1000,
    'spaces': [
        {
            'name': 'Kitchen',
            'items': [
                {'width': 60, 'height': 72, 'depth': 24, 'price': 600, 'material': 'Oak'},
                {'width': 30, 'height': 36, 'depth': 24, 'price': 400},
            ]
        }
    ]
}


@pytest.fixture
def quote_payload():
    """Factory for a valid quote body with field overrides"""
    def _make(**overrides):
        payload = copy.deepcopy(QUOTE_PAYLOAD)
        payload.update(overrides)
        return payload
    return _make


@pytest.fixture
def create_quote(client, auth_headers, quote_payload):
    """Create a quote as the default user and return its JSON"""
    def _create(headers=None, **overrides):
        response = client.post(
            '/api/quotes',
            json=quote_payload(**overrides),
            headers=headers or auth_headers
        )
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _create


@pytest.fixture
def create_order(client, auth_headers, create_quote):
    """Create an approved quote, convert it and return the order JSON"""
    def _create(**overrides):
        overrides.setdefault('status', 'approved')
        quote = create_quote(**overrides)
        response = client.post(f"/api/quotes/{quote['id']}/convert", headers=auth_headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _create


@pytest.fixture
def category(client, auth_headers):
    response = client.post('/api/catalog/categories', json={
        'name': 'Base cabinets',
        'description': 'Floor standing units'
    }, headers=auth_headers)
    assert response.status_code == 201
    return response.get_json()


@pytest.fixture
def product_payload(category):
    def _make(**overrides):
        payload = {
            'name': 'Sink base 36',
            'category_id': category['id'],
            'type': 'base',
            'materials': ['Oak', 'Maple'],
            'unit_cost': 250.0,
            'description': 'Double door sink base'
        }
        payload.update(overrides)
        return payload
    return _make


@pytest.fixture
def preset_values_payload():
    from database.models import PresetValues
    payload = {field: 1.5 for field in PresetValues.NUMERIC_FIELDS}
    payload['exchange_rate'] = 1.0
    return payload


@pytest.fixture
def pricing_rule_payload():
    def _make(**overrides):
        payload = {
            'name': 'Cabinet price',
            'result': 'price',
            'formula': [
                {'left_operand': 'width', 'operator': '*', 'right_operand': 'height',
                 'right_operand_type': 'field', 'order': 1},
                {'left_operand': 'result', 'operator': '*', 'right_operand': '1.15',
                 'right_operand_type': 'number', 'order': 0},
            ]
        }
        payload.update(overrides)
        return payload
    return _make
