"""
Authentication Routes Blueprint

Handles registration, login (bearer token issue) and the current-user endpoint.
"""

from flask import Blueprint, jsonify, g
import logging

from auth import create_access_token, login_required
from app.utils import get_json_body
from database.connection import get_db_session
from errors import AuthenticationError
from services.users_repository import UsersRepository
from validators import validate_login_payload, validate_registration_payload

logger = logging.getLogger(__name__)

# Create blueprint
auth_bp = Blueprint('auth_bp', __name__)


# ============================================================================
# REGISTRATION / LOGIN
# ============================================================================

@auth_bp.route('/api/auth/register', methods=['POST'])
def register():
    """Create a user account"""
    data = validate_registration_payload(get_json_body())
    with get_db_session() as db:
        user = UsersRepository(db).create_user(data)
    return jsonify(user), 201


@auth_bp.route('/api/auth/login', methods=['POST'])
def login():
    """Exchange email/password for a bearer token"""
    data = validate_login_payload(get_json_body())
    with get_db_session() as db:
        user = UsersRepository(db).authenticate(data['email'], data['password'])

    if not user:
        raise AuthenticationError('Invalid email or password')

    token = create_access_token(user['id'], role=user['role'])
    return jsonify({
        'access_token': token,
        'token_type': 'bearer',
        'user': user
    })


@auth_bp.route('/api/auth/me', methods=['GET'])
@login_required
def me():
    """The authenticated user"""
    return jsonify(g.current_user)
