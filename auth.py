"""
User Authentication and Authorization Module
Bearer-token (JWT) issue/verification and route protection decorators.

Every protected route receives the requester's identity through ``g.current_user``;
the domain layer only ever sees the user id taken from there.
"""
import logging
from datetime import datetime, timedelta
from functools import wraps

import jwt
from flask import current_app, g, request
from werkzeug.security import generate_password_hash, check_password_hash

from errors import AuthenticationError, ForbiddenError

logger = logging.getLogger(__name__)


def hash_password(password):
    """Generate password hash using pbkdf2"""
    return generate_password_hash(password, method='pbkdf2:sha256')


def verify_password(pwhash, password):
    return check_password_hash(pwhash, password)


# ============================================================================
# TOKENS
# ============================================================================

def create_access_token(user_id, role='user', expires_minutes=None):
    """
    Issue a signed access token for a user

    Args:
        user_id: Id of the authenticated user (stored as ``sub``)
        role: User role, copied into the token for cheap admin checks
        expires_minutes: Override for ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT string
    """
    config = current_app.config
    if expires_minutes is None:
        expires_minutes = config['ACCESS_TOKEN_EXPIRE_MINUTES']

    now = datetime.utcnow()
    payload = {
        'sub': user_id,
        'role': role,
        'iat': now,
        'exp': now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, config['JWT_SECRET_KEY'], algorithm=config['JWT_ALGORITHM'])


def decode_access_token(token):
    """
    Decode and validate an access token

    Raises:
        AuthenticationError: token expired, tampered with or malformed
    """
    config = current_app.config
    try:
        return jwt.decode(
            token,
            config['JWT_SECRET_KEY'],
            algorithms=[config['JWT_ALGORITHM']],
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Access token expired")
        raise AuthenticationError('Token expired')
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid access token: {e}")
        raise AuthenticationError('Invalid token')


def get_bearer_token():
    """Extract the token from ``Authorization: Bearer <token>``"""
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def authenticate_request():
    """
    Resolve the requester from the bearer token.

    Returns:
        dict with ``id``, ``email``, ``name`` and ``role`` of the requester
    """
    token = get_bearer_token()
    if not token:
        raise AuthenticationError('Authentication required')

    payload = decode_access_token(token)
    user_id = payload.get('sub')
    if not user_id:
        raise AuthenticationError('Invalid token')

    from database.connection import get_db_session
    from services.users_repository import UsersRepository

    with get_db_session() as session:
        user = UsersRepository(session).get_user(user_id)

    if not user:
        logger.warning(f"Token presented for unknown user {user_id}")
        raise AuthenticationError('Invalid token')
    return user


def get_current_user_id():
    return g.current_user['id']


# Decorators for route protection
def login_required(f):
    """Decorator to require a valid bearer token for a route"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.current_user = authenticate_request()
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Decorator to require the admin role"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.current_user = authenticate_request()
        if g.current_user.get('role') != 'admin':
            raise ForbiddenError('Admin permission required')
        return f(*args, **kwargs)
    return decorated_function
