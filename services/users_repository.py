"""
Users Repository - Database access layer for user accounts.
"""

import logging
from typing import Dict, Optional
from sqlalchemy.orm import Session

from auth import hash_password, verify_password
from database.models import User
from errors import ConflictError

logger = logging.getLogger(__name__)


class UsersRepository:
    """Repository for user database operations. Never returns password hashes."""

    def __init__(self, session: Session):
        self.session = session

    def get_user(self, user_id: str) -> Optional[Dict]:
        """Get a user by ID."""
        user = self.session.query(User).filter(User.id == user_id).first()
        return user.to_dict() if user else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email (returns model for auth)."""
        return self.session.query(User).filter(User.email == email.lower()).first()

    def create_user(self, data: Dict) -> Dict:
        """Create a new user. Emails are unique (case-insensitive)."""
        email = data['email'].lower()
        if self.get_user_by_email(email):
            raise ConflictError('A user with this email already exists')

        user = User(
            email=email,
            name=data.get('name'),
            password_hash=hash_password(data['password']),
            role=data.get('role', 'user')
        )
        self.session.add(user)
        self.session.flush()
        logger.info(f"Created user: {user.id}")
        return user.to_dict()

    def authenticate(self, email: str, password: str) -> Optional[Dict]:
        """Return the user dict when the credentials match, otherwise None."""
        user = self.get_user_by_email(email)
        if not user or not verify_password(user.password_hash, password):
            logger.info(f"Failed login attempt for {email}")
            return None

        logger.info(f"User authenticated: {user.id}")
        return user.to_dict()
