"""
Database seeding for the Cabinet Shop Manager.
Creates the preset-values row and a default admin user if they are missing.
"""

import os
import logging
from database.connection import get_db_session
from database.models import PresetValues, User, PRESET_VALUES_ID

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@cabinet-shop.local"
DEFAULT_ADMIN_NAME = "Administrator"


def seed_preset_values(session):
    """Create the singleton preset-values row with model defaults if none exists."""
    preset = session.get(PresetValues, PRESET_VALUES_ID)
    if preset:
        logger.info("Preset values already exist")
        return preset

    preset = PresetValues(id=PRESET_VALUES_ID)
    session.add(preset)
    session.flush()
    logger.info("Created default preset values")
    return preset


def seed_default_admin(session):
    """
    Create an admin user if none exists.
    Credentials come from ADMIN_EMAIL / ADMIN_PASSWORD; no admin is created without a password.
    """
    from auth import hash_password

    admin = session.query(User).filter_by(role='admin').first()
    if admin:
        logger.info(f"Admin user already exists: {admin.email}")
        return admin

    password = os.environ.get('ADMIN_PASSWORD')
    if not password:
        logger.warning("ADMIN_PASSWORD not set; skipping default admin user")
        return None

    admin = User(
        email=os.environ.get('ADMIN_EMAIL', DEFAULT_ADMIN_EMAIL).lower(),
        name=DEFAULT_ADMIN_NAME,
        password_hash=hash_password(password),
        role='admin'
    )
    session.add(admin)
    session.flush()
    logger.info(f"Created default admin user: {admin.email}")
    return admin


def seed_database():
    """
    Seed the database with default data where missing.
    Exposed as ``flask seed-db``.
    """
    try:
        with get_db_session() as session:
            seed_preset_values(session)
            seed_default_admin(session)
        logger.info("Database seeding completed successfully")
        return True
    except Exception as e:
        logger.error(f"Database seeding failed: {e}")
        raise
