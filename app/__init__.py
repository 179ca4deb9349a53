"""
Cabinet Shop Manager - Application Package

This package contains the modular backend structure:
- api/: HTTP route handlers (Flask Blueprints)
- utils/: Shared request helpers

The app factory and core Flask setup remain in app_init.py at the project root.
Domain rules live in the top-level services/ package.
"""

import logging

from app.api.auth_routes import auth_bp
from app.api.quotes import quotes_bp
from app.api.orders import orders_bp
from app.api.catalog import catalog_bp
from app.api.settings import settings_bp
from app.api.db_status import db_status_bp

logger = logging.getLogger(__name__)

BLUEPRINTS = (auth_bp, quotes_bp, orders_bp, catalog_bp, settings_bp, db_status_bp)


def register_blueprints(app):
    """
    Register all API blueprints with the Flask app.
    Called from app_init.create_app().

    Args:
        app: Flask application instance
    """
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
    logger.info(f"Registered {len(BLUEPRINTS)} blueprints")


__all__ = ['register_blueprints', 'auth_bp', 'quotes_bp', 'orders_bp', 'catalog_bp', 'settings_bp', 'db_status_bp']
