"""
Application Initialization Module
Initializes the Flask app with all infrastructure components
"""
import os
import click
from flask import Flask
from config import get_config
from logging_config import setup_logging
from security import setup_security
from health_checks import register_health_checks
from database.connection import init_engine, init_db
from database.seed import seed_database
from app import register_blueprints
import logging

logger = logging.getLogger(__name__)


def create_app(config_name=None):
    """
    Application factory that creates and configures Flask app with all infrastructure

    Args:
        config_name: 'development', 'production' or 'testing'; defaults to FLASK_ENV

    Returns:
        Configured Flask application instance
    """
    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    setup_logging(app)

    logger.info("=" * 60)
    logger.info("Initializing Cabinet Shop Manager API")
    logger.info("=" * 60)
    logger.info(f"Environment: {config_name or os.environ.get('FLASK_ENV', 'development')}")
    logger.info(f"Debug mode: {app.debug}")

    # Setup security (CORS, headers, error handlers)
    setup_security(app, app.config)

    # Bind the database
    initialize_database(app)

    # Register API and health check endpoints
    register_blueprints(app)
    register_health_checks(app)

    register_cli_commands(app)

    logger.info("Application initialization complete")
    logger.info("=" * 60)

    return app


def initialize_database(app):
    """
    Bind the engine to DATABASE_URL and optionally create missing tables

    Args:
        app: Flask application instance
    """
    engine = init_engine(app.config['DATABASE_URL'])
    if app.config.get('AUTO_CREATE_TABLES'):
        init_db()
    return engine


def register_cli_commands(app):
    """
    Register ``flask init-db`` and ``flask seed-db``

    Args:
        app: Flask application instance
    """
    @app.cli.command('init-db')
    def init_db_command():
        """Create all database tables."""
        init_db()
        click.echo('Database tables created.')

    @app.cli.command('seed-db')
    def seed_db_command():
        """Insert default preset values and the admin user."""
        seed_database()
        click.echo('Database seeded.')
