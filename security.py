"""
Security Utilities & Middleware
CORS, security headers, JSON error handlers and request logging
"""
import os
from typing import Dict, Any
from flask import Flask, request, jsonify, Response
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
import logging

from config import is_production
from errors import AppError, handle_database_error

logger = logging.getLogger(__name__)

# Paths excluded from request logging to reduce noise
QUIET_PATHS = ('/api/health', '/api/ping')


def validate_secret_key(secret_key: str) -> bool:
    """
    Validate that a signing secret is sufficiently secure

    Args:
        secret_key: Secret key to validate

    Returns:
        True if key is secure, False otherwise
    """
    if not secret_key:
        return False

    # Check minimum length (32 characters for 128-bit security)
    if len(secret_key) < 32:
        logger.warning("Secret key is too short (minimum 32 characters)")
        return False

    # Check if it's a default/weak key
    weak_keys = ['dev', 'test', 'secret', 'password', '12345']
    if any(weak in secret_key.lower() for weak in weak_keys):
        logger.warning("Secret key appears to be weak or default")
        return False

    return True


def check_secrets(app: Flask):
    """
    Warn about generated or weak signing secrets in production.
    Generated secrets change on every restart and invalidate issued tokens.

    Args:
        app: Flask application instance
    """
    if not is_production():
        return

    for name in ('SECRET_KEY', 'JWT_SECRET_KEY'):
        if not os.environ.get(name):
            logger.error(f"{name} is not set in production; tokens will not survive a restart")
        elif not validate_secret_key(app.config.get(name)):
            logger.error(f"{name} is weak; set a long random value")


def setup_security_headers(app: Flask):
    """
    Add security headers to all responses

    Args:
        app: Flask application instance
    """
    @app.after_request
    def add_security_headers(response: Response) -> Response:
        # Prevent clickjacking
        response.headers['X-Frame-Options'] = 'DENY'

        # Prevent MIME type sniffing
        response.headers['X-Content-Type-Options'] = 'nosniff'

        # Strict Transport Security (HTTPS only in production)
        if not app.debug:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        # JSON API: nothing to load
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        response.headers['Cache-Control'] = 'no-store'

        return response

    logger.info("Security headers configured")


def setup_cors(app: Flask, config: Dict[str, Any]):
    """
    Configure CORS for the /api routes

    Args:
        app: Flask application instance
        config: Application configuration dictionary
    """
    cors_origins = config.get('CORS_ORIGINS', ['*'])
    cors_methods = config.get('CORS_METHODS', ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'])
    cors_headers = config.get('CORS_ALLOW_HEADERS', ['Content-Type', 'Authorization'])

    # Warn if using wildcard CORS in production
    if not app.debug and '*' in cors_origins:
        logger.warning("Using wildcard CORS in production! Set CORS_ORIGINS environment variable.")

    # Bearer tokens travel in a header, so no credentialed (cookie) requests
    CORS(
        app,
        resources={r'/api/*': {'origins': cors_origins}},
        methods=cors_methods,
        allow_headers=cors_headers,
        max_age=3600
    )

    logger.info(f"CORS configured: origins={cors_origins}")


def error_response(error: AppError):
    """JSON body and status for an application error"""
    return jsonify(error.to_dict()), error.status_code


def setup_error_handlers(app: Flask):
    """
    Register JSON error handlers. Stack traces go to the log, never to the client.

    Args:
        app: Flask application instance
    """
    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        if error.status_code >= 500:
            logger.error(f"{request.method} {request.path} failed: {error.message}")
        return error_response(error)

    @app.errorhandler(SQLAlchemyError)
    def handle_sqlalchemy_error(error: SQLAlchemyError):
        logger.error(f"Database error on {request.method} {request.path}: {error}")
        return error_response(handle_database_error(error))

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        """404 for unknown routes, 405, 413 and the rest of werkzeug's errors"""
        code = (error.name or 'HTTP error').upper().replace(' ', '_')
        return jsonify({
            'error': {
                'message': error.description or error.name,
                'code': code
            }
        }), error.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.error(
            f"Unhandled error on {request.method} {request.path}: {error}",
            exc_info=True
        )
        message = 'An unexpected error occurred' if is_production() else str(error)
        return jsonify({
            'error': {
                'message': message,
                'code': 'INTERNAL_ERROR'
            }
        }), 500

    logger.info("Error handlers registered")


def setup_request_logging(app: Flask):
    """
    Setup request/response logging

    Args:
        app: Flask application instance
    """
    @app.before_request
    def log_request():
        if request.path in QUIET_PATHS:
            return

        logger.info(
            f"Request: {request.method} {request.path} "
            f"from {request.remote_addr}"
        )

    @app.after_request
    def log_response(response: Response) -> Response:
        if request.path in QUIET_PATHS:
            return response

        logger.info(
            f"Response: {request.method} {request.path} "
            f"status={response.status_code} "
            f"size={response.content_length}"
        )

        return response

    logger.info("Request logging configured")


def setup_security(app: Flask, config: Dict[str, Any]):
    """
    Setup all security features for the application

    Args:
        app: Flask application instance
        config: Application configuration dictionary
    """
    logger.info("Configuring application security...")

    check_secrets(app)
    setup_cors(app, config)
    setup_security_headers(app)
    setup_error_handlers(app)
    setup_request_logging(app)

    logger.info("Security configuration complete")
