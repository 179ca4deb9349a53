"""
WSGI Entry Point for Gunicorn

    gunicorn wsgi:app

The Flask application is created in application.py.
"""

# Import the Flask app from application.py
from application import app  # noqa: F401
