"""
API Blueprints Package

All HTTP route handlers for the application, organized by domain.
Each module defines a Flask Blueprint registered in app/__init__.py.

BLUEPRINT REFERENCE:
====================

- auth_routes.py : Registration, login (bearer tokens), current user
- quotes.py      : Quotes with spaces/items, conversion to orders
- orders.py      : Orders and their receipts
- catalog.py     : Categories and products
- settings.py    : Preset values, pricing rules, templates
- db_status.py   : Admin table dump

Routes stay thin: validate the body (validators.py), open a session
(database.connection.get_db_session) and call a repository from services/.
Errors are raised, never returned; security.py turns them into JSON responses.
"""

# All blueprints are imported and registered in app/__init__.py
# This file serves as documentation only

__all__ = []
