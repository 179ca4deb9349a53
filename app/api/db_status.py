"""
Database Status Blueprint

Admin-only dump of every application table.
"""

import logging
from flask import Blueprint, jsonify, g

from auth import admin_required
from database.connection import get_db_session
from services.db_status import get_database_status

logger = logging.getLogger(__name__)

# Create blueprint
db_status_bp = Blueprint('db_status_bp', __name__)


@db_status_bp.route('/api/db-status', methods=['GET'])
@admin_required
def db_status():
    logger.info(f"Database status requested by {g.current_user['id']}")
    with get_db_session() as db:
        status = get_database_status(db)
    return jsonify(status)
