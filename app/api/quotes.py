"""
Quotes Blueprint

- /api/quotes             - list / create the requester's quotes
- /api/quotes/<id>        - read / full replace / delete
- /api/quotes/<id>/convert - turn an approved quote into an order
"""

import logging
from flask import Blueprint, jsonify

from auth import login_required, get_current_user_id
from app.utils import get_json_body, no_content
from database.connection import get_db_session
from services.quotes_repository import QuotesRepository
from validators import validate_quote_payload

logger = logging.getLogger(__name__)

# Create blueprint
quotes_bp = Blueprint('quotes_bp', __name__)


@quotes_bp.route('/api/quotes', methods=['GET'])
@login_required
def list_quotes():
    with get_db_session() as db:
        quotes = QuotesRepository(db, get_current_user_id()).list_quotes()
    return jsonify(quotes)


@quotes_bp.route('/api/quotes/<quote_id>', methods=['GET'])
@login_required
def get_quote(quote_id):
    with get_db_session() as db:
        quote = QuotesRepository(db, get_current_user_id()).get_quote(quote_id)
    return jsonify(quote)


@quotes_bp.route('/api/quotes', methods=['POST'])
@login_required
def create_quote():
    data = validate_quote_payload(get_json_body())
    with get_db_session() as db:
        quote = QuotesRepository(db, get_current_user_id()).create_quote(data)
    return jsonify(quote), 201


@quotes_bp.route('/api/quotes/<quote_id>', methods=['PUT'])
@login_required
def update_quote(quote_id):
    """Full replacement of the quote and its space/item tree"""
    data = validate_quote_payload(get_json_body())
    with get_db_session() as db:
        quote = QuotesRepository(db, get_current_user_id()).update_quote(quote_id, data)
    return jsonify(quote)


@quotes_bp.route('/api/quotes/<quote_id>', methods=['DELETE'])
@login_required
def delete_quote(quote_id):
    with get_db_session() as db:
        QuotesRepository(db, get_current_user_id()).delete_quote(quote_id)
    return no_content()


@quotes_bp.route('/api/quotes/<quote_id>/convert', methods=['POST'])
@login_required
def convert_quote(quote_id):
    with get_db_session() as db:
        order = QuotesRepository(db, get_current_user_id()).convert_to_order(quote_id)
    return jsonify(order), 201
