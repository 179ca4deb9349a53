"""
Orders Blueprint

- /api/orders                             - list / create from an approved quote
- /api/orders/<id>                        - read with receipts and source quote
- /api/orders/<id>/receipts               - add a receipt
- /api/orders/<id>/receipts/<receipt_id>  - change status / delete a draft
"""

import logging
from flask import Blueprint, jsonify

from auth import login_required, get_current_user_id
from app.utils import get_json_body, no_content
from database.connection import get_db_session
from services.orders_repository import OrdersRepository
from services.quotes_repository import QuotesRepository
from validators import (
    validate_convert_payload,
    validate_receipt_payload,
    validate_receipt_status_payload,
)

logger = logging.getLogger(__name__)

# Create blueprint
orders_bp = Blueprint('orders_bp', __name__)


# ============================================================================
# ORDERS
# ============================================================================

@orders_bp.route('/api/orders', methods=['GET'])
@login_required
def list_orders():
    with get_db_session() as db:
        orders = OrdersRepository(db, get_current_user_id()).list_orders()
    return jsonify(orders)


@orders_bp.route('/api/orders/<order_id>', methods=['GET'])
@login_required
def get_order(order_id):
    with get_db_session() as db:
        order = OrdersRepository(db, get_current_user_id()).get_order(order_id)
    return jsonify(order)


@orders_bp.route('/api/orders', methods=['POST'])
@login_required
def create_order():
    """Same rule as /api/quotes/<id>/convert: orders only come from approved quotes"""
    quote_id = validate_convert_payload(get_json_body())
    with get_db_session() as db:
        order = QuotesRepository(db, get_current_user_id()).convert_to_order(quote_id)
    return jsonify(order), 201


# ============================================================================
# RECEIPTS
# ============================================================================

@orders_bp.route('/api/orders/<order_id>/receipts', methods=['POST'])
@login_required
def add_receipt(order_id):
    data = validate_receipt_payload(get_json_body())
    with get_db_session() as db:
        receipt = OrdersRepository(db, get_current_user_id()).add_receipt(order_id, data)
    return jsonify(receipt), 201


@orders_bp.route('/api/orders/<order_id>/receipts/<receipt_id>', methods=['PUT'])
@login_required
def update_receipt_status(order_id, receipt_id):
    status = validate_receipt_status_payload(get_json_body())
    with get_db_session() as db:
        receipt = OrdersRepository(db, get_current_user_id()).update_receipt_status(
            order_id, receipt_id, status
        )
    return jsonify(receipt)


@orders_bp.route('/api/orders/<order_id>/receipts/<receipt_id>', methods=['DELETE'])
@login_required
def delete_receipt(order_id, receipt_id):
    with get_db_session() as db:
        OrdersRepository(db, get_current_user_id()).delete_receipt(order_id, receipt_id)
    return no_content()
