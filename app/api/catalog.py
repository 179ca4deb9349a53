"""
Catalog Blueprint

- /api/catalog/categories[/<id>] - product categories
- /api/catalog/products[/<id>]   - products, each filed under a category
"""

import logging
from flask import Blueprint, jsonify

from auth import login_required
from app.utils import get_json_body, no_content
from database.connection import get_db_session
from services.catalog_repository import CatalogRepository
from validators import validate_category_payload, validate_product_payload

logger = logging.getLogger(__name__)

# Create blueprint
catalog_bp = Blueprint('catalog_bp', __name__)


# ============================================================================
# CATEGORIES
# ============================================================================

@catalog_bp.route('/api/catalog/categories', methods=['GET'])
@login_required
def list_categories():
    """Categories with their products"""
    with get_db_session() as db:
        categories = CatalogRepository(db).list_categories()
    return jsonify(categories)


@catalog_bp.route('/api/catalog/categories', methods=['POST'])
@login_required
def create_category():
    data = validate_category_payload(get_json_body())
    with get_db_session() as db:
        category = CatalogRepository(db).create_category(data)
    return jsonify(category), 201


@catalog_bp.route('/api/catalog/categories/<category_id>', methods=['PUT'])
@login_required
def update_category(category_id):
    data = validate_category_payload(get_json_body())
    with get_db_session() as db:
        category = CatalogRepository(db).update_category(category_id, data)
    return jsonify(category)


@catalog_bp.route('/api/catalog/categories/<category_id>', methods=['DELETE'])
@login_required
def delete_category(category_id):
    with get_db_session() as db:
        CatalogRepository(db).delete_category(category_id)
    return no_content()


# ============================================================================
# PRODUCTS
# ============================================================================

@catalog_bp.route('/api/catalog/products', methods=['GET'])
@login_required
def list_products():
    """Products with their category"""
    with get_db_session() as db:
        products = CatalogRepository(db).list_products()
    return jsonify(products)


@catalog_bp.route('/api/catalog/products', methods=['POST'])
@login_required
def create_product():
    data = validate_product_payload(get_json_body())
    with get_db_session() as db:
        product = CatalogRepository(db).create_product(data)
    return jsonify(product), 201


@catalog_bp.route('/api/catalog/products/<product_id>', methods=['PUT'])
@login_required
def update_product(product_id):
    data = validate_product_payload(get_json_body())
    with get_db_session() as db:
        product = CatalogRepository(db).update_product(product_id, data)
    return jsonify(product)


@catalog_bp.route('/api/catalog/products/<product_id>', methods=['DELETE'])
@login_required
def delete_product(product_id):
    with get_db_session() as db:
        CatalogRepository(db).delete_product(product_id)
    return no_content()
