"""
Settings Blueprint

- /api/settings/preset-values          - singleton business parameters
- /api/settings/pricing-rules[/<id>]   - named formulas
- /api/settings/templates/<type>       - template settings per type
"""

import logging
from flask import Blueprint, jsonify

from auth import login_required
from app.utils import get_json_body, no_content
from database.connection import get_db_session
from services.settings_repository import SettingsRepository
from validators import (
    validate_preset_values_payload,
    validate_pricing_rule_payload,
    validate_template_payload,
)

logger = logging.getLogger(__name__)

# Create blueprint
settings_bp = Blueprint('settings_bp', __name__)


# ============================================================================
# PRESET VALUES
# ============================================================================

@settings_bp.route('/api/settings/preset-values', methods=['GET'])
@login_required
def get_preset_values():
    """Returns null until the values are saved once"""
    with get_db_session() as db:
        preset = SettingsRepository(db).get_preset_values()
    return jsonify(preset)


@settings_bp.route('/api/settings/preset-values', methods=['PUT'])
@login_required
def save_preset_values():
    data = validate_preset_values_payload(get_json_body())
    with get_db_session() as db:
        preset = SettingsRepository(db).upsert_preset_values(data)
    return jsonify(preset)


# ============================================================================
# PRICING RULES
# ============================================================================

@settings_bp.route('/api/settings/pricing-rules', methods=['GET'])
@login_required
def list_pricing_rules():
    with get_db_session() as db:
        rules = SettingsRepository(db).list_pricing_rules()
    return jsonify(rules)


@settings_bp.route('/api/settings/pricing-rules/<rule_id>', methods=['GET'])
@login_required
def get_pricing_rule(rule_id):
    with get_db_session() as db:
        rule = SettingsRepository(db).get_pricing_rule(rule_id)
    return jsonify(rule)


@settings_bp.route('/api/settings/pricing-rules', methods=['POST'])
@login_required
def create_pricing_rule():
    data = validate_pricing_rule_payload(get_json_body())
    with get_db_session() as db:
        rule = SettingsRepository(db).create_pricing_rule(data)
    return jsonify(rule), 201


@settings_bp.route('/api/settings/pricing-rules/<rule_id>', methods=['PUT'])
@login_required
def update_pricing_rule(rule_id):
    data = validate_pricing_rule_payload(get_json_body())
    with get_db_session() as db:
        rule = SettingsRepository(db).update_pricing_rule(rule_id, data)
    return jsonify(rule)


@settings_bp.route('/api/settings/pricing-rules/<rule_id>', methods=['DELETE'])
@login_required
def delete_pricing_rule(rule_id):
    with get_db_session() as db:
        SettingsRepository(db).delete_pricing_rule(rule_id)
    return no_content()


# ============================================================================
# TEMPLATES
# ============================================================================

@settings_bp.route('/api/settings/templates/<template_type>', methods=['GET'])
@login_required
def get_template(template_type):
    """Returns null when no template of this type exists"""
    with get_db_session() as db:
        template = SettingsRepository(db).get_template(template_type)
    return jsonify(template)


@settings_bp.route('/api/settings/templates/<template_type>', methods=['PUT'])
@login_required
def save_template(template_type):
    data = validate_template_payload(get_json_body())
    with get_db_session() as db:
        template = SettingsRepository(db).upsert_template(template_type, data['settings'])
    return jsonify(template)
