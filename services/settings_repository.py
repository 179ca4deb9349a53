"""
Settings Repository - preset values, pricing rules and templates.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from database.models import FormulaStep, PresetValues, PricingRule, Template, PRESET_VALUES_ID
from errors import NotFoundError

logger = logging.getLogger(__name__)


def build_formula(steps: List[Dict]) -> List[FormulaStep]:
    return [
        FormulaStep(
            left_operand=step['left_operand'],
            operator=step['operator'],
            right_operand=step['right_operand'],
            right_operand_type=step['right_operand_type'],
            order=step['order']
        )
        for step in steps
    ]


class SettingsRepository:
    """Repository for shop-wide pricing settings."""

    def __init__(self, session: Session):
        self.session = session

    # =========================================================================
    # PRESET VALUES
    # =========================================================================

    def get_preset_values(self) -> Optional[Dict]:
        """The singleton row, or None if it was never saved."""
        preset = self.session.get(PresetValues, PRESET_VALUES_ID)
        return preset.to_dict() if preset else None

    def upsert_preset_values(self, data: Dict) -> Dict:
        preset = self.session.get(PresetValues, PRESET_VALUES_ID)
        if not preset:
            preset = PresetValues(id=PRESET_VALUES_ID)
            self.session.add(preset)

        for field in PresetValues.NUMERIC_FIELDS:
            setattr(preset, field, data[field])

        self.session.flush()
        logger.info("Saved preset values")
        return preset.to_dict()

    # =========================================================================
    # PRICING RULES
    # =========================================================================

    def _get_rule(self, rule_id: str) -> PricingRule:
        rule = self.session.query(PricingRule).options(
            selectinload(PricingRule.formula)
        ).filter(PricingRule.id == rule_id).first()
        if not rule:
            raise NotFoundError('Pricing rule not found')
        return rule

    def list_pricing_rules(self) -> List[Dict]:
        rules = self.session.query(PricingRule).options(
            selectinload(PricingRule.formula)
        ).order_by(PricingRule.name).all()
        return [r.to_dict() for r in rules]

    def get_pricing_rule(self, rule_id: str) -> Dict:
        return self._get_rule(rule_id).to_dict()

    def create_pricing_rule(self, data: Dict) -> Dict:
        rule = PricingRule(name=data['name'], result=data['result'])
        rule.formula = build_formula(data['formula'])
        self.session.add(rule)
        self.session.flush()
        self.session.refresh(rule)
        logger.info(f"Created pricing rule: {rule.id} ({len(rule.formula)} steps)")
        return rule.to_dict()

    def update_pricing_rule(self, rule_id: str, data: Dict) -> Dict:
        """Overwrite name/result and replace every formula step."""
        rule = self._get_rule(rule_id)

        self.session.query(FormulaStep).filter(
            FormulaStep.pricing_rule_id == rule.id
        ).delete(synchronize_session=False)
        self.session.expire(rule, ['formula'])

        rule.name = data['name']
        rule.result = data['result']
        rule.formula = build_formula(data['formula'])

        self.session.flush()
        self.session.refresh(rule)
        logger.info(f"Updated pricing rule: {rule_id}")
        return rule.to_dict()

    def delete_pricing_rule(self, rule_id: str) -> None:
        rule = self._get_rule(rule_id)
        self.session.delete(rule)
        self.session.flush()
        logger.info(f"Deleted pricing rule: {rule_id}")

    # =========================================================================
    # TEMPLATES
    # =========================================================================

    def get_template(self, template_type: str) -> Optional[Dict]:
        template = self.session.query(Template).filter(Template.type == template_type).first()
        return template.to_dict() if template else None

    def upsert_template(self, template_type: str, settings: Dict) -> Dict:
        template = self.session.query(Template).filter(Template.type == template_type).first()
        if not template:
            template = Template(type=template_type)
            self.session.add(template)

        template.settings = settings
        self.session.flush()
        logger.info(f"Saved template: {template_type}")
        return template.to_dict()
