"""
Database status dump for the admin diagnostics page.
"""

import logging
from datetime import datetime
from typing import Dict, List

from sqlalchemy.orm import Session

from database.models import (
    User, Quote, Space, CabinetItem, Order, Receipt, Category, Product,
    PresetValues, PricingRule, FormulaStep, Template
)

logger = logging.getLogger(__name__)

STATUS_MODELS = (
    User, Quote, Space, CabinetItem, Order, Receipt, Category, Product,
    PresetValues, PricingRule, FormulaStep, Template,
)

# Columns never included in the dump
HIDDEN_COLUMNS = {'users': {'password_hash'}}


def _row_to_dict(row, hidden) -> Dict:
    data = {}
    for column in row.__table__.columns:
        if column.name in hidden:
            continue
        value = getattr(row, column.key)
        data[column.name] = value.isoformat() if isinstance(value, datetime) else value
    return data


def get_database_status(session: Session) -> Dict[str, List[Dict]]:
    """Every application table as flat rows with a row count."""
    tables = []
    for model in STATUS_MODELS:
        name = model.__tablename__
        hidden = HIDDEN_COLUMNS.get(name, set())
        rows = session.query(model).all()
        tables.append({
            'name': name,
            'count': len(rows),
            'data': [_row_to_dict(row, hidden) for row in rows],
        })

    logger.info(f"Database status dumped for {len(tables)} tables")
    return {'tables': tables}
