"""
Database package for the Cabinet Shop Manager.
Provides SQLAlchemy models, connection management, and session handling.
"""

from database.connection import (
    Base,
    init_engine,
    get_engine,
    get_db_session,
    init_db,
    check_db_connection
)

from database.models import (
    User,
    Quote,
    Space,
    CabinetItem,
    Order,
    Receipt,
    Category,
    Product,
    PresetValues,
    PricingRule,
    FormulaStep,
    Template,
    PRESET_VALUES_ID
)

__all__ = [
    # Connection
    'Base',
    'init_engine',
    'get_engine',
    'get_db_session',
    'init_db',
    'check_db_connection',
    # Models
    'User',
    'Quote',
    'Space',
    'CabinetItem',
    'Order',
    'Receipt',
    'Category',
    'Product',
    'PresetValues',
    'PricingRule',
    'FormulaStep',
    'Template',
    'PRESET_VALUES_ID'
]
