"""
SQLAlchemy models for the Cabinet Shop Manager.
Defines the tables for users, quotes, orders, receipts, catalog and pricing settings.
"""

import uuid
from datetime import datetime
from sqlalchemy import (
    Column, String, Text, Integer, Float, DateTime, ForeignKey, JSON, Index
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from database.connection import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), 'postgresql')

PRESET_VALUES_ID = '1'


def generate_uuid():
    """Generate a new UUID."""
    return str(uuid.uuid4())


def _iso(value):
    return value.isoformat() if value else None


# =============================================================================
# USERS
# =============================================================================

class User(Base):
    """Application users. Owns quotes and orders."""
    __tablename__ = 'users'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255))
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), default='user')  # admin, user
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    quotes = relationship("Quote", back_populates="user")
    orders = relationship("Order", back_populates="user")

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'role': self.role,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


# =============================================================================
# QUOTES
# =============================================================================

class Quote(Base):
    """Customer proposal made of spaces and cabinet items."""
    __tablename__ = 'quotes'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey('users.id'), nullable=False)
    client_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    project_name = Column(String(255), nullable=False)
    installation_address = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default='draft')  # draft, pending, approved, rejected
    total = Column(Float, nullable=False, default=0)
    adjustment_type = Column(String(20))  # discount, surcharge
    adjustment_percentage = Column(Float)
    adjusted_total = Column(Float)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="quotes")
    spaces = relationship(
        "Space", back_populates="quote", cascade="all, delete-orphan",
        order_by="Space.position"
    )
    orders = relationship("Order", back_populates="quote")

    __table_args__ = (
        Index('ix_quotes_user', 'user_id'),
        Index('ix_quotes_status', 'status'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'client_name': self.client_name,
            'email': self.email,
            'phone': self.phone,
            'project_name': self.project_name,
            'installation_address': self.installation_address,
            'status': self.status,
            'total': self.total,
            'adjustment_type': self.adjustment_type,
            'adjustment_percentage': self.adjustment_percentage,
            'adjusted_total': self.adjusted_total,
            'spaces': [space.to_dict() for space in self.spaces],
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class Space(Base):
    """A named grouping (usually a room) inside a quote."""
    __tablename__ = 'spaces'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    quote_id = Column(String(36), ForeignKey('quotes.id'), nullable=False)
    name = Column(String(255), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    quote = relationship("Quote", back_populates="spaces")
    items = relationship(
        "CabinetItem", back_populates="space", cascade="all, delete-orphan",
        order_by="CabinetItem.position"
    )

    __table_args__ = (
        Index('ix_spaces_quote', 'quote_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'quote_id': self.quote_id,
            'name': self.name,
            'position': self.position,
            'items': [item.to_dict() for item in self.items]
        }


class CabinetItem(Base):
    """A priced, dimensioned line item inside a space."""
    __tablename__ = 'cabinet_items'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    space_id = Column(String(36), ForeignKey('spaces.id'), nullable=False)
    product_id = Column(String(36))
    material = Column(String(255))
    width = Column(Float, nullable=False)
    height = Column(Float, nullable=False)
    depth = Column(Float, nullable=False)
    price = Column(Float, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    space = relationship("Space", back_populates="items")

    __table_args__ = (
        Index('ix_cabinet_items_space', 'space_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'space_id': self.space_id,
            'product_id': self.product_id,
            'material': self.material,
            'width': self.width,
            'height': self.height,
            'depth': self.depth,
            'price': self.price,
            'position': self.position
        }


# =============================================================================
# ORDERS & RECEIPTS
# =============================================================================

class Order(Base):
    """Snapshot of an approved quote, tracked through fulfilment and payment."""
    __tablename__ = 'orders'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    quote_id = Column(String(36), ForeignKey('quotes.id', ondelete='SET NULL'))
    user_id = Column(String(36), ForeignKey('users.id'), nullable=False)
    client_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    project_name = Column(String(255), nullable=False)
    installation_address = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default='pending')
    total = Column(Float, nullable=False, default=0)
    adjustment_type = Column(String(20))
    adjustment_percentage = Column(Float)
    adjusted_total = Column(Float)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="orders")
    quote = relationship("Quote", back_populates="orders")
    receipts = relationship(
        "Receipt", back_populates="order", cascade="all, delete-orphan",
        order_by="Receipt.created_at"
    )

    __table_args__ = (
        Index('ix_orders_user', 'user_id'),
        Index('ix_orders_quote', 'quote_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'quote_id': self.quote_id,
            'user_id': self.user_id,
            'client_name': self.client_name,
            'email': self.email,
            'phone': self.phone,
            'project_name': self.project_name,
            'installation_address': self.installation_address,
            'status': self.status,
            'total': self.total,
            'adjustment_type': self.adjustment_type,
            'adjustment_percentage': self.adjustment_percentage,
            'adjusted_total': self.adjusted_total,
            'receipts': [receipt.to_dict() for receipt in self.receipts],
            'quote': self.quote.to_dict() if self.quote else None,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class Receipt(Base):
    """Partial payment against an order."""
    __tablename__ = 'receipts'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    order_id = Column(String(36), ForeignKey('orders.id'), nullable=False)
    payment_percentage = Column(Float, nullable=False)
    amount = Column(Float, nullable=False)
    status = Column(String(20), nullable=False, default='draft')  # draft, sent, paid, void
    sent_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    order = relationship("Order", back_populates="receipts")

    __table_args__ = (
        Index('ix_receipts_order', 'order_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'order_id': self.order_id,
            'payment_percentage': self.payment_percentage,
            'amount': self.amount,
            'status': self.status,
            'sent_at': _iso(self.sent_at),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


# =============================================================================
# CATALOG
# =============================================================================

class Category(Base):
    """Product category."""
    __tablename__ = 'categories'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    products = relationship("Product", back_populates="category")

    def to_dict(self, include_products=False):
        data = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }
        if include_products:
            data['products'] = [product.to_dict() for product in self.products]
        return data


class Product(Base):
    """Catalog product, always filed under one category."""
    __tablename__ = 'products'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    category_id = Column(String(36), ForeignKey('categories.id'), nullable=False)
    name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False)
    materials = Column(JSONType, default=list)
    unit_cost = Column(Float, nullable=False, default=0)
    description = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    category = relationship("Category", back_populates="products")

    __table_args__ = (
        Index('ix_products_category', 'category_id'),
    )

    def to_dict(self, include_category=False):
        data = {
            'id': self.id,
            'category_id': self.category_id,
            'name': self.name,
            'type': self.type,
            'materials': self.materials or [],
            'unit_cost': self.unit_cost,
            'description': self.description,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }
        if include_category:
            data['category'] = self.category.to_dict() if self.category else None
        return data


# =============================================================================
# PRICING SETTINGS
# =============================================================================

class PresetValues(Base):
    """Singleton row of business parameters, always stored under PRESET_VALUES_ID."""
    __tablename__ = 'preset_values'

    NUMERIC_FIELDS = (
        'default_height', 'default_width', 'default_depth', 'labor_rate',
        'material_markup', 'tax_rate', 'delivery_fee', 'installation_fee',
        'storage_fee', 'minimum_order', 'rush_order_fee', 'shipping_rate',
        'import_tax_rate', 'exchange_rate',
    )

    id = Column(String(36), primary_key=True, default=PRESET_VALUES_ID)
    default_height = Column(Float, nullable=False, default=0)
    default_width = Column(Float, nullable=False, default=0)
    default_depth = Column(Float, nullable=False, default=0)
    labor_rate = Column(Float, nullable=False, default=0)
    material_markup = Column(Float, nullable=False, default=0)
    tax_rate = Column(Float, nullable=False, default=0)
    delivery_fee = Column(Float, nullable=False, default=0)
    installation_fee = Column(Float, nullable=False, default=0)
    storage_fee = Column(Float, nullable=False, default=0)
    minimum_order = Column(Float, nullable=False, default=0)
    rush_order_fee = Column(Float, nullable=False, default=0)
    shipping_rate = Column(Float, nullable=False, default=0)
    import_tax_rate = Column(Float, nullable=False, default=0)
    exchange_rate = Column(Float, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        data = {'id': self.id}
        for field in self.NUMERIC_FIELDS:
            data[field] = getattr(self, field)
        data['created_at'] = _iso(self.created_at)
        data['updated_at'] = _iso(self.updated_at)
        return data


class PricingRule(Base):
    """Named computation made of ordered formula steps."""
    __tablename__ = 'pricing_rules'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    result = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    formula = relationship(
        "FormulaStep", back_populates="pricing_rule", cascade="all, delete-orphan",
        order_by="FormulaStep.order"
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'result': self.result,
            'formula': [step.to_dict() for step in self.formula],
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class FormulaStep(Base):
    """left_operand <operator> right_operand, evaluated in ``order``."""
    __tablename__ = 'formula_steps'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    pricing_rule_id = Column(String(36), ForeignKey('pricing_rules.id'), nullable=False)
    left_operand = Column(String(255), nullable=False)
    operator = Column(String(20), nullable=False)
    right_operand = Column(String(255), nullable=False)
    right_operand_type = Column(String(50), nullable=False)  # field, number
    order = Column(Integer, nullable=False, default=0)

    pricing_rule = relationship("PricingRule", back_populates="formula")

    __table_args__ = (
        Index('ix_formula_steps_rule', 'pricing_rule_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'pricing_rule_id': self.pricing_rule_id,
            'left_operand': self.left_operand,
            'operator': self.operator,
            'right_operand': self.right_operand,
            'right_operand_type': self.right_operand_type,
            'order': self.order
        }


class Template(Base):
    """Document/quote template settings, one row per template type."""
    __tablename__ = 'templates'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    type = Column(String(100), unique=True, nullable=False)
    settings = Column(JSONType, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'settings': self.settings or {},
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }
