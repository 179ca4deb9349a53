"""Initial database schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates all tables for the Cabinet Shop Manager: users, quotes with their
spaces and cabinet items, orders and receipts, the catalog and pricing settings.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Users table
    op.create_table('users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255)),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(50), server_default='user'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )

    # Quotes table
    op.create_table('quotes',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('client_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('project_name', sa.String(255), nullable=False),
        sa.Column('installation_address', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='draft'),
        sa.Column('total', sa.Float(), nullable=False, server_default='0'),
        sa.Column('adjustment_type', sa.String(20)),
        sa.Column('adjustment_percentage', sa.Float()),
        sa.Column('adjusted_total', sa.Float()),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_quotes_user', 'quotes', ['user_id'])
    op.create_index('ix_quotes_status', 'quotes', ['status'])

    # Spaces table
    op.create_table('spaces',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('quote_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['quote_id'], ['quotes.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_spaces_quote', 'spaces', ['quote_id'])

    # Cabinet items table
    op.create_table('cabinet_items',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('space_id', sa.String(36), nullable=False),
        sa.Column('product_id', sa.String(36)),
        sa.Column('material', sa.String(255)),
        sa.Column('width', sa.Float(), nullable=False),
        sa.Column('height', sa.Float(), nullable=False),
        sa.Column('depth', sa.Float(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['space_id'], ['spaces.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_cabinet_items_space', 'cabinet_items', ['space_id'])

    # Orders table (quote_id survives quote deletion as NULL)
    op.create_table('orders',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('quote_id', sa.String(36)),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('client_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('project_name', sa.String(255), nullable=False),
        sa.Column('installation_address', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('total', sa.Float(), nullable=False, server_default='0'),
        sa.Column('adjustment_type', sa.String(20)),
        sa.Column('adjustment_percentage', sa.Float()),
        sa.Column('adjusted_total', sa.Float()),
        *_timestamps(),
        sa.ForeignKeyConstraint(['quote_id'], ['quotes.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_orders_user', 'orders', ['user_id'])
    op.create_index('ix_orders_quote', 'orders', ['quote_id'])

    # Receipts table
    op.create_table('receipts',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('order_id', sa.String(36), nullable=False),
        sa.Column('payment_percentage', sa.Float(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='draft'),
        sa.Column('sent_at', sa.DateTime()),
        *_timestamps(),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_receipts_order', 'receipts', ['order_id'])

    # Catalog
    op.create_table('categories',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('products',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('category_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.String(100), nullable=False),
        sa.Column('materials', JSONType),
        sa.Column('unit_cost', sa.Float(), nullable=False, server_default='0'),
        sa.Column('description', sa.Text()),
        *_timestamps(),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_products_category', 'products', ['category_id'])

    # Pricing settings
    preset_columns = [
        'default_height', 'default_width', 'default_depth', 'labor_rate',
        'material_markup', 'tax_rate', 'delivery_fee', 'installation_fee',
        'storage_fee', 'minimum_order', 'rush_order_fee', 'shipping_rate',
        'import_tax_rate',
    ]
    op.create_table('preset_values',
        sa.Column('id', sa.String(36), nullable=False),
        *[sa.Column(name, sa.Float(), nullable=False, server_default='0') for name in preset_columns],
        sa.Column('exchange_rate', sa.Float(), nullable=False, server_default='1'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('pricing_rules',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('result', sa.String(255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('formula_steps',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('pricing_rule_id', sa.String(36), nullable=False),
        sa.Column('left_operand', sa.String(255), nullable=False),
        sa.Column('operator', sa.String(20), nullable=False),
        sa.Column('right_operand', sa.String(255), nullable=False),
        sa.Column('right_operand_type', sa.String(50), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['pricing_rule_id'], ['pricing_rules.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_formula_steps_rule', 'formula_steps', ['pricing_rule_id'])

    op.create_table('templates',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('type', sa.String(100), nullable=False),
        sa.Column('settings', JSONType),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('type')
    )


def downgrade() -> None:
    op.drop_table('templates')
    op.drop_index('ix_formula_steps_rule', 'formula_steps')
    op.drop_table('formula_steps')
    op.drop_table('pricing_rules')
    op.drop_table('preset_values')
    op.drop_index('ix_products_category', 'products')
    op.drop_table('products')
    op.drop_table('categories')
    op.drop_index('ix_receipts_order', 'receipts')
    op.drop_table('receipts')
    op.drop_index('ix_orders_quote', 'orders')
    op.drop_index('ix_orders_user', 'orders')
    op.drop_table('orders')
    op.drop_index('ix_cabinet_items_space', 'cabinet_items')
    op.drop_table('cabinet_items')
    op.drop_index('ix_spaces_quote', 'spaces')
    op.drop_table('spaces')
    op.drop_index('ix_quotes_status', 'quotes')
    op.drop_index('ix_quotes_user', 'quotes')
    op.drop_table('quotes')
    op.drop_table('users')
