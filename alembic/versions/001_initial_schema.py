"""Initial schema - creates all tables for RetailPulse

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=7), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('sku', sa.String(length=64), nullable=False, unique=True),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('cost_price', sa.Float(), nullable=False),
        sa.Column('selling_price', sa.Float(), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('expiry_date', sa.Date(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.CheckConstraint('stock >= 0', name='ck_products_stock_non_negative'),
        sa.CheckConstraint('cost_price >= 0', name='ck_products_cost_price_non_negative'),
        sa.CheckConstraint('selling_price >= 0', name='ck_products_selling_price_non_negative'),
    )
    op.create_index('ix_products_category', 'products', ['category'])
    op.create_index('ix_products_is_active', 'products', ['is_active'])

    op.create_table(
        'category_gst',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
        sa.Column('gst_rate', sa.Float(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    )

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('mobile', sa.String(length=20), nullable=False),
        sa.Column('customer_code', sa.String(length=32), nullable=False, unique=True),
        sa.Column('credit_points', sa.Integer(), nullable=False),
        sa.Column('points_redeemed', sa.Integer(), nullable=False),
        sa.Column('total_purchases', sa.Float(), nullable=False),
        sa.Column('tier', sa.String(length=6), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_customers_mobile', 'customers', ['mobile'])
    op.create_index('ix_customers_created_at', 'customers', ['created_at'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('invoice_number', sa.String(length=40), nullable=False, unique=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id', ondelete='SET NULL'), nullable=True),
        sa.Column('subtotal', sa.Float(), nullable=False),
        sa.Column('gst_amount', sa.Float(), nullable=False),
        sa.Column('discount', sa.Float(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('payment_method', sa.String(length=4), nullable=False),
        sa.Column('payment_status', sa.String(length=30), nullable=False),
        sa.Column('credit_points_earned', sa.Integer(), nullable=False),
        sa.Column('is_refunded', sa.Boolean(), nullable=False),
        sa.Column('refund_id', sa.Integer(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_transactions_customer_id', 'transactions', ['customer_id'])
    op.create_index('ix_transactions_created_at', 'transactions', ['created_at'])

    op.create_table(
        'transaction_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('transaction_id', sa.Integer(), sa.ForeignKey('transactions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('product_name', sa.String(length=200), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Float(), nullable=False),
        sa.Column('subtotal', sa.Float(), nullable=False),
        sa.Column('gst_rate', sa.Float(), nullable=False),
        sa.Column('gst_amount', sa.Float(), nullable=False),
        sa.Column('total_with_gst', sa.Float(), nullable=False),
    )
    op.create_index('ix_transaction_items_transaction_id', 'transaction_items', ['transaction_id'])
    op.create_index('ix_transaction_items_product_id', 'transaction_items', ['product_id'])

    op.create_table(
        'refunds',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('transaction_id', sa.Integer(), sa.ForeignKey('transactions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('refund_amount', sa.Float(), nullable=False),
        sa.Column('refund_reason', sa.String(), nullable=False),
        sa.Column('points_reversed', sa.Integer(), nullable=False),
        sa.Column('stock_reversed', sa.Boolean(), nullable=False),
        sa.Column('processed_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_refunds_transaction_id', 'refunds', ['transaction_id'])
    op.create_index('ix_refunds_created_at', 'refunds', ['created_at'])

    op.create_table(
        'expenses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('expense_date', sa.Date(), nullable=False),
        sa.Column('payment_method', sa.String(length=30), nullable=False),
        sa.Column('vendor', sa.String(length=200), nullable=True),
        sa.Column('receipt_url', sa.String(), nullable=True),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_expenses_category', 'expenses', ['category'])
    op.create_index('ix_expenses_expense_date', 'expenses', ['expense_date'])

    op.create_table(
        'stock_alerts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False),
        sa.Column('threshold', sa.Integer(), nullable=False),
        sa.Column('sms_sent', sa.Boolean(), nullable=False),
        sa.Column('sms_sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('triggered_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('resolved', sa.Boolean(), nullable=False),
        sa.Column('acknowledged', sa.Boolean(), nullable=False),
        sa.Column('acknowledged_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('acknowledged_by', sa.Integer(), nullable=True),
    )
    op.create_index('ix_stock_alerts_product_id', 'stock_alerts', ['product_id'])
    op.create_index('ix_stock_alerts_triggered_at', 'stock_alerts', ['triggered_at'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('entity_type', sa.String(length=50), nullable=True),
        sa.Column('entity_id', sa.String(length=100), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_entity_type', 'audit_logs', ['entity_type'])
    op.create_index('ix_audit_logs_entity_id', 'audit_logs', ['entity_id'])
    op.create_index('ix_audit_logs_user_id', 'audit_logs', ['user_id'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('stock_alerts')
    op.drop_table('expenses')
    op.drop_table('refunds')
    op.drop_table('transaction_items')
    op.drop_table('transactions')
    op.drop_table('customers')
    op.drop_table('category_gst')
    op.drop_table('products')
    op.drop_table('users')
