"""initial flower shop schema

Revision ID: 3f1c9a7d2e10
Revises:
Create Date: 2026-10-19 10:12:41.518230

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2e10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

stock_status = sa.Enum('NEW', 'OLD', 'DAMAGED', name='stockstatus')
purchase_payment_status = sa.Enum('PAID', 'CREDIT', name='purchasepaymentstatus')
payment_mode = sa.Enum('CASH', 'UPI', 'BANK', 'CREDIT', name='paymentmode')
customer_payment_method = sa.Enum('CASH', 'UPI', 'CARD', 'BANK', 'CHEQUE', name='customerpaymentmethod')
adjustment_type = sa.Enum('ADD', 'REMOVE', name='adjustmenttype')
adjustment_category = sa.Enum('OPENING', 'OTHER', name='adjustmentcategory')
bank_transaction_type = sa.Enum('IN', 'OUT', name='banktransactiontype')
bank_transaction_category = sa.Enum('OPENING', 'UPI', 'SUPPLIER', 'EXPENSE', 'OTHER', name='banktransactioncategory')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
    ]


def _soft_delete():
    return [
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_by', sa.String(), nullable=True),
    ]


def upgrade() -> None:
    """Create the shop tables."""
    op.create_table(
        'app_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('value', sa.String(length=255), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_app_config_name', 'app_config', ['name'], unique=True)

    op.create_table(
        'audit_log',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('table_name', sa.String(), nullable=False),
        sa.Column('record_id', sa.Integer(), nullable=False),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('changed_by', sa.String(), nullable=False),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('old_values', sa.JSON(), nullable=True),
        sa.Column('new_values', sa.JSON(), nullable=True),
    )

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False, unique=True),
        sa.Column('default_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('opening_balance', sa.Numeric(10, 2), nullable=False),
        sa.Column('outstanding_balance', sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'suppliers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('contact', sa.String(), nullable=True),
        sa.Column('opening_balance', sa.Numeric(10, 2), nullable=False),
        sa.Column('outstanding_balance', sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'bank_accounts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('account_number', sa.String(), nullable=True),
        sa.Column('ifsc', sa.String(), nullable=True),
        sa.Column('balance', sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'stock_batches',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('product_name', sa.String(), nullable=False),
        sa.Column('quantity', sa.Numeric(10, 3), nullable=False),
        sa.Column('original_quantity', sa.Numeric(10, 3), nullable=False),
        sa.Column('purchase_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('selling_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('purchase_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('supplier_id', sa.Integer(), sa.ForeignKey('suppliers.id'), nullable=True),
        sa.Column('supplier_name', sa.String(), nullable=True),
        sa.Column('payment_status', purchase_payment_status, nullable=False),
        sa.Column('invoice_no', sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_stock_batches_invoice_no', 'stock_batches', ['invoice_no'])

    op.create_table(
        'sales',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sale_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('sub_total', sa.Numeric(10, 2), nullable=False),
        sa.Column('discount', sa.Numeric(10, 2), nullable=False),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('amount_paid', sa.Numeric(10, 2), nullable=False),
        sa.Column('change_returned', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_mode', payment_mode, nullable=False),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id'), nullable=True),
        sa.Column('customer_name', sa.String(), nullable=True),
        sa.Column('bank_account_id', sa.Integer(), sa.ForeignKey('bank_accounts.id'), nullable=True),
        *_timestamps(),
        *_soft_delete(),
    )

    op.create_table(
        'sale_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sale_id', sa.Integer(), sa.ForeignKey('sales.id'), nullable=False),
        sa.Column('stock_batch_id', sa.Integer(), sa.ForeignKey('stock_batches.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('product_name', sa.String(), nullable=False),
        sa.Column('quantity', sa.Numeric(10, 3), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('status', stock_status, nullable=False),
    )

    op.create_table(
        'expenses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('expense_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('payment_mode', sa.String(), nullable=True),
        sa.Column('bank_account_id', sa.Integer(), sa.ForeignKey('bank_accounts.id'), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'customer_payments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('payment_method', customer_payment_method, nullable=False),
        sa.Column('bank_account_id', sa.Integer(), sa.ForeignKey('bank_accounts.id'), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'supplier_payments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('supplier_id', sa.Integer(), sa.ForeignKey('suppliers.id'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('payment_mode', sa.String(), nullable=True),
        sa.Column('bank_account_id', sa.Integer(), sa.ForeignKey('bank_accounts.id'), nullable=True),
        sa.Column('hide_from_daybook', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        'cash_adjustments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('type', adjustment_type, nullable=False),
        sa.Column('category', adjustment_category, nullable=False),
        sa.Column('adjustment_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'bank_transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('bank_account_id', sa.Integer(), sa.ForeignKey('bank_accounts.id'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('type', bank_transaction_type, nullable=False),
        sa.Column('category', bank_transaction_category, nullable=False),
        sa.Column('transaction_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('source_type', sa.String(), nullable=True),
        sa.Column('source_id', sa.Integer(), nullable=True),
        *_timestamps(),
        *_soft_delete(),
    )


def downgrade() -> None:
    """Drop the shop tables and their enum types."""
    for table in [
        'bank_transactions', 'cash_adjustments', 'supplier_payments', 'customer_payments',
        'expenses', 'sale_items', 'sales', 'stock_batches', 'bank_accounts', 'suppliers',
        'customers', 'products', 'audit_log', 'app_config',
    ]:
        op.drop_table(table)
    bind = op.get_bind()
    for enum_type in [
        stock_status, purchase_payment_status, payment_mode, customer_payment_method,
        adjustment_type, adjustment_category, bank_transaction_type, bank_transaction_category,
    ]:
        enum_type.drop(bind, checkfirst=True)
