"""initial ledger schema

Revision ID: a1c3e5f70001
Revises:
Create Date: 2026-10-17 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f70001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.Numeric(12, 2)

# Shared by the four obligation tables, so it is created once up front
payment_status_enum = postgresql.ENUM('PENDING', 'PARTIAL', 'PAID', name='paymentstatus', create_type=False)


def _timestamp_columns():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
    ]


def _payment_tracking_columns():
    return [
        sa.Column('total_amount', MONEY, nullable=False),
        sa.Column('amount_paid', MONEY, server_default='0', nullable=False),
        sa.Column('amount_due', MONEY, server_default='0', nullable=False),
        sa.Column('payment_status', payment_status_enum, nullable=False),
        sa.Column('payment_type', sa.String(length=10), nullable=False),
    ]


def _create_obligation_table(table_name, number_column, party_column, date_column, constraint_name):
    op.create_table(
        table_name,
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column(number_column, sa.Integer(), nullable=False),
        sa.Column(party_column, sa.Integer(), nullable=False),
        sa.Column(date_column, sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_payment_tracking_columns(),
        *_timestamp_columns(),
        sa.ForeignKeyConstraint([party_column], ['business_partners.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', number_column, name=constraint_name),
    )
    op.create_index(op.f(f'ix_{table_name}_id'), table_name, ['id'])
    op.create_index(op.f(f'ix_{table_name}_tenant_id'), table_name, ['tenant_id'])
    op.create_index(op.f(f'ix_{table_name}_{number_column}'), table_name, [number_column])
    op.create_index(op.f(f'ix_{table_name}_{party_column}'), table_name, [party_column])
    op.create_index(op.f(f'ix_{table_name}_payment_status'), table_name, ['payment_status'])


def upgrade() -> None:
    """Upgrade schema."""
    payment_status_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        'audit_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.String(), nullable=True),
        sa.Column('table_name', sa.String(), nullable=False),
        sa.Column('record_id', sa.Integer(), nullable=False),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('changed_by', sa.String(), nullable=True),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('old_values', sa.JSON(), nullable=True),
        sa.Column('new_values', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_audit_log_id'), 'audit_log', ['id'])
    op.create_index(op.f('ix_audit_log_tenant_id'), 'audit_log', ['tenant_id'])

    op.create_table(
        'chart_of_accounts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('account_code', sa.String(length=20), nullable=False),
        sa.Column('account_name', sa.String(length=100), nullable=False),
        sa.Column('account_type', sa.String(length=20), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_system_account', sa.Boolean(), nullable=False),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'account_code', name='_tenant_account_code_uc'),
    )
    op.create_index(op.f('ix_chart_of_accounts_id'), 'chart_of_accounts', ['id'])
    op.create_index(op.f('ix_chart_of_accounts_tenant_id'), 'chart_of_accounts', ['tenant_id'])
    op.create_index(op.f('ix_chart_of_accounts_account_code'), 'chart_of_accounts', ['account_code'])

    op.create_table(
        'journal_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('sequence_number', sa.Integer(), nullable=False),
        sa.Column('entry_date', sa.Date(), nullable=False),
        sa.Column('entry_type', sa.String(length=30), nullable=False),
        sa.Column('reference_type', sa.String(length=30), nullable=True),
        sa.Column('reference_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('total_amount', MONEY, nullable=False),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'sequence_number', name='_tenant_journal_sequence_uc'),
    )
    op.create_index(op.f('ix_journal_entries_id'), 'journal_entries', ['id'])
    op.create_index(op.f('ix_journal_entries_tenant_id'), 'journal_entries', ['tenant_id'])
    op.create_index('ix_journal_entries_tenant_date', 'journal_entries', ['tenant_id', 'entry_date'])
    op.create_index('ix_journal_entries_reference', 'journal_entries', ['tenant_id', 'reference_type', 'reference_id'])

    op.create_table(
        'journal_lines',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('journal_entry_id', sa.Integer(), nullable=False),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('account_name', sa.String(length=100), nullable=False),
        sa.Column('debit', MONEY, nullable=False),
        sa.Column('credit', MONEY, nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        *_timestamp_columns(),
        sa.CheckConstraint('debit >= 0'),
        sa.CheckConstraint('credit >= 0'),
        sa.CheckConstraint('(debit > 0 AND credit = 0) OR (debit = 0 AND credit > 0)', name='check_debit_or_credit_exclusive'),
        sa.ForeignKeyConstraint(['journal_entry_id'], ['journal_entries.id']),
        sa.ForeignKeyConstraint(['account_id'], ['chart_of_accounts.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_journal_lines_id'), 'journal_lines', ['id'])
    op.create_index(op.f('ix_journal_lines_tenant_id'), 'journal_lines', ['tenant_id'])
    op.create_index(op.f('ix_journal_lines_journal_entry_id'), 'journal_lines', ['journal_entry_id'])
    op.create_index(op.f('ix_journal_lines_account_id'), 'journal_lines', ['account_id'])

    op.create_table(
        'cashbook_balances',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('balance_date', sa.Date(), nullable=False),
        sa.Column('opening_balance', MONEY, nullable=False),
        sa.Column('closing_balance', MONEY, nullable=False),
        sa.Column('total_income', MONEY, nullable=False),
        sa.Column('total_expense', MONEY, nullable=False),
        sa.Column('is_edited', sa.Boolean(), nullable=False),
        sa.Column('edited_by', sa.String(), nullable=True),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'balance_date', name='_tenant_cashbook_date_uc'),
    )
    op.create_index(op.f('ix_cashbook_balances_id'), 'cashbook_balances', ['id'])
    op.create_index(op.f('ix_cashbook_balances_tenant_id'), 'cashbook_balances', ['tenant_id'])
    op.create_index(op.f('ix_cashbook_balances_balance_date'), 'cashbook_balances', ['balance_date'])

    op.create_table(
        'business_partners',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('status', sa.Enum('ACTIVE', 'INACTIVE', 'BLOCKED', name='partnerstatus'), nullable=False),
        sa.Column('is_vendor', sa.Boolean(), nullable=False),
        sa.Column('is_customer', sa.Boolean(), nullable=False),
        sa.Column('current_receivable', MONEY, nullable=False),
        sa.Column('current_payable', MONEY, nullable=False),
        sa.Column('overpaid_amount', MONEY, nullable=False),
        sa.Column('advance_paid_amount', MONEY, nullable=False),
        sa.Column('last_payment_date', sa.Date(), nullable=True),
        sa.Column('last_payment_amount', MONEY, nullable=True),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_business_partners_id'), 'business_partners', ['id'])
    op.create_index(op.f('ix_business_partners_tenant_id'), 'business_partners', ['tenant_id'])

    _create_obligation_table('sales_orders', 'so_number', 'customer_id', 'order_date', '_tenant_so_number_uc')
    _create_obligation_table('direct_sales', 'sale_number', 'customer_id', 'sale_date', '_tenant_sale_number_uc')
    _create_obligation_table('purchase_orders', 'po_number', 'vendor_id', 'order_date', '_tenant_po_number_uc')
    _create_obligation_table('direct_purchases', 'purchase_number', 'vendor_id', 'purchase_date', '_tenant_purchase_number_uc')

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('direction', sa.Enum('RECEIVED', 'MADE', name='paymentdirection'), nullable=False),
        sa.Column('partner_id', sa.Integer(), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('payment_mode', sa.String(length=20), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('reference_number', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('journal_entry_status', sa.Enum('PENDING', 'SUCCESS', 'FAILED', name='journalpostingstatus'), nullable=False),
        sa.Column('journal_entry_error', sa.Text(), nullable=True),
        sa.Column('journal_entry_id', sa.Integer(), nullable=True),
        *_timestamp_columns(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_by', sa.String(), nullable=True),
        sa.ForeignKeyConstraint(['partner_id'], ['business_partners.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_payments_id'), 'payments', ['id'])
    op.create_index(op.f('ix_payments_tenant_id'), 'payments', ['tenant_id'])
    op.create_index(op.f('ix_payments_partner_id'), 'payments', ['partner_id'])
    op.create_index(op.f('ix_payments_payment_date'), 'payments', ['payment_date'])

    op.create_table(
        'payment_allocations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('payment_id', sa.Integer(), nullable=False),
        sa.Column('obligation_type', sa.String(length=20), nullable=False),
        sa.Column('obligation_id', sa.Integer(), nullable=False),
        sa.Column('amount_allocated', MONEY, nullable=False),
        sa.Column('status', sa.Enum('CLEARED', 'PARTIAL', name='allocationstatus'), nullable=False),
        *_timestamp_columns(),
        sa.ForeignKeyConstraint(['payment_id'], ['payments.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_payment_allocations_id'), 'payment_allocations', ['id'])
    op.create_index(op.f('ix_payment_allocations_tenant_id'), 'payment_allocations', ['tenant_id'])
    op.create_index(op.f('ix_payment_allocations_payment_id'), 'payment_allocations', ['payment_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('payment_allocations')
    op.drop_table('payments')
    for table_name in ('direct_purchases', 'purchase_orders', 'direct_sales', 'sales_orders'):
        op.drop_table(table_name)
    op.drop_table('business_partners')
    op.drop_table('cashbook_balances')
    op.drop_table('journal_lines')
    op.drop_table('journal_entries')
    op.drop_table('chart_of_accounts')
    op.drop_table('audit_log')

    bind = op.get_bind()
    for enum_name in ('allocationstatus', 'journalpostingstatus', 'paymentdirection', 'partnerstatus', 'paymentstatus'):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
