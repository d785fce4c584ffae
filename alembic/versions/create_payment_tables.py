"""Create orders, order_statuses and webhook_logs tables.

Revision ID: create_payment_tables
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'create_payment_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'orders',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('school_id', sa.String(100), nullable=False),
        sa.Column('trustee_id', sa.String(100), nullable=False),
        sa.Column('student_info', sa.JSON(), nullable=False),
        sa.Column('gateway_name', sa.String(100), nullable=False),
        sa.Column('custom_order_id', sa.String(64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_orders_school_id', 'orders', ['school_id'])
    op.create_index('ix_orders_custom_order_id', 'orders', ['custom_order_id'], unique=True)
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])
    
    # One status row per order; no cascading delete
    op.create_table(
        'order_statuses',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('collect_id', sa.Uuid(), sa.ForeignKey('orders.id'), nullable=False),
        sa.Column('order_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('transaction_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('payment_mode', sa.String(50), nullable=True),
        sa.Column('payment_details', sa.String(255), nullable=True),
        sa.Column('bank_reference', sa.String(255), nullable=True),
        sa.Column('payment_message', sa.Text(), nullable=True),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('payment_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_order_statuses_collect_id', 'order_statuses', ['collect_id'], unique=True)
    op.create_index('ix_order_statuses_status', 'order_statuses', ['status'])
    
    op.create_table(
        'webhook_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('event_type', sa.String(50), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=True),
        sa.Column('status', sa.Integer(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('received_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_webhook_logs_event_type', 'webhook_logs', ['event_type'])
    op.create_index('ix_webhook_logs_received_at', 'webhook_logs', ['received_at'])


def downgrade() -> None:
    op.drop_table('webhook_logs')
    op.drop_table('order_statuses')
    op.drop_table('orders')
