"""payments, messages and portfolios

Revision ID: 0002_payments_messages_portfolios
Revises: 0001_baseline
Create Date: 2026-10-19 15:00:00
"""
from alembic import op
import sqlalchemy as sa
import sqlmodel

# revision identifiers, used by Alembic.
revision = '0002_payments_messages_portfolios'
down_revision = '0001_baseline'
branch_labels = None
depends_on = None

# Enum columns store member names
payment_status = sa.Enum('PENDING', 'PROCESSING', 'COMPLETED', 'FAILED', 'REFUNDED', name='paymentstatus')
payment_type = sa.Enum('DEPOSIT', 'MILESTONE', 'FINAL', 'REFUND', name='paymenttype')


def upgrade() -> None:
    op.create_table(
        'payment_transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('contract_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('status', payment_status, nullable=False),
        sa.Column('type', payment_type, nullable=False),
        sa.Column('transaction_id', sqlmodel.AutoString(length=100), nullable=True),
        sa.Column('description', sqlmodel.AutoString(length=500), nullable=True),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['contract_id'], ['contracts.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_payment_transactions_contract_id'), 'payment_transactions', ['contract_id'], unique=False)
    op.create_index(op.f('ix_payment_transactions_status'), 'payment_transactions', ['status'], unique=False)
    op.create_index(op.f('ix_payment_transactions_created_at'), 'payment_transactions', ['created_at'], unique=False)

    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('contract_id', sa.Integer(), nullable=False),
        sa.Column('sender_id', sqlmodel.AutoString(length=100), nullable=False),
        sa.Column('receiver_id', sqlmodel.AutoString(length=100), nullable=False),
        sa.Column('subject', sqlmodel.AutoString(length=200), nullable=True),
        sa.Column('content', sqlmodel.AutoString(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['contract_id'], ['contracts.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_messages_contract_id'), 'messages', ['contract_id'], unique=False)
    op.create_index(op.f('ix_messages_receiver_id'), 'messages', ['receiver_id'], unique=False)

    op.create_table(
        'portfolios',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('freelancer_id', sqlmodel.AutoString(length=100), nullable=False),
        sa.Column('title', sqlmodel.AutoString(length=200), nullable=False),
        sa.Column('description', sqlmodel.AutoString(length=1000), nullable=True),
        sa.Column('detailed_bio', sqlmodel.AutoString(), nullable=True),
        sa.Column('profile_image_url', sqlmodel.AutoString(length=500), nullable=True),
        sa.Column('cover_image_url', sqlmodel.AutoString(length=500), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('is_featured', sa.Boolean(), nullable=False),
        sa.Column('view_count', sa.Integer(), nullable=False),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_portfolios_freelancer_id'), 'portfolios', ['freelancer_id'], unique=False)
    op.create_index(
        'uq_portfolios_freelancer_live', 'portfolios', ['freelancer_id'], unique=True,
        sqlite_where=sa.text('is_deleted = 0'), postgresql_where=sa.text('NOT is_deleted'),
    )

    op.create_table(
        'portfolio_cases',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('portfolio_id', sa.Integer(), nullable=False),
        sa.Column('title', sqlmodel.AutoString(length=200), nullable=False),
        sa.Column('description', sqlmodel.AutoString(length=500), nullable=True),
        sa.Column('detailed_description', sqlmodel.AutoString(), nullable=True),
        sa.Column('client_name', sqlmodel.AutoString(length=200), nullable=True),
        sa.Column('industry', sqlmodel.AutoString(length=100), nullable=True),
        sa.Column('project_url', sqlmodel.AutoString(length=500), nullable=True),
        sa.Column('budget_amount', sa.Numeric(precision=18, scale=2), nullable=True),
        sa.Column('budget_currency', sqlmodel.AutoString(length=3), nullable=False),
        sa.Column('completion_date', sa.DateTime(), nullable=True),
        sa.Column('technologies', sqlmodel.AutoString(length=500), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False),
        sa.Column('view_count', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['portfolio_id'], ['portfolios.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_portfolio_cases_portfolio_id'), 'portfolio_cases', ['portfolio_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_portfolio_cases_portfolio_id'), table_name='portfolio_cases')
    op.drop_table('portfolio_cases')
    op.drop_index('uq_portfolios_freelancer_live', table_name='portfolios')
    op.drop_index(op.f('ix_portfolios_freelancer_id'), table_name='portfolios')
    op.drop_table('portfolios')
    op.drop_index(op.f('ix_messages_receiver_id'), table_name='messages')
    op.drop_index(op.f('ix_messages_contract_id'), table_name='messages')
    op.drop_table('messages')
    op.drop_index(op.f('ix_payment_transactions_created_at'), table_name='payment_transactions')
    op.drop_index(op.f('ix_payment_transactions_status'), table_name='payment_transactions')
    op.drop_index(op.f('ix_payment_transactions_contract_id'), table_name='payment_transactions')
    op.drop_table('payment_transactions')
    payment_status.drop(op.get_bind(), checkfirst=True)
    payment_type.drop(op.get_bind(), checkfirst=True)
