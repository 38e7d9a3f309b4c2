"""baseline: otp records and marketplace tables

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19 09:00:00
"""
from alembic import op
import sqlalchemy as sa
import sqlmodel

# revision identifiers, used by Alembic.
revision = '0001_baseline'
down_revision = None
branch_labels = None
depends_on = None

# Enum columns store member names
project_status = sa.Enum('OPEN', 'IN_PROGRESS', 'COMPLETED', 'CANCELLED', 'CLOSED', name='projectstatus')
bid_status = sa.Enum('PENDING', 'ACCEPTED', 'REJECTED', 'WITHDRAWN', name='bidstatus')
contract_status = sa.Enum('ACTIVE', 'COMPLETED', 'CANCELLED', 'DISPUTED', name='contractstatus')

active_bid = sa.text("status != 'WITHDRAWN'")


def upgrade() -> None:
    op.create_table(
        'otp_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sqlmodel.AutoString(length=256), nullable=False),
        sa.Column('otp', sqlmodel.AutoString(length=6), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_otp_records_email'), 'otp_records', ['email'], unique=True)
    op.create_index(op.f('ix_otp_records_expires_at'), 'otp_records', ['expires_at'], unique=False)

    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sqlmodel.AutoString(length=200), nullable=False),
        sa.Column('description', sqlmodel.AutoString(), nullable=False),
        sa.Column('budget', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('deadline', sa.DateTime(), nullable=True),
        sa.Column('category', sqlmodel.AutoString(length=100), nullable=True),
        sa.Column('client_id', sqlmodel.AutoString(length=100), nullable=False),
        sa.Column('status', project_status, nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_projects_category'), 'projects', ['category'], unique=False)
    op.create_index(op.f('ix_projects_client_id'), 'projects', ['client_id'], unique=False)
    op.create_index(op.f('ix_projects_status'), 'projects', ['status'], unique=False)

    op.create_table(
        'bids',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('freelancer_id', sqlmodel.AutoString(length=100), nullable=False),
        sa.Column('proposed_amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('estimated_duration_days', sa.Integer(), nullable=False),
        sa.Column('cover_letter', sqlmodel.AutoString(), nullable=False),
        sa.Column('status', bid_status, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_bids_project_id'), 'bids', ['project_id'], unique=False)
    op.create_index(op.f('ix_bids_freelancer_id'), 'bids', ['freelancer_id'], unique=False)
    op.create_index(op.f('ix_bids_status'), 'bids', ['status'], unique=False)
    op.create_index(
        'uq_bids_project_freelancer_active', 'bids', ['project_id', 'freelancer_id'],
        unique=True, sqlite_where=active_bid, postgresql_where=active_bid,
    )

    op.create_table(
        'contracts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('bid_id', sa.Integer(), nullable=True),
        sa.Column('client_id', sqlmodel.AutoString(length=100), nullable=False),
        sa.Column('freelancer_id', sqlmodel.AutoString(length=100), nullable=False),
        sa.Column('agreed_amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=True),
        sa.Column('terms', sqlmodel.AutoString(), nullable=True),
        sa.Column('status', contract_status, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_contracts_project_id'), 'contracts', ['project_id'], unique=True)
    op.create_index(op.f('ix_contracts_client_id'), 'contracts', ['client_id'], unique=False)
    op.create_index(op.f('ix_contracts_freelancer_id'), 'contracts', ['freelancer_id'], unique=False)
    op.create_index(op.f('ix_contracts_status'), 'contracts', ['status'], unique=False)

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('contract_id', sa.Integer(), nullable=False),
        sa.Column('reviewer_id', sqlmodel.AutoString(length=100), nullable=False),
        sa.Column('reviewee_id', sqlmodel.AutoString(length=100), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sqlmodel.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['contract_id'], ['contracts.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('contract_id', 'reviewer_id', name='uq_reviews_contract_reviewer')
    )
    op.create_index(op.f('ix_reviews_contract_id'), 'reviews', ['contract_id'], unique=False)
    op.create_index(op.f('ix_reviews_reviewee_id'), 'reviews', ['reviewee_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_reviews_reviewee_id'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_contract_id'), table_name='reviews')
    op.drop_table('reviews')
    op.drop_index(op.f('ix_contracts_status'), table_name='contracts')
    op.drop_index(op.f('ix_contracts_freelancer_id'), table_name='contracts')
    op.drop_index(op.f('ix_contracts_client_id'), table_name='contracts')
    op.drop_index(op.f('ix_contracts_project_id'), table_name='contracts')
    op.drop_table('contracts')
    op.drop_index('uq_bids_project_freelancer_active', table_name='bids')
    op.drop_index(op.f('ix_bids_status'), table_name='bids')
    op.drop_index(op.f('ix_bids_freelancer_id'), table_name='bids')
    op.drop_index(op.f('ix_bids_project_id'), table_name='bids')
    op.drop_table('bids')
    op.drop_index(op.f('ix_projects_status'), table_name='projects')
    op.drop_index(op.f('ix_projects_client_id'), table_name='projects')
    op.drop_index(op.f('ix_projects_category'), table_name='projects')
    op.drop_table('projects')
    op.drop_index(op.f('ix_otp_records_expires_at'), table_name='otp_records')
    op.drop_index(op.f('ix_otp_records_email'), table_name='otp_records')
    op.drop_table('otp_records')
    project_status.drop(op.get_bind(), checkfirst=True)
    bid_status.drop(op.get_bind(), checkfirst=True)
    contract_status.drop(op.get_bind(), checkfirst=True)
