"""Initial schema: users, allocations, transactions, reminders, notifications

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=30), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'allocations',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('owner_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('budget', sa.Float(), nullable=False),
        sa.Column('type', sa.String(length=10), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('owner_id', 'name', name='uq_allocations_owner_name'),
    )
    op.create_index('ix_allocations_owner_id', 'allocations', ['owner_id'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('owner_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('allocation_id', sa.String(length=36), nullable=False),
        sa.Column('type', sa.String(length=10), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('description', sa.String(length=50), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_transactions_owner_id', 'transactions', ['owner_id'])
    op.create_index('ix_transactions_allocation_id', 'transactions', ['allocation_id'])
    op.create_index('ix_transactions_owner_date', 'transactions', ['owner_id', 'date'])

    op.create_table(
        'reminders',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('owner_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('allocation_id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=50), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('due_at', sa.DateTime(), nullable=False),
        sa.Column('schedule_version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('job_id', sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_reminders_owner_id', 'reminders', ['owner_id'])
    op.create_index('ix_reminders_allocation_id', 'reminders', ['allocation_id'])
    op.create_index('ix_reminders_due_at', 'reminders', ['due_at'])
    op.create_index('ix_reminders_identity', 'reminders', ['owner_id', 'allocation_id', 'title', 'amount', 'due_at'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('owner_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('reminder_id', sa.String(length=36), nullable=False),
        sa.Column('status', sa.String(length=10), nullable=False, server_default='unread'),
        sa.Column('job_id', sa.String(), nullable=True, unique=True),
        *_timestamps(),
    )
    op.create_index('ix_notifications_owner_id', 'notifications', ['owner_id'])
    op.create_index('ix_notifications_reminder_id', 'notifications', ['reminder_id'])
    op.create_index('ix_notifications_owner_created', 'notifications', ['owner_id', 'created_at'])


def downgrade():
    op.drop_table('notifications')
    op.drop_table('reminders')
    op.drop_table('transactions')
    op.drop_table('allocations')
    op.drop_table('users')
