"""create jobs and job_events

Revision ID: 1c9e4d2a7b30
Revises:
Create Date: 2026-10-18

Tables for tracked applications and their lifecycle events. Enumerated
columns are VARCHAR with CHECK constraints so the same schema runs on
PostgreSQL and SQLite.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers, used by Alembic.
revision: str = '1c9e4d2a7b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _check_in(column: str, values: list[str]) -> str:
    quoted = ", ".join(f"'{value}'" for value in values)
    return f"{column} IN ({quoted})"


JOB_STATUSES = ['applied', 'interview', 'rejected', 'offer', 'accepted']
EVENT_TYPES = [
    'applied', 'interview_scheduled', 'interview', 'interview_result', 'rejected',
    'offer_received', 'offer_accepted', 'offer_declined', 'withdrawn', 'ghosted',
]
INTERVIEW_TYPES = ['phone', 'video', 'onsite', 'technical', 'hr', 'final', 'oa', 'vo']
INTERVIEW_RESULTS = ['pending', 'passed', 'failed', 'waiting', 'cancelled']


def upgrade() -> None:
    """Create jobs and job_events tables."""

    op.create_table(
        'jobs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('company', sa.String(length=255), nullable=False),
        sa.Column('position', sa.String(length=255), nullable=False),
        sa.Column('job_url', sa.Text(), nullable=True),
        sa.Column('application_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='applied', nullable=False),
        sa.Column('location', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        # Geocoding results
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('formatted_address', sa.Text(), nullable=True),
        sa.Column('place_id', sa.String(length=255), nullable=True),
        sa.Column('is_favorite', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(_check_in('status', JOB_STATUSES), name='ck_jobs_status'),
        sa.PrimaryKeyConstraint('id')
    )

    # List query: ORDER BY application_date DESC, id DESC
    op.create_index('idx_jobs_application_date', 'jobs', ['application_date', 'id'])

    op.create_table(
        'job_events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('job_id', sa.Integer(), nullable=False),
        sa.Column('event_type', sa.String(length=30), nullable=False),
        # Local wall-clock time, no timezone
        sa.Column('event_date', sa.TIMESTAMP(timezone=False), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('interview_round', sa.Integer(), nullable=True),
        sa.Column('interview_type', sa.String(length=20), nullable=True),
        sa.Column('interview_link', sa.Text(), nullable=True),
        sa.Column('interview_result', sa.String(length=20), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('metadata', sa.JSON().with_variant(JSONB(), 'postgresql'), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(_check_in('event_type', EVENT_TYPES), name='ck_job_events_event_type'),
        sa.CheckConstraint(_check_in('interview_type', INTERVIEW_TYPES), name='ck_job_events_interview_type'),
        sa.CheckConstraint(_check_in('interview_result', INTERVIEW_RESULTS), name='ck_job_events_interview_result'),
        sa.CheckConstraint('interview_round IS NULL OR interview_round > 0', name='ck_job_events_interview_round'),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index('ix_job_events_job_id', 'job_events', ['job_id'])
    op.create_index('ix_job_events_event_date', 'job_events', ['event_date'])


def downgrade() -> None:
    """Drop job_events and jobs tables."""
    op.drop_index('ix_job_events_event_date', table_name='job_events')
    op.drop_index('ix_job_events_job_id', table_name='job_events')
    op.drop_table('job_events')
    op.drop_index('idx_jobs_application_date', table_name='jobs')
    op.drop_table('jobs')
