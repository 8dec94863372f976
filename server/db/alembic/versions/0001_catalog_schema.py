"""Tour catalog schema

Revision ID: 0001
Revises:
Create Date: 2026-01-12 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade database schema."""
    op.create_table('tours',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('summary', sa.Text(), nullable=True),
        sa.Column('cover_image', sa.String(length=1024), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('price_adult', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('price_child', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('duration_days', sa.Integer(), nullable=False),
        sa.Column('difficulty', sa.String(length=20), nullable=True),
        sa.Column('rating_average', sa.Numeric(precision=3, scale=2), nullable=False),
        sa.Column('review_count', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('featured', sa.Boolean(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('price_adult >= 0', name='ck_tour_price_adult_non_negative'),
        sa.CheckConstraint('price_child >= 0', name='ck_tour_price_child_non_negative'),
        sa.CheckConstraint('duration_days >= 1', name='ck_tour_duration_days_positive'),
        sa.CheckConstraint('rating_average >= 0 AND rating_average <= 5', name='ck_tour_rating_average_range'),
        sa.CheckConstraint('review_count >= 0', name='ck_tour_review_count_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug')
    )
    op.create_index(op.f('ix_tours_name'), 'tours', ['name'], unique=False)
    op.create_index(op.f('ix_tours_slug'), 'tours', ['slug'], unique=False)
    op.create_index(op.f('ix_tours_location'), 'tours', ['location'], unique=False)
    op.create_index(op.f('ix_tours_status'), 'tours', ['status'], unique=False)

    op.create_table('tour_schedules',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('tour_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('max_capacity', sa.Integer(), nullable=False),
        sa.Column('current_capacity', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('max_capacity >= 0', name='ck_schedule_max_capacity_non_negative'),
        sa.CheckConstraint('current_capacity >= 0', name='ck_schedule_current_capacity_non_negative'),
        sa.CheckConstraint('current_capacity <= max_capacity', name='ck_schedule_current_capacity_lte_max'),
        sa.ForeignKeyConstraint(['tour_id'], ['tours.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tour_schedules_tour_id'), 'tour_schedules', ['tour_id'], unique=False)
    op.create_index(op.f('ix_tour_schedules_start_date'), 'tour_schedules', ['start_date'], unique=False)
    op.create_index(op.f('ix_tour_schedules_status'), 'tour_schedules', ['status'], unique=False)


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table('tour_schedules')
    op.drop_table('tours')
