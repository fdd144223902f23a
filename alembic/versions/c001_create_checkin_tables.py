"""Create tags, attendees, attendee_tags and tag_details tables

Revision ID: c001_create_checkin_tables
Revises:
Create Date: 2026-09-14

- tags: master tag records with an optional validity window
- attendees: local copy of registration users that were checked in
- attendee_tags: current check-in state per attendee and tag
- tag_details: append-only audit of every check-in/out call
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'c001_create_checkin_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'tags',
        sa.Column('name', sa.String(), primary_key=True),
        sa.Column('start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            '(start IS NULL AND "end" IS NULL) OR '
            '(start IS NOT NULL AND "end" IS NOT NULL AND start < "end")',
            name='check_tag_window',
        ),
    )

    op.create_table(
        'attendees',
        sa.Column('id', sa.String(), primary_key=True),  # registration user id
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('emails', sa.JSON(), nullable=False),
    )

    op.create_table(
        'attendee_tags',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('attendee_id', sa.String(), sa.ForeignKey('attendees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('tag_name', sa.String(), sa.ForeignKey('tags.name', ondelete='CASCADE'), nullable=False),
        sa.Column('checked_in', sa.Boolean(), nullable=False),
        sa.Column('checked_in_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('checked_in_by', sa.String(), nullable=True),
        sa.Column('checkin_success', sa.Boolean(), nullable=False),
        sa.Column('last_successful_position', sa.Integer(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.UniqueConstraint('attendee_id', 'tag_name', name='unique_attendee_tag'),
    )
    op.create_index('ix_attendee_tags_attendee_id', 'attendee_tags', ['attendee_id'])
    op.create_index('ix_attendee_tags_tag_name', 'attendee_tags', ['tag_name'])

    op.create_table(
        'tag_details',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('attendee_tag_id', sa.Integer(), sa.ForeignKey('attendee_tags.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('checked_in', sa.Boolean(), nullable=False),
        sa.Column('checked_in_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('checked_in_by', sa.String(), nullable=False),
        sa.Column('checkin_success', sa.Boolean(), nullable=False),
        sa.UniqueConstraint('attendee_tag_id', 'position', name='unique_detail_position'),
    )
    op.create_index('ix_tag_details_attendee_tag_id', 'tag_details', ['attendee_tag_id'])


def downgrade() -> None:
    op.drop_index('ix_tag_details_attendee_tag_id', table_name='tag_details')
    op.drop_table('tag_details')
    op.drop_index('ix_attendee_tags_tag_name', table_name='attendee_tags')
    op.drop_index('ix_attendee_tags_attendee_id', table_name='attendee_tags')
    op.drop_table('attendee_tags')
    op.drop_table('attendees')
    op.drop_table('tags')
