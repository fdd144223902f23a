"""Add warn_on_duplicates to tags

Revision ID: c002_tag_warn_on_duplicates
Revises: c001_create_checkin_tables
Create Date: 2026-10-02

Tags created before duplicate detection existed get warn_on_duplicates =
false, so their check-ins keep being accepted unconditionally.
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'c002_tag_warn_on_duplicates'
down_revision = 'c001_create_checkin_tables'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column('tags', sa.Column('warn_on_duplicates', sa.Boolean(), nullable=True))
    op.execute("UPDATE tags SET warn_on_duplicates = false WHERE warn_on_duplicates IS NULL")
    with op.batch_alter_table('tags') as batch_op:
        batch_op.alter_column(
            'warn_on_duplicates',
            existing_type=sa.Boolean(),
            nullable=False,
            server_default=sa.text('false'),
        )


def downgrade() -> None:
    with op.batch_alter_table('tags') as batch_op:
        batch_op.drop_column('warn_on_duplicates')
