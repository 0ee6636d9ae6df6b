"""create_history_and_preferences

Revision ID: 5b1e0c7d2a41
Revises:
Create Date: 2026-10-18 10:12:03.418220

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '5b1e0c7d2a41'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'history_entries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('topic', sa.String(length=200), nullable=False),
        sa.Column('age_level', sa.Integer(), nullable=False),
        sa.Column('format', sa.String(length=16), nullable=False),
        sa.Column('language', sa.String(length=64), nullable=False),
        sa.Column('read_aloud', sa.Boolean(), nullable=False),
        sa.Column('output', sa.JSON(), nullable=False),
        sa.Column('suggested_topic', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'preferences',
        sa.Column('key', sa.String(length=64), primary_key=True),
        sa.Column('value', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('preferences')
    op.drop_table('history_entries')
