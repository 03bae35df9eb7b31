"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

APPROXIMATE_COUNT_KINDS = ('VISITS', 'SHORTENED_URLS')


def upgrade() -> None:
    """
    Create initial database schema:
    - shortened_urls: base64 short code -> long URL
    - visits: one row per tracked visit
    - approximate_counts: service-wide counters, seeded with zero
    - blocked_hostnames: runtime additions to the hostname blocklist
    """
    op.create_table(
        'shortened_urls',
        sa.Column('short_base64', sa.String(length=128), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('blocked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('short_base64')
    )
    op.create_index('ix_shortened_urls_created_at', 'shortened_urls', ['created_at'])

    op.create_table(
        'visits',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('shortened_url_id', sa.String(length=128), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        # Declared inline so SQLite gets the constraint too
        sa.ForeignKeyConstraint(
            ['shortened_url_id'],
            ['shortened_urls.short_base64'],
            ondelete='CASCADE'
        )
    )
    op.create_index('ix_visits_shortened_url_id', 'visits', ['shortened_url_id'])
    op.create_index('ix_visits_timestamp', 'visits', ['timestamp'])

    approximate_counts = op.create_table(
        'approximate_counts',
        sa.Column('kind', sa.String(length=32), nullable=False),
        sa.Column('count', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('kind')
    )
    op.bulk_insert(
        approximate_counts,
        [{'kind': kind, 'count': 0} for kind in APPROXIMATE_COUNT_KINDS]
    )

    op.create_table(
        'blocked_hostnames',
        sa.Column('hostname', sa.String(length=253), nullable=False),
        sa.PrimaryKeyConstraint('hostname')
    )


def downgrade() -> None:
    """
    Drop all tables and indexes.
    """
    op.drop_table('blocked_hostnames')
    op.drop_table('approximate_counts')
    op.drop_index('ix_visits_timestamp', table_name='visits')
    op.drop_index('ix_visits_shortened_url_id', table_name='visits')
    op.drop_table('visits')
    op.drop_index('ix_shortened_urls_created_at', table_name='shortened_urls')
    op.drop_table('shortened_urls')
