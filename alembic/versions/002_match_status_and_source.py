"""Add match status, source and external id; winner becomes optional

Upcoming fixtures have no winner yet. Rows from a source that exposes
event ids are keyed by (source, external_id).

Revision ID: 002
Revises: 001
Create Date: 2025-10-06

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        'matches',
        sa.Column('status', sa.String(length=20), server_default='upcoming', nullable=False),
    )
    op.add_column('matches', sa.Column('source', sa.String(length=32), nullable=True))
    op.add_column('matches', sa.Column('external_id', sa.String(length=128), nullable=True))
    op.alter_column('matches', 'winner_id', existing_type=sa.BigInteger(), nullable=True)

    # Existing rows were all results
    op.execute("UPDATE matches SET status = 'finished' WHERE winner_id IS NOT NULL")

    op.create_index('ix_matches_external_id', 'matches', ['external_id'])
    op.create_unique_constraint(
        'uq_matches_source_external_id', 'matches', ['source', 'external_id']
    )


def downgrade() -> None:
    op.drop_constraint('uq_matches_source_external_id', 'matches', type_='unique')
    op.drop_index('ix_matches_external_id')
    op.execute("DELETE FROM matches WHERE winner_id IS NULL")
    op.alter_column('matches', 'winner_id', existing_type=sa.BigInteger(), nullable=False)
    op.drop_column('matches', 'external_id')
    op.drop_column('matches', 'source')
    op.drop_column('matches', 'status')
