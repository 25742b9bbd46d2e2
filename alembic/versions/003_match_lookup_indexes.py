"""Add match lookup indexes

Pair lookups run in both player orders, and head-to-head/form queries
sort by date.

Revision ID: 003
Revises: 002
Create Date: 2025-10-22

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '003'
down_revision: Union[str, None] = '002'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_index('ix_matches_p1_p2_date', 'matches', ['player1_id', 'player2_id', 'date'])
    op.create_index('ix_matches_p2_p1_date', 'matches', ['player2_id', 'player1_id', 'date'])
    op.create_index('ix_matches_date', 'matches', ['date'])


def downgrade() -> None:
    op.drop_index('ix_matches_date')
    op.drop_index('ix_matches_p2_p1_date')
    op.drop_index('ix_matches_p1_p2_date')
