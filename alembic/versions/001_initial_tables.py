"""Initial tables

Revision ID: 001
Revises:
Create Date: 2025-09-23

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Players
    op.create_table(
        'players',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('country', sa.String(length=100), server_default='Unknown', nullable=False),
        sa.Column('rank', sa.Integer(), nullable=True),
        sa.Column('points', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_players_name', 'players', ['name'], unique=True)

    # Matches
    op.create_table(
        'matches',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('player1_id', sa.BigInteger(), nullable=False),
        sa.Column('player2_id', sa.BigInteger(), nullable=False),
        sa.Column('winner_id', sa.BigInteger(), nullable=False),
        sa.Column('tournament', sa.String(length=255), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('score', sa.String(length=100), nullable=True),
        sa.Column('surface', sa.String(length=50), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['player1_id'], ['players.id'], ),
        sa.ForeignKeyConstraint(['player2_id'], ['players.id'], ),
        sa.ForeignKeyConstraint(['winner_id'], ['players.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_matches_player1_id', 'matches', ['player1_id'])
    op.create_index('ix_matches_player2_id', 'matches', ['player2_id'])
    op.create_index('ix_matches_winner_id', 'matches', ['winner_id'])

    # Predictions
    op.create_table(
        'predictions',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('player1_id', sa.BigInteger(), nullable=False),
        sa.Column('player2_id', sa.BigInteger(), nullable=False),
        sa.Column('predicted_winner_id', sa.BigInteger(), nullable=False),
        sa.Column('confidence', sa.Float(), nullable=False),
        sa.Column('prediction_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['player1_id'], ['players.id'], ),
        sa.ForeignKeyConstraint(['player2_id'], ['players.id'], ),
        sa.ForeignKeyConstraint(['predicted_winner_id'], ['players.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_predictions_player1_id', 'predictions', ['player1_id'])
    op.create_index('ix_predictions_player2_id', 'predictions', ['player2_id'])
    op.create_index('ix_predictions_predicted_winner_id', 'predictions', ['predicted_winner_id'])


def downgrade() -> None:
    op.drop_index('ix_predictions_predicted_winner_id')
    op.drop_index('ix_predictions_player2_id')
    op.drop_index('ix_predictions_player1_id')
    op.drop_index('ix_matches_winner_id')
    op.drop_index('ix_matches_player2_id')
    op.drop_index('ix_matches_player1_id')
    op.drop_index('ix_players_name')

    op.drop_table('predictions')
    op.drop_table('matches')
    op.drop_table('players')
