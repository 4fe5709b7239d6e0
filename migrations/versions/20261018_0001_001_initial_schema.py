"""Initial schema - characters and saved tournaments

Revision ID: 001
Revises:
Create Date: 2026-10-18

Creates the tables used by CharacterVault tournaments:
- characters: Roster entries that compete
- tournaments: Saved tournament metadata
- tournament_matches: One row per bracket cell
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
    # ### Characters table ###
    op.create_table(
        'characters',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('status', sa.Enum(
            'WAITING', 'ACTIVE', 'ARCHIVED',
            name='characterstatus'
        ), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    # ### Tournaments table ###
    op.create_table(
        'tournaments',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('format', sa.Enum('SINGLE', 'DOUBLE', name='tournamentformat'), nullable=False),
        sa.Column('status', sa.Enum(
            'IN_PROGRESS', 'COMPLETED',
            name='tournamentstatus'
        ), nullable=True),
        sa.Column('filter_criteria', sa.Text(), nullable=True),
        sa.Column(
            'winner_id', sa.Integer(),
            sa.ForeignKey('characters.id', ondelete='SET NULL'),
            nullable=True
        ),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
    )

    # ### Tournament matches table ###
    op.create_table(
        'tournament_matches',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'tournament_id', sa.Integer(),
            sa.ForeignKey('tournaments.id', ondelete='CASCADE'),
            nullable=False
        ),
        sa.Column('bracket', sa.Enum(
            'WINNERS', 'LOSERS', 'GRAND_FINAL',
            name='brackettype'
        ), nullable=True),
        sa.Column('round', sa.Integer(), nullable=False),
        sa.Column('match_number', sa.Integer(), nullable=False),
        sa.Column(
            'character1_id', sa.Integer(),
            sa.ForeignKey('characters.id', ondelete='SET NULL'),
            nullable=True
        ),
        sa.Column(
            'character2_id', sa.Integer(),
            sa.ForeignKey('characters.id', ondelete='SET NULL'),
            nullable=True
        ),
        sa.Column(
            'winner_id', sa.Integer(),
            sa.ForeignKey('characters.id', ondelete='SET NULL'),
            nullable=True
        ),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
    )

    # ### Indexes ###
    op.create_index('ix_tournament_matches_tournament_id', 'tournament_matches', ['tournament_id'])


def downgrade() -> None:
    op.drop_index('ix_tournament_matches_tournament_id', 'tournament_matches')

    # Drop tables in reverse order of creation
    op.drop_table('tournament_matches')
    op.drop_table('tournaments')
    op.drop_table('characters')
