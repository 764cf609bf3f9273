"""create match table

Revision ID: 4c2a9e7d1b30
Revises:
Create Date: 2026-10-17 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c2a9e7d1b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'match',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('game_id', sa.String(length=64), nullable=False),
        sa.Column('player1_name', sa.Text(), nullable=False),
        sa.Column('player2_name', sa.Text(), nullable=False),
        sa.Column('player1_score', sa.Integer(), nullable=False),
        sa.Column('player2_score', sa.Integer(), nullable=False),
        sa.Column('winner', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('match') as batch_op:
        batch_op.create_index('ix_match_game_id', ['game_id'], unique=True)
        batch_op.create_index('ix_match_status', ['status'], unique=False)


def downgrade():
    with op.batch_alter_table('match') as batch_op:
        batch_op.drop_index('ix_match_status')
        batch_op.drop_index('ix_match_game_id')
    op.drop_table('match')
