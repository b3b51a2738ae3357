"""create session and player tables

Revision ID: 5c2a9e71b0d3
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2a9e71b0d3'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'session' not in existing_tables:
        op.create_table(
            'session',
            sa.Column('id', sa.String(length=32), primary_key=True),
            sa.Column('name', sa.String(length=64), nullable=False),
            sa.Column('created_at', sa.Float(), nullable=False),
            sa.Column('current_round_index', sa.Integer(), nullable=False),
            sa.Column('rounds', sa.Text(), nullable=False),
        )
        op.create_index('ix_session_created_at', 'session', ['created_at'])

    if 'player' not in existing_tables:
        op.create_table(
            'player',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('session_id', sa.String(length=32), sa.ForeignKey('session.id'), nullable=False),
            sa.Column('player_id', sa.String(length=8), nullable=False),
            sa.Column('position', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=64), nullable=False),
            sa.UniqueConstraint('session_id', 'player_id', name='uq_player_session_seat'),
        )


def downgrade():
    op.drop_table('player')
    op.drop_index('ix_session_created_at', table_name='session')
    op.drop_table('session')
