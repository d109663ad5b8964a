"""Initial schema: users, venues, courts and play sessions

Revision ID: 001
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
    ]


def upgrade() -> None:
    """Create scheduling tables."""
    op.create_table('users', sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('first_name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('last_name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False, server_default=''),
        sa.Column('play_level', sa.String(length=20), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('venues', sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(length=2000), nullable=True),
        sa.Column('address', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False, server_default=''),
        sa.Column('location', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False, server_default=''),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('open_range', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_venues_location'), 'venues', ['location'], unique=False)

    op.create_table('courts', sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('venue_id', sa.Uuid(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('price_per_hour', sa.Float(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='available'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_courts_venue_id'), 'courts', ['venue_id'], unique=False)

    op.create_table('play_sessions', sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('host_id', sa.Uuid(), nullable=False),
        sa.Column('venue_id', sa.Uuid(), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(length=2000), nullable=True),
        sa.Column('session_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('player_level', sa.String(length=20), nullable=False),
        sa.Column('max_participants', sa.Integer(), nullable=False),
        sa.Column('cost_per_person', sa.Float(), nullable=False, server_default='0'),
        sa.Column('allow_cancellation', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('cancellation_deadline_hours', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='open'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['host_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ),
        sa.CheckConstraint('max_participants >= 2', name='ck_play_sessions_max_participants'),
        sa.CheckConstraint('start_time < end_time', name='ck_play_sessions_time_range'),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_play_sessions_host_id'), 'play_sessions', ['host_id'], unique=False)
    op.create_index(op.f('ix_play_sessions_venue_id'), 'play_sessions', ['venue_id'], unique=False)
    op.create_index(op.f('ix_play_sessions_session_date'), 'play_sessions', ['session_date'], unique=False)
    op.create_index(op.f('ix_play_sessions_status'), 'play_sessions', ['status'], unique=False)

    op.create_table('session_courts', sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('session_id', sa.Uuid(), nullable=False),
        sa.Column('court_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.ForeignKeyConstraint(['session_id'], ['play_sessions.id'], ),
        sa.ForeignKeyConstraint(['court_id'], ['courts.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id', 'court_id', name='uq_session_court'))
    op.create_index(op.f('ix_session_courts_session_id'), 'session_courts', ['session_id'], unique=False)
    op.create_index(op.f('ix_session_courts_court_id'), 'session_courts', ['court_id'], unique=False)

    op.create_table('session_participants', sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('session_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['session_id'], ['play_sessions.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id', 'user_id', name='uq_participant_session_user'))
    op.create_index(op.f('ix_session_participants_session_id'), 'session_participants', ['session_id'],
                    unique=False)
    op.create_index(op.f('ix_session_participants_user_id'), 'session_participants', ['user_id'], unique=False)

    op.create_table('session_rules', sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('session_id', sa.Uuid(), nullable=False),
        sa.Column('rule_text', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.ForeignKeyConstraint(['session_id'], ['play_sessions.id'], ),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_session_rules_session_id'), 'session_rules', ['session_id'], unique=False)


def downgrade() -> None:
    """Drop scheduling tables."""
    op.drop_index(op.f('ix_session_rules_session_id'), table_name='session_rules')
    op.drop_table('session_rules')
    op.drop_index(op.f('ix_session_participants_user_id'), table_name='session_participants')
    op.drop_index(op.f('ix_session_participants_session_id'), table_name='session_participants')
    op.drop_table('session_participants')
    op.drop_index(op.f('ix_session_courts_court_id'), table_name='session_courts')
    op.drop_index(op.f('ix_session_courts_session_id'), table_name='session_courts')
    op.drop_table('session_courts')
    op.drop_index(op.f('ix_play_sessions_status'), table_name='play_sessions')
    op.drop_index(op.f('ix_play_sessions_session_date'), table_name='play_sessions')
    op.drop_index(op.f('ix_play_sessions_venue_id'), table_name='play_sessions')
    op.drop_index(op.f('ix_play_sessions_host_id'), table_name='play_sessions')
    op.drop_table('play_sessions')
    op.drop_index(op.f('ix_courts_venue_id'), table_name='courts')
    op.drop_table('courts')
    op.drop_index(op.f('ix_venues_location'), table_name='venues')
    op.drop_table('venues')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
