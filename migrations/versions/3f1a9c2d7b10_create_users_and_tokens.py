"""create users and tokens tables

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-16 09:12:40.118204

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1a9c2d7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=50), nullable=False, server_default=''),
        sa.Column('role', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('status', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_time', sa.BigInteger(), nullable=False),
    )
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table(
        'tokens',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('key', sa.String(length=48), nullable=False),
        sa.Column('status', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_time', sa.BigInteger(), nullable=False),
        sa.Column('accessed_time', sa.BigInteger(), nullable=False),
        sa.Column('expired_time', sa.BigInteger(), nullable=False, server_default='-1'),
        sa.Column('remain_quota', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('used_quota', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('unlimited_quota', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('model_limits_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('model_limits', sa.String(length=1024), nullable=False, server_default=''),
        sa.Column('allow_ips', sa.Text(), nullable=True),
        sa.Column('group', sa.String(length=64), nullable=False, server_default='default'),
    )
    op.create_index(op.f('ix_tokens_key'), 'tokens', ['key'], unique=True)
    op.create_index(op.f('ix_tokens_name'), 'tokens', ['name'], unique=False)
    op.create_index(op.f('ix_tokens_user_id'), 'tokens', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_tokens_user_id'), table_name='tokens')
    op.drop_index(op.f('ix_tokens_name'), table_name='tokens')
    op.drop_index(op.f('ix_tokens_key'), table_name='tokens')
    op.drop_table('tokens')
    op.drop_index(op.f('ix_users_username'), table_name='users')
    op.drop_table('users')
