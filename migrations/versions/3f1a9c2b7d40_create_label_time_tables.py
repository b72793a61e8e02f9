"""create users, labels and label_time_buckets tables

Revision ID: 3f1a9c2b7d40
Revises:
Create Date: 2026-10-17 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2b7d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('timezone', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_table(
        'labels',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_labels_user_id', 'labels', ['user_id'])
    op.create_table(
        'label_time_buckets',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('label_id', sa.Integer(), nullable=False),
        sa.Column('label_name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('bucket_type', sa.String(length=10), nullable=False),
        sa.Column('bucket_year', sa.Integer(), nullable=False),
        sa.Column('bucket_value', sa.Integer(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'label_id', 'bucket_type', 'bucket_year', 'bucket_value',
                            name='uq_label_time_bucket_period'),
    )
    op.create_index('ix_label_time_buckets_user_label', 'label_time_buckets',
                    ['user_id', 'label_id'])


def downgrade() -> None:
    op.drop_index('ix_label_time_buckets_user_label', table_name='label_time_buckets')
    op.drop_table('label_time_buckets')
    op.drop_index('ix_labels_user_id', table_name='labels')
    op.drop_table('labels')
    op.drop_table('users')
