"""Create search_index_task table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 10:05:00.000000

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
    """Create search_index_task table."""
    op.create_table(
        'search_index_task',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('entity_name', sa.String(length=64), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=False),
        sa.Column(
            'operation',
            sa.Enum('SAVE', 'DELETE', name='indexoperation'),
            nullable=False,
        ),
        sa.Column('attempts', sa.Integer(), nullable=False),
        sa.Column('last_error', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'ix_search_index_task_entity_name',
        'search_index_task',
        ['entity_name'],
    )
    op.create_index(
        'ix_search_index_task_entity_id',
        'search_index_task',
        ['entity_id'],
    )


def downgrade() -> None:
    """Drop search_index_task table."""
    op.drop_index('ix_search_index_task_entity_id', table_name='search_index_task')
    op.drop_index('ix_search_index_task_entity_name', table_name='search_index_task')
    op.drop_table('search_index_task')
    sa.Enum(name='indexoperation').drop(op.get_bind(), checkfirst=True)
