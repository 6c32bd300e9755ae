"""create users, categories, and expenses tables

Revision ID: 3f1c2a9b7d40
Revises: 
Create Date: 2025-07-05 13:59:18.023282

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


DEFAULT_CATEGORIES = (
    "Food", "Transportation", "Housing", "Utilities", "Entertainment",
    "Healthcare", "Shopping", "Education", "Personal Care", "Other",
)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('email', name='uq_user_email'),
    )
    op.create_index('idx_users_email', 'users', ['email'])

    categories = op.create_table(
        'categories',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.UniqueConstraint('name', name='uq_category_name'),
    )
    op.create_index('idx_category_name', 'categories', ['name'])
    op.bulk_insert(categories, [{'name': name} for name in DEFAULT_CATEGORIES])

    op.create_table(
        'expenses',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('category_id', sa.Integer, sa.ForeignKey('categories.id'), nullable=True),
        sa.Column('description', sa.String(255), nullable=False),
        sa.Column('amount', sa.DECIMAL(10, 2), nullable=False),
        sa.Column('expense_date', sa.Date, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('idx_expenses_user_date', 'expenses', ['user_id', 'expense_date'])
    op.create_index('idx_expenses_user_category', 'expenses', ['user_id', 'category_id'])


def downgrade() -> None:
    op.drop_table('expenses')
    op.drop_table('categories')
    op.drop_table('users')
