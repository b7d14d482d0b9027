"""add tax and currency snapshot to orders

Revision ID: 8b5e0d4c2f67
Revises: 3f1c2a9d7b10
Create Date: 2026-10-06 21:47:33.018342

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b5e0d4c2f67'
down_revision: Union[str, Sequence[str], None] = '3f1c2a9d7b10'
branch_labels = None
depends_on = None

def upgrade() -> None:
    # nullable: у заказов, созданных до миграции, этих данных нет
    op.add_column('orders', sa.Column('tax', sa.Numeric(12, 4), nullable=True))
    op.add_column('orders', sa.Column('tax_rate', sa.Numeric(6, 4), nullable=True))
    op.add_column('orders', sa.Column('currency_code', sa.String(length=3), nullable=True))
    op.add_column('orders', sa.Column('currency_symbol', sa.String(length=8), nullable=True))
    op.add_column('orders', sa.Column('currency_rate', sa.Numeric(12, 6), nullable=True))

def downgrade() -> None:
    # откат - удаляем колонки
    op.drop_column('orders', 'currency_rate')
    op.drop_column('orders', 'currency_symbol')
    op.drop_column('orders', 'currency_code')
    op.drop_column('orders', 'tax_rate')
    op.drop_column('orders', 'tax')
