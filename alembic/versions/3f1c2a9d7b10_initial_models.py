"""initial models

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-09-28 19:04:12.410552
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("username", sa.String(50), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("role", sa.Enum("admin", "staff", name="user_role"), nullable=False, server_default="staff"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_username", "users", ["username"])

    op.create_table(
        "menu_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("image_url", sa.String(512), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_menu_items_user_id", "menu_items", ["user_id"])

    op.create_table(
        "menu_item_variants",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("menu_item_id", sa.Integer, sa.ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.UniqueConstraint("menu_item_id", "name", name="uq_menu_item_variant_name"),
    )

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("customer_name", sa.String(128), nullable=False, server_default=""),
        sa.Column("customer_mobile", sa.String(32), nullable=False, server_default=""),
        sa.Column("subtotal", sa.Numeric(12, 4), nullable=False),
        sa.Column("total", sa.Numeric(12, 4), nullable=False),
        sa.Column(
            "payment_method",
            sa.Enum("cash", "upi", "card", name="payment_method"),
            nullable=False,
        ),
        sa.Column("date", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_orders_user_id", "orders", ["user_id"])
    op.create_index("ix_orders_date", "orders", ["date"])

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("order_id", sa.Integer, sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("item_id", sa.String(64), nullable=False),
        sa.Column("item_name", sa.String(128), nullable=False),
        sa.Column("image_url", sa.String(512), nullable=False, server_default=""),
        sa.Column("variant_name", sa.String(64), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
    )

    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("restaurant_name", sa.String(128), nullable=False, server_default="QuickBill Restaurant"),
        sa.Column("address", sa.String(256), nullable=False, server_default="123 Foodie Lane, Gourmet City"),
        sa.Column("phone", sa.String(32), nullable=False, server_default="N/A"),
        sa.Column("logo_url", sa.String(512), nullable=False, server_default=""),
        sa.Column("tax_rate", sa.Numeric(6, 4), nullable=False, server_default="0.18"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "logs",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("level", sa.Enum("info", "warn", "error", name="log_level"), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("meta", sa.JSON, nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_logs_user_id", "logs", ["user_id"])
    op.create_index("ix_logs_timestamp", "logs", ["timestamp"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("logs")
    op.drop_table("profiles")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("menu_item_variants")
    op.drop_table("menu_items")
    op.drop_table("users")
    sa.Enum(name="log_level").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="payment_method").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="user_role").drop(op.get_bind(), checkfirst=True)
