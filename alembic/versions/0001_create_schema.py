from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_create_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table("menu_items"):
        op.create_table(
            "menu_items",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("price", sa.String(length=32), nullable=False),
            sa.Column("category", sa.String(), nullable=False),
            sa.Column("description", sa.Text(), nullable=False),
            sa.Column("image_url", sa.String(), nullable=True),
        )
        op.create_index("ix_menu_items_category", "menu_items", ["category"], unique=False)

    if not inspector.has_table("orders"):
        op.create_table(
            "orders",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("table_number", sa.Integer(), nullable=False),
            sa.Column("customer_name", sa.String(), nullable=False),
            sa.Column("total", sa.String(length=32), nullable=False),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
            sa.Column("timestamp", sa.String(length=32), nullable=False),
            sa.Column("date", sa.String(length=32), nullable=False),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=True),
                nullable=False,
                server_default=sa.func.now(),
            ),
        )
        op.create_index("ix_orders_table_number", "orders", ["table_number"], unique=False)

    if not inspector.has_table("order_items"):
        op.create_table(
            "order_items",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False),
            sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("menu_item_id", sa.Integer(), nullable=True),
            sa.Column("name", sa.String(), nullable=False, server_default=""),
            sa.Column("category", sa.String(), nullable=True),
            sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
            sa.Column("unit_price", sa.String(length=32), nullable=False),
            sa.Column("line_total", sa.String(length=32), nullable=False),
        )
        op.create_index("ix_order_items_order_id", "order_items", ["order_id"], unique=False)

    if not inspector.has_table("admin_users"):
        op.create_table(
            "admin_users",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("username", sa.String(length=50), nullable=False),
            sa.Column("email", sa.String(length=100), nullable=True),
            sa.Column("full_name", sa.String(), nullable=False, server_default=""),
            sa.Column("password_hash", sa.String(), nullable=False),
            sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("session_version", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("created_at", sa.DateTime(), nullable=True, server_default=sa.func.now()),
            sa.UniqueConstraint("username", name="uq_admin_users_username"),
            sa.UniqueConstraint("email", name="uq_admin_users_email"),
        )
        op.create_index("ix_admin_users_id", "admin_users", ["id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_admin_users_id", table_name="admin_users")
    op.drop_table("admin_users")
    op.drop_index("ix_order_items_order_id", table_name="order_items")
    op.drop_table("order_items")
    op.drop_index("ix_orders_table_number", table_name="orders")
    op.drop_table("orders")
    op.drop_index("ix_menu_items_category", table_name="menu_items")
    op.drop_table("menu_items")
