"""Initial schema — agents, statuses, products, orders.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Agents
    op.create_table(
        "agents",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(50), unique=True, nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="AGENT"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("can_view_orders", sa.Boolean, nullable=False, server_default="true"),
    )

    # Statuses
    op.create_table(
        "statuses",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), unique=True, nullable=False),
        sa.Column("color", sa.String(20), nullable=False, server_default="#6366f1"),
        sa.Column("recall_after_h", sa.Integer, nullable=True),
        sa.Column("is_archived", sa.Boolean, nullable=False, server_default="false"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("recall_after_h IS NULL OR recall_after_h > 0", name="ck_statuses_recall_positive"),
    )

    # Products
    op.create_table(
        "products",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("external_id", sa.String(64), unique=True, nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("price", sa.Float, nullable=False, server_default="0"),
        sa.Column(
            "assigned_agent_ids", ARRAY(sa.Integer), nullable=False, server_default="{}"
        ),
        sa.Column(
            "hidden_for_agent_ids", ARRAY(sa.Integer), nullable=False, server_default="{}"
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    # Orders
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("external_number", sa.Integer, unique=True, nullable=False),
        sa.Column("customer_name", sa.String(200), nullable=False),
        sa.Column("customer_phone", sa.String(50), nullable=True),
        sa.Column("product_note", sa.Text, nullable=True),
        sa.Column("order_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("total_price", sa.Float, nullable=False, server_default="0"),
        sa.Column(
            "agent_id",
            sa.Integer,
            sa.ForeignKey("agents.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("status_id", sa.Integer, sa.ForeignKey("statuses.id"), nullable=True),
        sa.Column("recall_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("first_processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("processing_time_min", sa.Integer, nullable=True),
        sa.Column("recall_attempts", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_orders_agent_status", "orders", ["agent_id", "status_id"])
    op.create_index("idx_orders_recall_at", "orders", ["recall_at"])

    # Order ↔ Product links
    op.create_table(
        "order_products",
        sa.Column(
            "order_id",
            sa.Integer,
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "product_id",
            sa.Integer,
            sa.ForeignKey("products.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )


def downgrade() -> None:
    op.drop_table("order_products")
    op.drop_table("orders")
    op.drop_table("products")
    op.drop_table("statuses")
    op.drop_table("agents")
