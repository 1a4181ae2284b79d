"""create carts, cart items, orders and payments

Revision ID: 20251017_0002
Revises: 20251017_0001
Create Date: 2025-10-17 15:02:11.000000
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20251017_0002"
down_revision = "20251017_0001"
branch_labels = None
depends_on = None


# Creation order; dropped in reverse
TABLES = ("carts", "cart_items", "orders", "payments")


def is_postgresql() -> bool:
    return op.get_context().dialect.name == "postgresql"


def timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "carts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        *timestamps(),
    )
    op.create_table(
        "cart_items",
        sa.Column("cart_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False, autoincrement=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        *timestamps(),
        sa.PrimaryKeyConstraint("cart_id", "product_id"),
        sa.ForeignKeyConstraint(["cart_id"], ["carts.id"], ondelete="CASCADE"),
    )
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("cart_id", sa.Integer(), nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'PENDING'")),
        sa.Column("order_type", sa.Text(), nullable=False, server_default=sa.text("'PICKUP'")),
        sa.Column("delivery_id", sa.Uuid(), nullable=True),
        sa.Column(
            "delivery_address",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=True,
        ),
        *timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["cart_id"], ["carts.id"], ondelete="CASCADE"),
    )
    op.create_table(
        "payments",
        sa.Column(
            "id",
            sa.Uuid(),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()") if is_postgresql() else None,
        ),
        sa.Column("order_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.REAL(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, server_default=sa.text("'PENDING'")),
        sa.Column("provider", sa.String(length=64), nullable=False, server_default=sa.text("'internal'")),
        sa.Column("provider_ref", sa.String(length=128), nullable=True),
        sa.Column("failure_reason", sa.Text(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
    )

    if is_postgresql():
        for table in TABLES:
            op.execute(
                f"CREATE TRIGGER set_{table}_updated_at BEFORE UPDATE ON {table} "
                "FOR EACH ROW EXECUTE FUNCTION set_updated_at()"
            )


def downgrade() -> None:
    for table in reversed(TABLES):
        if is_postgresql():
            op.execute(f"DROP TRIGGER IF EXISTS set_{table}_updated_at ON {table}")
        op.drop_table(table)
