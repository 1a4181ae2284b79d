"""create outbox

Revision ID: 20251017_0001
Revises:
Create Date: 2025-10-17 14:49:54.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20251017_0001"
down_revision = None
branch_labels = None
depends_on = None


SET_UPDATED_AT_FUNCTION = """
CREATE OR REPLACE FUNCTION set_updated_at() RETURNS trigger AS $$
BEGIN
    NEW.updated_at := now();
    RETURN NEW;
END;
$$ LANGUAGE plpgsql
"""


def is_postgresql() -> bool:
    return op.get_context().dialect.name == "postgresql"


def upgrade() -> None:
    if is_postgresql():
        op.execute(SET_UPDATED_AT_FUNCTION)

    op.create_table(
        "outbox",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_type", sa.Text(), nullable=False),
        sa.Column("payload", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'PENDING'")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    if is_postgresql():
        op.execute(
            "CREATE TRIGGER set_outbox_updated_at BEFORE UPDATE ON outbox "
            "FOR EACH ROW EXECUTE FUNCTION set_updated_at()"
        )


def downgrade() -> None:
    if is_postgresql():
        op.execute("DROP TRIGGER IF EXISTS set_outbox_updated_at ON outbox")
    op.drop_table("outbox")
    if is_postgresql():
        op.execute("DROP FUNCTION IF EXISTS set_updated_at()")
