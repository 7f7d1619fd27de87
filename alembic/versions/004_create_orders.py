"""004: create orders table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id              BIGINT          GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
            listing_id      BIGINT          NOT NULL REFERENCES listings (id) ON DELETE RESTRICT,
            buyer_id        BIGINT          NOT NULL REFERENCES users (id),
            status          VARCHAR(20)     NOT NULL DEFAULT 'CREATED',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_orders_listing    UNIQUE (listing_id),
            CONSTRAINT ck_orders_status     CHECK (
                status IN ('CREATED', 'SHIPPING', 'DELIVERED', 'COMPLETED')
            )
        );
    """)
    op.execute("CREATE INDEX idx_orders_buyer ON orders (buyer_id, id DESC);")
    op.execute("CREATE INDEX idx_orders_status ON orders (status, id DESC);")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE orders IS 'One row per sale; never deleted';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
