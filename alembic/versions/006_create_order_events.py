"""006: create order_events table

Revision ID: 006
Revises: 005
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE order_events (
            id              BIGSERIAL       PRIMARY KEY,
            order_id        BIGINT          NOT NULL REFERENCES orders (id),
            event_type      VARCHAR(30)     NOT NULL,
            actor_id        BIGINT          NOT NULL,
            from_status     VARCHAR(20),
            to_status       VARCHAR(20)     NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_order_event_type CHECK (
                event_type IN (
                    'ORDER_CREATED',
                    'ORDER_SHIPPED',
                    'ORDER_DELIVERED',
                    'ORDER_COMPLETED'
                )
            )
        );
    """)
    op.execute("CREATE INDEX idx_order_events_order ON order_events (order_id, id);")
    op.execute("COMMENT ON TABLE order_events IS 'Order lifecycle audit log, append-only';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS order_events CASCADE;")
