"""005: create order_messages table

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE order_messages (
            id              BIGINT          GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
            order_id        BIGINT          NOT NULL REFERENCES orders (id),
            sender_id       BIGINT          NOT NULL REFERENCES users (id),
            body            TEXT            NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_order_messages_body CHECK (
                LENGTH(TRIM(body)) > 0 AND LENGTH(body) <= 2000
            )
        );
    """)
    op.execute("CREATE INDEX idx_order_messages_order ON order_messages (order_id, id);")
    op.execute("COMMENT ON TABLE order_messages IS 'Buyer/seller chat per order, append-only';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS order_messages CASCADE;")
