"""003: create listings table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE listings (
            id              BIGINT          GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
            title           VARCHAR(200)    NOT NULL,
            price           BIGINT          NOT NULL,
            status          VARCHAR(10)     NOT NULL DEFAULT 'Active',
            seller_id       BIGINT          NOT NULL REFERENCES users (id),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_listings_price    CHECK (price >= 0),
            CONSTRAINT ck_listings_title    CHECK (LENGTH(TRIM(title)) > 0),
            CONSTRAINT ck_listings_status   CHECK (status IN ('Active', 'Paused', 'Sold'))
        );
    """)
    op.execute("CREATE INDEX idx_listings_status ON listings (status, id DESC);")
    op.execute("CREATE INDEX idx_listings_seller ON listings (seller_id, id DESC);")
    op.execute("""
        CREATE TRIGGER trg_listings_updated_at
            BEFORE UPDATE ON listings
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE listings IS 'Catalog; Active -> Sold only via purchase';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS listings CASCADE;")
