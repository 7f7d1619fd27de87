# src/mp_order/infrastructure/persistence.py
"""Order engine persistence: raw SQL implementations.

Lock discipline:
  - purchase:     listings row FOR UPDATE
  - transitions:  orders row FOR UPDATE OF o
  - post message: orders row FOR SHARE OF o (blocks a concurrent transition)
The listings join never locks the listing for order reads.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_listing.domain.models import Listing
from src.mp_listing.infrastructure.persistence import row_to_listing
from src.mp_order.domain.models import Order, OrderEvent

# ---------------------------------------------------------------------------
# SQL statements: listing sale contract
# ---------------------------------------------------------------------------

_LOCK_LISTING_FOR_SALE_SQL = text("""
    SELECT id, title, price, status, seller_id, created_at, updated_at
    FROM listings WHERE id = :listing_id
    FOR UPDATE
""")

_MARK_SOLD_SQL = text("""
    UPDATE listings SET status = 'Sold'
    WHERE id = :listing_id AND status = 'Active'
""")

# ---------------------------------------------------------------------------
# SQL statements: orders
# ---------------------------------------------------------------------------

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (listing_id, buyer_id, status)
    VALUES (:listing_id, :buyer_id, 'CREATED')
    RETURNING id
""")

_SELECT_ORDER = """
    SELECT o.id, o.listing_id, o.buyer_id, o.status, o.created_at, o.updated_at,
           l.seller_id, l.title, l.price, l.status AS listing_status
    FROM orders o
    JOIN listings l ON l.id = o.listing_id
"""

_GET_ORDER_SQL = text(f"{_SELECT_ORDER} WHERE o.id = :order_id")

_LOCK_ORDER_SQL = text(f"{_SELECT_ORDER} WHERE o.id = :order_id FOR UPDATE OF o")

_SHARE_LOCK_ORDER_SQL = text(f"{_SELECT_ORDER} WHERE o.id = :order_id FOR SHARE OF o")

_UPDATE_STATUS_SQL = text("""
    UPDATE orders SET status = :status
    WHERE id = :order_id AND status = :expected
""")

_LIST_ORDERS_SQL = text(f"""
    {_SELECT_ORDER}
    WHERE (CAST(:buyer_id AS BIGINT) IS NULL OR o.buyer_id = CAST(:buyer_id AS BIGINT))
      AND (CAST(:seller_id AS BIGINT) IS NULL OR l.seller_id = CAST(:seller_id AS BIGINT))
      AND (CAST(:status AS TEXT) IS NULL OR o.status = CAST(:status AS TEXT))
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR o.id < CAST(:cursor_id AS BIGINT))
    ORDER BY o.id DESC
    LIMIT :limit
""")

_COUNT_BY_STATUS_SQL = text("SELECT status, COUNT(*) AS n FROM orders GROUP BY status")

# ---------------------------------------------------------------------------
# SQL statements: audit trail
# ---------------------------------------------------------------------------

_INSERT_EVENT_SQL = text("""
    INSERT INTO order_events (order_id, event_type, actor_id, from_status, to_status)
    VALUES (:order_id, :event_type, :actor_id, :from_status, :to_status)
""")

_LIST_EVENTS_SQL = text("""
    SELECT id, order_id, event_type, actor_id, from_status, to_status, created_at
    FROM order_events
    WHERE order_id = :order_id
    ORDER BY id ASC
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> Order:
    return Order(
        id=row.id,
        listing_id=row.listing_id,
        buyer_id=row.buyer_id,
        status=row.status,
        seller_id=row.seller_id,
        title=row.title,
        price=row.price,
        listing_status=row.listing_status,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_event(row: Any) -> OrderEvent:
    return OrderEvent(
        id=row.id,
        order_id=row.order_id,
        event_type=row.event_type,
        actor_id=row.actor_id,
        from_status=row.from_status,
        to_status=row.to_status,
        created_at=row.created_at,
    )


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


class ListingSaleRepository:
    """Narrow catalog contract used only by the purchase transaction."""

    async def lock_for_sale(self, db: AsyncSession, listing_id: int) -> Listing | None:
        row = (
            await db.execute(_LOCK_LISTING_FOR_SALE_SQL, {"listing_id": listing_id})
        ).fetchone()
        return row_to_listing(row) if row else None

    async def mark_sold(self, db: AsyncSession, listing_id: int) -> bool:
        result = await db.execute(_MARK_SOLD_SQL, {"listing_id": listing_id})
        return result.rowcount == 1


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def insert(self, db: AsyncSession, listing_id: int, buyer_id: int) -> int:
        result = await db.execute(
            _INSERT_ORDER_SQL, {"listing_id": listing_id, "buyer_id": buyer_id}
        )
        return int(result.scalar_one())

    async def get_by_id(self, db: AsyncSession, order_id: int) -> Order | None:
        row = (await db.execute(_GET_ORDER_SQL, {"order_id": order_id})).fetchone()
        return _row_to_order(row) if row else None

    async def lock_by_id(
        self, db: AsyncSession, order_id: int, shared: bool = False
    ) -> Order | None:
        sql = _SHARE_LOCK_ORDER_SQL if shared else _LOCK_ORDER_SQL
        row = (await db.execute(sql, {"order_id": order_id})).fetchone()
        return _row_to_order(row) if row else None

    async def update_status(
        self, db: AsyncSession, order_id: int, expected: str, status: str
    ) -> bool:
        result = await db.execute(
            _UPDATE_STATUS_SQL,
            {"order_id": order_id, "expected": expected, "status": status},
        )
        return result.rowcount == 1

    async def list_orders(
        self,
        db: AsyncSession,
        buyer_id: int | None,
        seller_id: int | None,
        status: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[Order]:
        result = await db.execute(
            _LIST_ORDERS_SQL,
            {
                "buyer_id": buyer_id,
                "seller_id": seller_id,
                "status": status,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [_row_to_order(row) for row in result.fetchall()]

    async def count_by_status(self, db: AsyncSession) -> dict[str, int]:
        rows = (await db.execute(_COUNT_BY_STATUS_SQL)).fetchall()
        return {row.status: int(row.n) for row in rows}

    async def append_event(
        self,
        db: AsyncSession,
        order_id: int,
        event_type: str,
        actor_id: int,
        from_status: str | None,
        to_status: str,
    ) -> None:
        """Insert one audit row within the caller's transaction."""
        await db.execute(
            _INSERT_EVENT_SQL,
            {
                "order_id": order_id,
                "event_type": event_type,
                "actor_id": actor_id,
                "from_status": from_status,
                "to_status": to_status,
            },
        )

    async def list_events(self, db: AsyncSession, order_id: int) -> list[OrderEvent]:
        rows = (await db.execute(_LIST_EVENTS_SQL, {"order_id": order_id})).fetchall()
        return [_row_to_event(row) for row in rows]
