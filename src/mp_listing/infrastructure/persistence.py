"""ListingRepository: concrete implementation of ListingRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
Mutations expect the caller to hold the row lock taken by lock_by_id().
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_listing.domain.models import Listing

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_COLUMNS = "id, title, price, status, seller_id, created_at, updated_at"

_GET_LISTING_SQL = text(f"SELECT {_COLUMNS} FROM listings WHERE id = :listing_id")

_LOCK_LISTING_SQL = text(f"SELECT {_COLUMNS} FROM listings WHERE id = :listing_id FOR UPDATE")

_LIST_LISTINGS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM listings
    WHERE
        (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
        AND (CAST(:seller_id AS BIGINT) IS NULL OR seller_id = CAST(:seller_id AS BIGINT))
        AND (CAST(:query AS TEXT) IS NULL
             OR title ILIKE '%' || CAST(:query AS TEXT) || '%')
        AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
    ORDER BY id DESC
    LIMIT :limit
""")

_INSERT_LISTING_SQL = text(f"""
    INSERT INTO listings (title, price, status, seller_id)
    VALUES (:title, :price, 'Active', :seller_id)
    RETURNING {_COLUMNS}
""")

_SET_STATUS_SQL = text(f"""
    UPDATE listings SET status = :status
    WHERE id = :listing_id
    RETURNING {_COLUMNS}
""")

_DELETE_LISTING_SQL = text("DELETE FROM listings WHERE id = :listing_id")

# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def row_to_listing(row: Any) -> Listing:
    return Listing(
        id=row.id,
        title=row.title,
        price=row.price,
        status=row.status,
        seller_id=row.seller_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ListingRepository:
    async def get_by_id(self, db: AsyncSession, listing_id: int) -> Listing | None:
        row = (await db.execute(_GET_LISTING_SQL, {"listing_id": listing_id})).fetchone()
        return row_to_listing(row) if row else None

    async def lock_by_id(self, db: AsyncSession, listing_id: int) -> Listing | None:
        row = (await db.execute(_LOCK_LISTING_SQL, {"listing_id": listing_id})).fetchone()
        return row_to_listing(row) if row else None

    async def list_listings(
        self,
        db: AsyncSession,
        status: str | None,
        seller_id: int | None,
        query: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[Listing]:
        result = await db.execute(
            _LIST_LISTINGS_SQL,
            {
                "status": status,
                "seller_id": seller_id,
                "query": query,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [row_to_listing(row) for row in result.fetchall()]

    async def create(
        self, db: AsyncSession, title: str, price: int, seller_id: int
    ) -> Listing:
        row = (
            await db.execute(
                _INSERT_LISTING_SQL,
                {"title": title, "price": price, "seller_id": seller_id},
            )
        ).fetchone()
        return row_to_listing(row)

    async def set_status(self, db: AsyncSession, listing_id: int, status: str) -> Listing:
        row = (
            await db.execute(_SET_STATUS_SQL, {"listing_id": listing_id, "status": status})
        ).fetchone()
        return row_to_listing(row)

    async def delete(self, db: AsyncSession, listing_id: int) -> None:
        await db.execute(_DELETE_LISTING_SQL, {"listing_id": listing_id})
