# src/mp_order/domain/repository.py
"""Repository Protocols for the order engine.

ListingSaleRepositoryProtocol is the only door from the order engine into the
catalog: it can lock a listing row and flip it Active -> Sold, nothing else.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_listing.domain.models import Listing
from src.mp_order.domain.models import Order, OrderEvent


class ListingSaleRepositoryProtocol(Protocol):
    async def lock_for_sale(self, db: AsyncSession, listing_id: int) -> Listing | None: ...

    async def mark_sold(self, db: AsyncSession, listing_id: int) -> bool: ...


class OrderRepositoryProtocol(Protocol):
    async def insert(self, db: AsyncSession, listing_id: int, buyer_id: int) -> int: ...

    async def get_by_id(self, db: AsyncSession, order_id: int) -> Order | None: ...

    async def lock_by_id(
        self, db: AsyncSession, order_id: int, shared: bool = False
    ) -> Order | None: ...

    async def update_status(
        self, db: AsyncSession, order_id: int, expected: str, status: str
    ) -> bool: ...

    async def list_orders(
        self,
        db: AsyncSession,
        buyer_id: int | None,
        seller_id: int | None,
        status: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[Order]: ...

    async def count_by_status(self, db: AsyncSession) -> dict[str, int]: ...

    async def append_event(
        self,
        db: AsyncSession,
        order_id: int,
        event_type: str,
        actor_id: int,
        from_status: str | None,
        to_status: str,
    ) -> None: ...

    async def list_events(self, db: AsyncSession, order_id: int) -> list[OrderEvent]: ...
