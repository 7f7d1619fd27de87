"""In-memory store and repositories for service-level tests.

FakeSession mimics the parts of AsyncSession the services touch:
``begin()`` opens a transaction whose row locks (asyncio.Lock per row) are
released on exit, and whose staged writes are undone if the block raises.
That is enough to exercise purchase races and lifecycle rollbacks without
PostgreSQL.
"""

import asyncio
import itertools
from collections import defaultdict
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import DBAPIError

from src.mp_common.enums import Role
from src.mp_gateway.auth.principal import Principal
from src.mp_listing.domain.models import Listing
from src.mp_message.application.service import MessageService
from src.mp_message.domain.models import Message
from src.mp_order.application.service import OrderService
from src.mp_order.domain.models import Order, OrderEvent

SELLER_ID = 10
BUYER_ID = 20
OTHER_ID = 30
ADMIN_ID = 1


class FakeSession:
    def __init__(self, store: "InMemoryStore") -> None:
        self.store = store
        self.held: list[asyncio.Lock] = []
        self.undo: list[Callable[[], None]] = []
        self.executed: list[tuple[Any, Any]] = []

    async def execute(self, statement: Any, params: Any = None) -> MagicMock:
        # Only transaction() talks to the session directly (SET lock_timeout)
        self.executed.append((statement, params))
        return MagicMock()

    def begin(self) -> "_FakeTransaction":
        return _FakeTransaction(self)


class _FakeTransaction:
    def __init__(self, session: FakeSession) -> None:
        self._session = session

    async def __aenter__(self) -> FakeSession:
        return self._session

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        session = self._session
        if exc_type is not None:
            for undo in reversed(session.undo):
                undo()
        session.undo.clear()
        for lock in session.held:
            lock.release()
        session.held.clear()
        return False


class InMemoryStore:
    def __init__(self) -> None:
        self.listings: dict[int, Listing] = {}
        self.orders: dict[int, dict[str, Any]] = {}
        self.events: list[OrderEvent] = []
        self.messages: list[Message] = []
        self.fail_order_insert = False
        self._locks: dict[tuple[str, int], asyncio.Lock] = defaultdict(asyncio.Lock)
        self._listing_ids = itertools.count(1)
        self._order_ids = itertools.count(1)
        self._event_ids = itertools.count(1)
        self._message_ids = itertools.count(1)

    def session(self) -> FakeSession:
        return FakeSession(self)

    def add_listing(
        self,
        seller_id: int = SELLER_ID,
        price: int = 500,
        status: str = "Active",
        title: str = "Lamp",
        listing_id: int | None = None,
    ) -> Listing:
        listing_id = listing_id if listing_id is not None else next(self._listing_ids)
        listing = Listing(
            id=listing_id, title=title, price=price, status=status, seller_id=seller_id,
            created_at=datetime.now(UTC), updated_at=datetime.now(UTC),
        )
        self.listings[listing_id] = listing
        return listing

    def add_order(self, listing: Listing, buyer_id: int = BUYER_ID, status: str = "CREATED") -> int:
        """Seed an order directly, bypassing the purchase path."""
        listing.status = "Sold"
        order_id = next(self._order_ids)
        self.orders[order_id] = {
            "id": order_id, "listing_id": listing.id, "buyer_id": buyer_id,
            "status": status, "created_at": datetime.now(UTC),
        }
        return order_id

    async def lock_row(self, db: FakeSession, table: str, row_id: int) -> None:
        lock = self._locks[(table, row_id)]
        await lock.acquire()
        db.held.append(lock)
        # Let competing transactions run up to the lock
        await asyncio.sleep(0)

    def order_view(self, order_id: int) -> Order | None:
        row = self.orders.get(order_id)
        if row is None:
            return None
        listing = self.listings[row["listing_id"]]
        return Order(
            id=row["id"],
            listing_id=row["listing_id"],
            buyer_id=row["buyer_id"],
            status=row["status"],
            seller_id=listing.seller_id,
            title=listing.title,
            price=listing.price,
            listing_status=listing.status,
            created_at=row["created_at"],
            updated_at=row["created_at"],
        )


class FakeListingSaleRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def lock_for_sale(self, db: FakeSession, listing_id: int) -> Listing | None:
        if listing_id not in self._store.listings:
            return None
        await self._store.lock_row(db, "listings", listing_id)
        return replace(self._store.listings[listing_id])

    async def mark_sold(self, db: FakeSession, listing_id: int) -> bool:
        listing = self._store.listings[listing_id]
        if listing.status != "Active":
            return False
        listing.status = "Sold"
        db.undo.append(lambda: setattr(listing, "status", "Active"))
        return True


class FakeOrderRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def insert(self, db: FakeSession, listing_id: int, buyer_id: int) -> int:
        if self._store.fail_order_insert:
            raise DBAPIError("INSERT INTO orders", {}, Exception("connection reset"))
        if any(o["listing_id"] == listing_id for o in self._store.orders.values()):
            raise AssertionError(f"second order for listing {listing_id}")
        order_id = next(self._store._order_ids)
        self._store.orders[order_id] = {
            "id": order_id, "listing_id": listing_id, "buyer_id": buyer_id,
            "status": "CREATED", "created_at": datetime.now(UTC),
        }
        db.undo.append(lambda: self._store.orders.pop(order_id))
        return order_id

    async def get_by_id(self, db: FakeSession, order_id: int) -> Order | None:
        return self._store.order_view(order_id)

    async def lock_by_id(
        self, db: FakeSession, order_id: int, shared: bool = False
    ) -> Order | None:
        if order_id not in self._store.orders:
            return None
        await self._store.lock_row(db, "orders", order_id)
        return self._store.order_view(order_id)

    async def update_status(
        self, db: FakeSession, order_id: int, expected: str, status: str
    ) -> bool:
        row = self._store.orders[order_id]
        if row["status"] != expected:
            return False
        row["status"] = status
        db.undo.append(lambda: row.__setitem__("status", expected))
        return True

    async def list_orders(
        self,
        db: FakeSession,
        buyer_id: int | None,
        seller_id: int | None,
        status: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[Order]:
        views = [self._store.order_view(oid) for oid in sorted(self._store.orders, reverse=True)]
        matched = [
            o for o in views
            if o is not None
            and (buyer_id is None or o.buyer_id == buyer_id)
            and (seller_id is None or o.seller_id == seller_id)
            and (status is None or o.status == status)
            and (cursor_id is None or o.id < cursor_id)
        ]
        return matched[:limit]

    async def count_by_status(self, db: FakeSession) -> dict[str, int]:
        counts: dict[str, int] = defaultdict(int)
        for row in self._store.orders.values():
            counts[row["status"]] += 1
        return dict(counts)

    async def append_event(
        self,
        db: FakeSession,
        order_id: int,
        event_type: str,
        actor_id: int,
        from_status: str | None,
        to_status: str,
    ) -> None:
        event = OrderEvent(
            id=next(self._store._event_ids), order_id=order_id, event_type=event_type,
            actor_id=actor_id, from_status=from_status, to_status=to_status,
            created_at=datetime.now(UTC),
        )
        self._store.events.append(event)
        db.undo.append(lambda: self._store.events.remove(event))

    async def list_events(self, db: FakeSession, order_id: int) -> list[OrderEvent]:
        return [e for e in self._store.events if e.order_id == order_id]


class FakeMessageRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def insert(
        self, db: FakeSession, order_id: int, sender_id: int, body: str
    ) -> Message:
        message = Message(
            id=next(self._store._message_ids), order_id=order_id, sender_id=sender_id,
            body=body, created_at=datetime.now(UTC),
        )
        self._store.messages.append(message)
        db.undo.append(lambda: self._store.messages.remove(message))
        return message

    async def list_by_order(self, db: FakeSession, order_id: int) -> list[Message]:
        return sorted(
            (m for m in self._store.messages if m.order_id == order_id), key=lambda m: m.id
        )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def order_service(store: InMemoryStore) -> OrderService:
    return OrderService(
        orders=FakeOrderRepository(store), listings=FakeListingSaleRepository(store)
    )


@pytest.fixture
def message_service(store: InMemoryStore) -> MessageService:
    return MessageService(
        messages=FakeMessageRepository(store), orders=FakeOrderRepository(store)
    )


@pytest.fixture
def seller() -> Principal:
    return Principal(user_id=SELLER_ID)


@pytest.fixture
def buyer() -> Principal:
    return Principal(user_id=BUYER_ID)


@pytest.fixture
def stranger() -> Principal:
    return Principal(user_id=OTHER_ID)


@pytest.fixture
def admin() -> Principal:
    return Principal(user_id=ADMIN_ID, role=Role.ADMIN)


@pytest.fixture
def order_repository(store: InMemoryStore) -> FakeOrderRepository:
    return FakeOrderRepository(store)
