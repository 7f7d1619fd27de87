# src/mp_order/application/service.py
"""OrderService: purchase transaction and order lifecycle.

Every mutating call runs in exactly one transaction (``transaction()``) and
takes its row lock before reading the state it decides on. All checks happen
before the first write, so a rejected call leaves no trace.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.mp_common.database import transaction
from src.mp_common.enums import ListingStatus, OrderEventType, OrderStatus
from src.mp_common.errors import (
    InvalidStateError,
    ListingNotFoundError,
    NotPurchasableError,
    OrderNotFoundError,
)
from src.mp_gateway.auth.access import (
    require_actor,
    require_not_admin,
    require_not_seller,
    require_read,
)
from src.mp_gateway.auth.principal import Principal
from src.mp_order.application.schemas import (
    OrderEventResponse,
    OrderListResponse,
    OrderResponse,
)
from src.mp_order.domain.lifecycle import COMPLETE, DELIVER, SHIP, Transition
from src.mp_order.domain.models import Order
from src.mp_order.domain.repository import (
    ListingSaleRepositoryProtocol,
    OrderRepositoryProtocol,
)
from src.mp_order.infrastructure.persistence import ListingSaleRepository, OrderRepository

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(
        self,
        orders: OrderRepositoryProtocol | None = None,
        listings: ListingSaleRepositoryProtocol | None = None,
    ) -> None:
        self._orders: OrderRepositoryProtocol = orders or OrderRepository()
        self._listings: ListingSaleRepositoryProtocol = listings or ListingSaleRepository()

    # ------------------------------------------------------------------
    # Purchase
    # ------------------------------------------------------------------

    async def purchase(
        self, principal: Principal, listing_id: int, db: AsyncSession
    ) -> OrderResponse:
        """Sell an Active listing to the caller: listing -> Sold + new CREATED order.

        The listing row lock serializes concurrent buyers; whoever gets it
        first sees Active, everyone after sees Sold and gets NotPurchasableError.
        """
        require_not_admin(principal)
        async with transaction(db, lock_timeout_ms=settings.LOCK_TIMEOUT_MS):
            listing = await self._listings.lock_for_sale(db, listing_id)
            if listing is None:
                raise ListingNotFoundError(listing_id)
            require_not_seller(principal, listing.seller_id)
            if listing.status != ListingStatus.ACTIVE:
                raise NotPurchasableError(listing_id)

            if not await self._listings.mark_sold(db, listing_id):
                raise NotPurchasableError(listing_id)
            order_id = await self._orders.insert(db, listing_id, principal.user_id)
            await self._orders.append_event(
                db,
                order_id,
                OrderEventType.ORDER_CREATED.value,
                principal.user_id,
                None,
                OrderStatus.CREATED.value,
            )
            order = await self._load(db, order_id)

        logger.info(
            "Order %s created: listing %s sold to buyer %s",
            order.id, listing_id, principal.user_id,
        )
        return OrderResponse.from_domain(order)

    # ------------------------------------------------------------------
    # Lifecycle transitions
    # ------------------------------------------------------------------

    async def ship(self, principal: Principal, order_id: int, db: AsyncSession) -> OrderResponse:
        return await self._advance(principal, order_id, SHIP, db)

    async def deliver(
        self, principal: Principal, order_id: int, db: AsyncSession
    ) -> OrderResponse:
        return await self._advance(principal, order_id, DELIVER, db)

    async def complete(
        self, principal: Principal, order_id: int, db: AsyncSession
    ) -> OrderResponse:
        return await self._advance(principal, order_id, COMPLETE, db)

    async def _advance(
        self,
        principal: Principal,
        order_id: int,
        transition: Transition,
        db: AsyncSession,
    ) -> OrderResponse:
        async with transaction(db, lock_timeout_ms=settings.LOCK_TIMEOUT_MS):
            order = await self._orders.lock_by_id(db, order_id)
            if order is None:
                raise OrderNotFoundError(order_id)
            require_actor(principal, order.participants, transition.actor)
            if order.status != transition.source:
                raise InvalidStateError(order_id, order.status, transition.name)

            updated = await self._orders.update_status(
                db, order_id, transition.source.value, transition.target.value
            )
            if not updated:
                # Unreachable while the row lock is held
                raise InvalidStateError(order_id, order.status, transition.name)
            await self._orders.append_event(
                db,
                order_id,
                transition.event.value,
                principal.user_id,
                transition.source.value,
                transition.target.value,
            )
            order = await self._load(db, order_id)

        logger.info(
            "Order %s %s: %s -> %s by user %s",
            order_id, transition.name, transition.source.value,
            transition.target.value, principal.user_id,
        )
        return OrderResponse.from_domain(order)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_order(
        self, principal: Principal, order_id: int, db: AsyncSession
    ) -> OrderResponse:
        order = await self._get_readable(principal, order_id, db)
        return OrderResponse.from_domain(order)

    async def list_events(
        self, principal: Principal, order_id: int, db: AsyncSession
    ) -> list[OrderEventResponse]:
        await self._get_readable(principal, order_id, db)
        events = await self._orders.list_events(db, order_id)
        return [OrderEventResponse.from_domain(e) for e in events]

    async def list_bought(
        self, principal: Principal, cursor: int | None, limit: int, db: AsyncSession
    ) -> OrderListResponse:
        orders = await self._orders.list_orders(
            db, principal.user_id, None, None, cursor, limit + 1
        )
        return page_orders(orders, limit)

    async def list_sold(
        self, principal: Principal, cursor: int | None, limit: int, db: AsyncSession
    ) -> OrderListResponse:
        orders = await self._orders.list_orders(
            db, None, principal.user_id, None, cursor, limit + 1
        )
        return page_orders(orders, limit)

    async def _get_readable(
        self, principal: Principal, order_id: int, db: AsyncSession
    ) -> Order:
        order = await self._orders.get_by_id(db, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        require_read(principal, order.participants)
        return order

    async def _load(self, db: AsyncSession, order_id: int) -> Order:
        order = await self._orders.get_by_id(db, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order


def page_orders(orders: list[Order], limit: int) -> OrderListResponse:
    """Trim a limit+1 fetch into one page plus the cursor for the next."""
    has_more = len(orders) > limit
    page = orders[:limit]
    return OrderListResponse(
        items=[OrderResponse.from_domain(o) for o in page],
        next_cursor=page[-1].id if has_more and page else None,
        has_more=has_more,
    )
