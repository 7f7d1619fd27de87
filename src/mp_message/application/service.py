"""MessageService: the buyer/seller channel attached to each order.

Reads: buyer, seller, admin.
Writes: buyer or seller only, and only until the order is COMPLETED.

postMessage holds a shared lock on the order row while it checks the status
and inserts, so a concurrent ``complete`` (FOR UPDATE) waits for it and no
message can land after the order closes.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.mp_common.database import transaction
from src.mp_common.errors import EmptyMessageError, OrderClosedError, OrderNotFoundError
from src.mp_gateway.auth.access import require_message_writer, require_read
from src.mp_gateway.auth.principal import Principal
from src.mp_message.application.schemas import MessageResponse
from src.mp_message.domain.repository import MessageRepositoryProtocol
from src.mp_message.infrastructure.persistence import MessageRepository
from src.mp_order.domain.repository import OrderRepositoryProtocol
from src.mp_order.infrastructure.persistence import OrderRepository

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(
        self,
        messages: MessageRepositoryProtocol | None = None,
        orders: OrderRepositoryProtocol | None = None,
    ) -> None:
        self._messages: MessageRepositoryProtocol = messages or MessageRepository()
        self._orders: OrderRepositoryProtocol = orders or OrderRepository()

    async def list_messages(
        self, principal: Principal, order_id: int, db: AsyncSession
    ) -> list[MessageResponse]:
        order = await self._orders.get_by_id(db, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        require_read(principal, order.participants)
        messages = await self._messages.list_by_order(db, order_id)
        return [MessageResponse.from_domain(m) for m in messages]

    async def post_message(
        self, principal: Principal, order_id: int, text: str, db: AsyncSession
    ) -> MessageResponse:
        body = text.strip()
        async with transaction(db, lock_timeout_ms=settings.LOCK_TIMEOUT_MS):
            order = await self._orders.lock_by_id(db, order_id, shared=True)
            if order is None:
                raise OrderNotFoundError(order_id)
            require_message_writer(principal, order.participants)
            if order.is_closed:
                raise OrderClosedError(order_id)
            if not body:
                raise EmptyMessageError()
            message = await self._messages.insert(db, order_id, principal.user_id, body)

        logger.info("Message %s posted on order %s by user %s", message.id, order_id, principal.user_id)
        return MessageResponse.from_domain(message)
