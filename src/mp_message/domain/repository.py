"""MessageRepository Protocol: interface contract for persistence layer."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_message.domain.models import Message


class MessageRepositoryProtocol(Protocol):
    async def insert(
        self, db: AsyncSession, order_id: int, sender_id: int, body: str
    ) -> Message: ...

    async def list_by_order(self, db: AsyncSession, order_id: int) -> list[Message]: ...
