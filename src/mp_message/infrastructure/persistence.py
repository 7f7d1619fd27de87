"""MessageRepository: raw SQL persistence for order_messages (append-only)."""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_message.domain.models import Message

_INSERT_MESSAGE_SQL = text("""
    INSERT INTO order_messages (order_id, sender_id, body)
    VALUES (:order_id, :sender_id, :body)
    RETURNING id, order_id, sender_id, body, created_at
""")

# id is the canonical order: created_at can tie within one transaction timestamp
_LIST_MESSAGES_SQL = text("""
    SELECT id, order_id, sender_id, body, created_at
    FROM order_messages
    WHERE order_id = :order_id
    ORDER BY id ASC
""")


def _row_to_message(row: Any) -> Message:
    return Message(
        id=row.id,
        order_id=row.order_id,
        sender_id=row.sender_id,
        body=row.body,
        created_at=row.created_at,
    )


class MessageRepository:
    async def insert(
        self, db: AsyncSession, order_id: int, sender_id: int, body: str
    ) -> Message:
        row = (
            await db.execute(
                _INSERT_MESSAGE_SQL,
                {"order_id": order_id, "sender_id": sender_id, "body": body},
            )
        ).fetchone()
        return _row_to_message(row)

    async def list_by_order(self, db: AsyncSession, order_id: int) -> list[Message]:
        rows = (await db.execute(_LIST_MESSAGES_SQL, {"order_id": order_id})).fetchall()
        return [_row_to_message(row) for row in rows]
