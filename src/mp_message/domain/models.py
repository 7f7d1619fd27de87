"""Order message domain model."""

from dataclasses import dataclass
from datetime import datetime

MAX_MESSAGE_LENGTH = 2000


@dataclass
class Message:
    id: int
    order_id: int
    sender_id: int
    body: str
    created_at: datetime | None = None
