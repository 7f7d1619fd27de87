from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.mp_message.domain.models import MAX_MESSAGE_LENGTH, Message


class PostMessageRequest(BaseModel):
    # Blank text is rejected by the service (EmptyMessageError, 400), not here
    text: str = Field("", max_length=MAX_MESSAGE_LENGTH)

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        # the limit applies to the stored body
        return v.strip() if isinstance(v, str) else v


class MessageResponse(BaseModel):
    id: int
    order_id: int
    sender_id: int
    body: str
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, message: Message) -> "MessageResponse":
        return cls(
            id=message.id,
            order_id=message.order_id,
            sender_id=message.sender_id,
            body=message.body,
            created_at=message.created_at,
        )
