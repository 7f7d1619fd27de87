# src/mp_order/application/schemas.py
from datetime import datetime

from pydantic import BaseModel, Field

from src.mp_order.domain.lifecycle import next_status
from src.mp_order.domain.models import Order, OrderEvent


class PurchaseRequest(BaseModel):
    listing_id: int = Field(..., gt=0)


class ListingSnapshot(BaseModel):
    id: int
    title: str
    price: int
    status: str


class OrderResponse(BaseModel):
    id: int
    listing_id: int
    buyer_id: int
    seller_id: int
    status: str
    next_status: str | None
    listing: ListingSnapshot
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        upcoming = next_status(order.status)
        return cls(
            id=order.id,
            listing_id=order.listing_id,
            buyer_id=order.buyer_id,
            seller_id=order.seller_id,
            status=order.status,
            next_status=upcoming.value if upcoming else None,
            listing=ListingSnapshot(
                id=order.listing_id,
                title=order.title,
                price=order.price,
                status=order.listing_status,
            ),
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    next_cursor: int | None
    has_more: bool


class OrderEventResponse(BaseModel):
    id: int
    event_type: str
    actor_id: int
    from_status: str | None
    to_status: str
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, event: OrderEvent) -> "OrderEventResponse":
        return cls(
            id=event.id,
            event_type=event.event_type,
            actor_id=event.actor_id,
            from_status=event.from_status,
            to_status=event.to_status,
            created_at=event.created_at,
        )
