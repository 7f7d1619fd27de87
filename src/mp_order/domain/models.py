"""Order domain models: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.mp_common.enums import OrderStatus
from src.mp_gateway.auth.access import Participants
from src.mp_order.domain.lifecycle import TERMINAL_STATES


@dataclass
class Order:
    id: int
    listing_id: int
    buyer_id: int
    status: str  # CREATED / SHIPPING / DELIVERED / COMPLETED
    # Listing snapshot, joined at read time
    seller_id: int
    title: str
    price: int
    listing_status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def participants(self) -> Participants:
        return Participants(buyer_id=self.buyer_id, seller_id=self.seller_id)

    @property
    def is_closed(self) -> bool:
        return OrderStatus(self.status) in TERMINAL_STATES


@dataclass
class OrderEvent:
    """One row of the append-only order audit trail."""

    id: int
    order_id: int
    event_type: str
    actor_id: int
    from_status: str | None
    to_status: str
    created_at: datetime | None = None
