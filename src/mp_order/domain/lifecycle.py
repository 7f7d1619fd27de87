"""Order lifecycle: the fixed forward-only sequence and who may advance it.

    CREATED --ship(seller)--> SHIPPING --deliver(buyer)--> DELIVERED
            --complete(buyer)--> COMPLETED (terminal)

Each edge has exactly one source status, so replays, skips and regressions
all fail the same precondition check.
"""

from dataclasses import dataclass

from src.mp_common.enums import OrderEventType, OrderStatus
from src.mp_gateway.auth.access import AccessClass

ORDER_SEQUENCE: tuple[OrderStatus, ...] = (
    OrderStatus.CREATED,
    OrderStatus.SHIPPING,
    OrderStatus.DELIVERED,
    OrderStatus.COMPLETED,
)

TERMINAL_STATES: frozenset[OrderStatus] = frozenset({OrderStatus.COMPLETED})


@dataclass(frozen=True)
class Transition:
    name: str
    actor: AccessClass
    source: OrderStatus
    target: OrderStatus
    event: OrderEventType


SHIP = Transition(
    "ship", AccessClass.OWNER_SELLER,
    OrderStatus.CREATED, OrderStatus.SHIPPING, OrderEventType.ORDER_SHIPPED,
)
DELIVER = Transition(
    "deliver", AccessClass.OWNER_BUYER,
    OrderStatus.SHIPPING, OrderStatus.DELIVERED, OrderEventType.ORDER_DELIVERED,
)
COMPLETE = Transition(
    "complete", AccessClass.OWNER_BUYER,
    OrderStatus.DELIVERED, OrderStatus.COMPLETED, OrderEventType.ORDER_COMPLETED,
)


def next_status(status: str) -> OrderStatus | None:
    """Successor in ORDER_SEQUENCE, None for the terminal state."""
    current = OrderStatus(status)
    idx = ORDER_SEQUENCE.index(current)
    return ORDER_SEQUENCE[idx + 1] if idx + 1 < len(ORDER_SEQUENCE) else None
