# src/mp_admin/application/service.py
"""Admin application service: read-only views over every order."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.enums import OrderStatus
from src.mp_common.errors import BadRequestError
from src.mp_gateway.auth.access import require_admin
from src.mp_gateway.auth.principal import Principal
from src.mp_order.application.schemas import OrderListResponse
from src.mp_order.application.service import page_orders
from src.mp_order.domain.repository import OrderRepositoryProtocol
from src.mp_order.infrastructure.persistence import OrderRepository


class AdminService:
    def __init__(self, orders: OrderRepositoryProtocol | None = None) -> None:
        self._orders: OrderRepositoryProtocol = orders or OrderRepository()

    async def list_orders(
        self,
        principal: Principal,
        status: str | None,
        cursor: int | None,
        limit: int,
        db: AsyncSession,
    ) -> OrderListResponse:
        require_admin(principal)
        if status is not None and status not in OrderStatus.__members__:
            raise BadRequestError(f"Unknown order status: {status}")
        orders = await self._orders.list_orders(db, None, None, status, cursor, limit + 1)
        return page_orders(orders, limit)

    async def get_order_stats(self, principal: Principal, db: AsyncSession) -> dict[str, Any]:
        require_admin(principal)
        counts = await self._orders.count_by_status(db)
        by_status = {s.value: counts.get(s.value, 0) for s in OrderStatus}
        return {"total_orders": sum(by_status.values()), "by_status": by_status}
