# src/mp_order/api/router.py
"""Order REST endpoints.

POST /orders                         purchase a listing (201)
GET  /orders/buyer/me                orders the caller bought
GET  /orders/seller/me               orders for the caller's listings
GET  /orders/{order_id}              order + listing snapshot
GET  /orders/{order_id}/events       audit trail
POST /orders/{order_id}/ship         seller: CREATED -> SHIPPING
POST /orders/{order_id}/deliver      buyer:  SHIPPING -> DELIVERED
POST /orders/{order_id}/complete     buyer:  DELIVERED -> COMPLETED

Transitions also answer PATCH for clients written against the old routes.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.database import get_db_session
from src.mp_common.response import ApiResponse, success_response
from src.mp_gateway.auth.dependencies import get_current_principal
from src.mp_gateway.auth.principal import Principal
from src.mp_order.application.schemas import PurchaseRequest
from src.mp_order.application.service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])
_service = OrderService()

CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def purchase(
    body: PurchaseRequest,
    request: Request,
    principal: CurrentPrincipal,
    db: DbSession,
) -> ApiResponse:
    order = await _service.purchase(principal, body.listing_id, db)
    return success_response(order.model_dump(mode="json"), request)


@router.get("/buyer/me")
async def list_bought(
    request: Request,
    principal: CurrentPrincipal,
    db: DbSession,
    limit: int = Query(20, ge=1, le=100),
    cursor: int | None = Query(None, description="Pagination cursor (order ID)"),
) -> ApiResponse:
    result = await _service.list_bought(principal, cursor, limit, db)
    return success_response(result.model_dump(mode="json"), request)


@router.get("/seller/me")
async def list_sold(
    request: Request,
    principal: CurrentPrincipal,
    db: DbSession,
    limit: int = Query(20, ge=1, le=100),
    cursor: int | None = Query(None, description="Pagination cursor (order ID)"),
) -> ApiResponse:
    result = await _service.list_sold(principal, cursor, limit, db)
    return success_response(result.model_dump(mode="json"), request)


@router.get("/{order_id}")
async def get_order(
    order_id: int,
    request: Request,
    principal: CurrentPrincipal,
    db: DbSession,
) -> ApiResponse:
    order = await _service.get_order(principal, order_id, db)
    return success_response(order.model_dump(mode="json"), request)


@router.get("/{order_id}/events")
async def list_order_events(
    order_id: int,
    request: Request,
    principal: CurrentPrincipal,
    db: DbSession,
) -> ApiResponse:
    events = await _service.list_events(principal, order_id, db)
    return success_response([e.model_dump(mode="json") for e in events], request)


@router.api_route("/{order_id}/ship", methods=["POST", "PATCH"])
async def ship_order(
    order_id: int,
    request: Request,
    principal: CurrentPrincipal,
    db: DbSession,
) -> ApiResponse:
    order = await _service.ship(principal, order_id, db)
    return success_response(order.model_dump(mode="json"), request)


@router.api_route("/{order_id}/deliver", methods=["POST", "PATCH"])
async def deliver_order(
    order_id: int,
    request: Request,
    principal: CurrentPrincipal,
    db: DbSession,
) -> ApiResponse:
    order = await _service.deliver(principal, order_id, db)
    return success_response(order.model_dump(mode="json"), request)


@router.api_route("/{order_id}/complete", methods=["POST", "PATCH"])
async def complete_order(
    order_id: int,
    request: Request,
    principal: CurrentPrincipal,
    db: DbSession,
) -> ApiResponse:
    order = await _service.complete(principal, order_id, db)
    return success_response(order.model_dump(mode="json"), request)
