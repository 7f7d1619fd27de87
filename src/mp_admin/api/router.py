"""Admin REST API."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_admin.application.service import AdminService
from src.mp_common.database import get_db_session
from src.mp_common.response import ApiResponse, success_response
from src.mp_gateway.auth.dependencies import get_current_principal
from src.mp_gateway.auth.principal import Principal

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()


@router.get("/orders")
async def list_all_orders(
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: str | None = Query(None, description="Filter by order status"),
    limit: int = Query(50, ge=1, le=200),
    cursor: int | None = Query(None, description="Pagination cursor (order ID)"),
) -> ApiResponse:
    result = await _service.list_orders(principal, status, cursor, limit, db)
    return success_response(result.model_dump(mode="json"), request)


@router.get("/orders/stats")
async def order_stats(
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_order_stats(principal, db)
    return success_response(result, request)
