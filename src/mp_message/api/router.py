"""Order message endpoints.

GET  /orders/{order_id}/messages    oldest first (buyer, seller, admin)
POST /orders/{order_id}/messages    buyer or seller, until COMPLETED
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.database import get_db_session
from src.mp_common.response import ApiResponse, success_response
from src.mp_gateway.auth.dependencies import get_current_principal
from src.mp_gateway.auth.principal import Principal
from src.mp_message.application.schemas import PostMessageRequest
from src.mp_message.application.service import MessageService

router = APIRouter(prefix="/orders", tags=["messages"])
_service = MessageService()


@router.get("/{order_id}/messages")
async def list_messages(
    order_id: int,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    messages = await _service.list_messages(principal, order_id, db)
    return success_response([m.model_dump(mode="json") for m in messages], request)


@router.post("/{order_id}/messages", status_code=status.HTTP_201_CREATED)
async def post_message(
    order_id: int,
    body: PostMessageRequest,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    message = await _service.post_message(principal, order_id, body.text, db)
    return success_response(message.model_dump(mode="json"), request)
