"""mp_listing REST endpoints.

GET    /listings                      public browse, cursor pagination
GET    /listings/mine                 caller's own listings, any status
GET    /listings/{listing_id}         single listing
POST   /listings                      create (status Active)
DELETE /listings/{listing_id}         seller or admin, Active only
POST   /listings/{listing_id}/pause   seller or admin, Active -> Paused
POST   /listings/{listing_id}/activate  seller or admin, Paused -> Active
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.database import get_db_session
from src.mp_common.response import ApiResponse, success_response
from src.mp_gateway.auth.dependencies import get_current_principal
from src.mp_gateway.auth.principal import Principal
from src.mp_listing.application.schemas import CreateListingRequest
from src.mp_listing.application.service import ListingApplicationService

router = APIRouter(prefix="/listings", tags=["listings"])

_service = ListingApplicationService()


@router.get("")
async def list_listings(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: str | None = Query(
        None, description="Filter by status. Default: Active. Use ALL for no filter."
    ),
    seller_id: int | None = Query(None),
    q: str | None = Query(None, max_length=100, description="Title substring search"),
    limit: int = Query(20, ge=1, le=100),
    cursor: int | None = Query(None, description="Pagination cursor (listing ID)"),
) -> ApiResponse:
    result = await _service.list_listings(db, status, seller_id, q, cursor, limit)
    return success_response(result.model_dump(mode="json"), request)


@router.get("/mine")
async def list_my_listings(
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(20, ge=1, le=100),
    cursor: int | None = Query(None),
) -> ApiResponse:
    result = await _service.list_mine(principal, db, cursor, limit)
    return success_response(result.model_dump(mode="json"), request)


@router.get("/{listing_id}")
async def get_listing(
    listing_id: int,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_listing(db, listing_id)
    return success_response(result.model_dump(mode="json"), request)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_listing(
    body: CreateListingRequest,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_listing(principal, body.title, body.price, db)
    return success_response(result.model_dump(mode="json"), request)


@router.delete("/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_listing(
    listing_id: int,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> Response:
    await _service.delete_listing(principal, listing_id, db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.api_route("/{listing_id}/pause", methods=["POST", "PATCH"])
async def pause_listing(
    listing_id: int,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.pause_listing(principal, listing_id, db)
    return success_response(result.model_dump(mode="json"), request)


@router.api_route("/{listing_id}/activate", methods=["POST", "PATCH"])
async def activate_listing(
    listing_id: int,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.activate_listing(principal, listing_id, db)
    return success_response(result.model_dump(mode="json"), request)
