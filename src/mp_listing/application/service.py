"""ListingApplicationService: catalog management.

Owns every listing status change except Active -> Sold, which belongs to the
order engine's purchase transaction. Mutations lock the row first so a
pause/delete can never interleave with a purchase of the same listing.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.mp_common.database import transaction
from src.mp_common.enums import ListingStatus
from src.mp_common.errors import ListingNotEditableError, ListingNotFoundError
from src.mp_gateway.auth.access import require_not_admin, require_owner_or_admin
from src.mp_gateway.auth.principal import Principal
from src.mp_listing.application.schemas import ListingListResponse, ListingResponse
from src.mp_listing.domain.models import Listing
from src.mp_listing.domain.repository import ListingRepositoryProtocol
from src.mp_listing.infrastructure.persistence import ListingRepository

logger = logging.getLogger(__name__)

# Catalog-side transitions: target status -> required current status
_MODERATION_EDGES: dict[ListingStatus, ListingStatus] = {
    ListingStatus.PAUSED: ListingStatus.ACTIVE,
    ListingStatus.ACTIVE: ListingStatus.PAUSED,
}


class ListingApplicationService:
    def __init__(self, repo: ListingRepositoryProtocol | None = None) -> None:
        self._repo: ListingRepositoryProtocol = repo or ListingRepository()

    async def list_listings(
        self,
        db: AsyncSession,
        status: str | None,
        seller_id: int | None,
        query: str | None,
        cursor: int | None,
        limit: int,
    ) -> ListingListResponse:
        # status=None → default Active; status='ALL' → no filter
        sql_status = None if status == "ALL" else (status or ListingStatus.ACTIVE.value)
        query = query.strip() if query else None

        # Fetch limit+1 to detect has_more without COUNT(*)
        listings = await self._repo.list_listings(
            db, sql_status, seller_id, query or None, cursor, limit + 1
        )
        return _page(listings, limit)

    async def list_mine(
        self, principal: Principal, db: AsyncSession, cursor: int | None, limit: int
    ) -> ListingListResponse:
        listings = await self._repo.list_listings(
            db, None, principal.user_id, None, cursor, limit + 1
        )
        return _page(listings, limit)

    async def get_listing(self, db: AsyncSession, listing_id: int) -> ListingResponse:
        listing = await self._repo.get_by_id(db, listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return ListingResponse.from_domain(listing)

    async def create_listing(
        self, principal: Principal, title: str, price: int, db: AsyncSession
    ) -> ListingResponse:
        require_not_admin(principal)
        async with transaction(db):
            listing = await self._repo.create(db, title, price, principal.user_id)
        logger.info("Listing %s created by seller %s", listing.id, principal.user_id)
        return ListingResponse.from_domain(listing)

    async def delete_listing(
        self, principal: Principal, listing_id: int, db: AsyncSession
    ) -> None:
        """Seller (or admin) removes an Active listing. Sold listings are kept for their order."""
        async with transaction(db, lock_timeout_ms=settings.LOCK_TIMEOUT_MS):
            listing = await self._lock_for_edit(principal, listing_id, db)
            if listing.status != ListingStatus.ACTIVE:
                raise ListingNotEditableError(listing_id, listing.status)
            await self._repo.delete(db, listing_id)
        logger.info("Listing %s deleted by user %s", listing_id, principal.user_id)

    async def pause_listing(
        self, principal: Principal, listing_id: int, db: AsyncSession
    ) -> ListingResponse:
        return await self._moderate(principal, listing_id, ListingStatus.PAUSED, db)

    async def activate_listing(
        self, principal: Principal, listing_id: int, db: AsyncSession
    ) -> ListingResponse:
        return await self._moderate(principal, listing_id, ListingStatus.ACTIVE, db)

    async def _moderate(
        self,
        principal: Principal,
        listing_id: int,
        target: ListingStatus,
        db: AsyncSession,
    ) -> ListingResponse:
        async with transaction(db, lock_timeout_ms=settings.LOCK_TIMEOUT_MS):
            listing = await self._lock_for_edit(principal, listing_id, db)
            if listing.status != _MODERATION_EDGES[target]:
                raise ListingNotEditableError(listing_id, listing.status)
            updated = await self._repo.set_status(db, listing_id, target.value)
        logger.info(
            "Listing %s %s -> %s by user %s",
            listing_id, listing.status, target.value, principal.user_id,
        )
        return ListingResponse.from_domain(updated)

    async def _lock_for_edit(
        self, principal: Principal, listing_id: int, db: AsyncSession
    ) -> Listing:
        listing = await self._repo.lock_by_id(db, listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        require_owner_or_admin(principal, listing.seller_id)
        return listing


def _page(listings: list[Listing], limit: int) -> ListingListResponse:
    has_more = len(listings) > limit
    page = listings[:limit]
    return ListingListResponse(
        items=[ListingResponse.from_domain(item) for item in page],
        next_cursor=page[-1].id if has_more and page else None,
        has_more=has_more,
    )
