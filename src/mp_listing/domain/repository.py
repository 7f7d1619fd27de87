"""ListingRepository Protocol: interface contract for persistence layer."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_listing.domain.models import Listing


class ListingRepositoryProtocol(Protocol):
    async def get_by_id(self, db: AsyncSession, listing_id: int) -> Listing | None: ...

    async def lock_by_id(self, db: AsyncSession, listing_id: int) -> Listing | None: ...

    async def list_listings(
        self,
        db: AsyncSession,
        status: str | None,
        seller_id: int | None,
        query: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[Listing]: ...

    async def create(
        self, db: AsyncSession, title: str, price: int, seller_id: int
    ) -> Listing: ...

    async def set_status(self, db: AsyncSession, listing_id: int, status: str) -> Listing: ...

    async def delete(self, db: AsyncSession, listing_id: int) -> None: ...
