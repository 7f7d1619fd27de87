"""Pydantic schemas for the catalog API."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.mp_listing.domain.models import Listing


class CreateListingRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    price: int = Field(..., ge=0)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v


class ListingResponse(BaseModel):
    id: int
    title: str
    price: int
    status: str
    seller_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, listing: Listing) -> "ListingResponse":
        return cls(
            id=listing.id,
            title=listing.title,
            price=listing.price,
            status=listing.status,
            seller_id=listing.seller_id,
            created_at=listing.created_at,
            updated_at=listing.updated_at,
        )


class ListingListResponse(BaseModel):
    items: list[ListingResponse]
    next_cursor: int | None
    has_more: bool
