"""Domain models for mp_listing: pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Listing:
    id: int
    title: str
    price: int  # whole currency units, >= 0
    status: str  # Active / Paused / Sold
    seller_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
