"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class ListingStatus(str, Enum):
    ACTIVE = "Active"
    PAUSED = "Paused"
    SOLD = "Sold"


class OrderStatus(str, Enum):
    CREATED = "CREATED"
    SHIPPING = "SHIPPING"
    DELIVERED = "DELIVERED"
    COMPLETED = "COMPLETED"


class OrderEventType(str, Enum):
    ORDER_CREATED = "ORDER_CREATED"
    ORDER_SHIPPED = "ORDER_SHIPPED"
    ORDER_DELIVERED = "ORDER_DELIVERED"
    ORDER_COMPLETED = "ORDER_COMPLETED"
