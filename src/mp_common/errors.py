"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User and access control
  3xxx: Listing
  4xxx: Order
  5xxx: Order messages
  9xxx: System

``retryable`` tells the caller whether repeating the same request can succeed
without new facts (store failures, lock contention). State and authorization
errors are never retryable.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        retryable: bool = False,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.retryable = retryable
        super().__init__(message)


# --- 1xxx: Auth/User ---

class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Email already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Invalid email or password", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Account is disabled", 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Refresh token is invalid or expired", 401)


class ForbiddenError(AppError):
    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(1101, detail, 403)


class AdminWriteForbiddenError(AppError):
    def __init__(self) -> None:
        super().__init__(1102, "Admins have read-only access to orders", 403)


# --- 3xxx: Listing ---

class ListingNotFoundError(AppError):
    def __init__(self, listing_id: int) -> None:
        super().__init__(3001, f"Listing not found: {listing_id}", 404)


class NotPurchasableError(AppError):
    def __init__(self, listing_id: int) -> None:
        super().__init__(3002, f"Listing is not purchasable: {listing_id}", 409)


class OwnListingError(AppError):
    def __init__(self) -> None:
        super().__init__(3003, "Cannot purchase your own listing", 403)


class ListingNotEditableError(AppError):
    def __init__(self, listing_id: int, status: str) -> None:
        super().__init__(3004, f"Listing {listing_id} in status {status} cannot be changed", 409)


# --- 4xxx: Order ---

class OrderNotFoundError(AppError):
    def __init__(self, order_id: int) -> None:
        super().__init__(4001, f"Order not found: {order_id}", 404)


class InvalidStateError(AppError):
    def __init__(self, order_id: int, status: str, action: str) -> None:
        super().__init__(4002, f"Order {order_id} in status {status} cannot {action}", 409)


# --- 5xxx: Order messages ---

class EmptyMessageError(AppError):
    def __init__(self) -> None:
        super().__init__(5001, "Message text must not be empty", 400)


class OrderClosedError(AppError):
    def __init__(self, order_id: int) -> None:
        super().__init__(5002, f"Order {order_id} is completed; messaging is closed", 409)


# --- 9xxx: System ---

class BadRequestError(AppError):
    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(9001, detail, 400)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500, retryable=True)


class LockTimeoutError(InternalError):
    """Row lock not acquired in time. Same family as InternalError, own code."""

    def __init__(self) -> None:
        super().__init__("Resource is busy, retry later")
        self.code = 9003
        self.http_status = 503
