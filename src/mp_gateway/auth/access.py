"""Authorization guard.

Every permission decision about an order goes through ``classify``: given the
verified principal and the order's participants it yields exactly one access
class. The ``require_*`` helpers turn a class into the right error so routes
never compare user ids themselves.

    owner-buyer     the principal bought the listing
    owner-seller    the principal listed it
    admin-readonly  admin role; sees everything, writes nothing
    none            anyone else

Admin role is checked first: an admin principal is admin-readonly even on an
order it happens to be party to.
"""

from dataclasses import dataclass
from enum import Enum

from src.mp_common.errors import AdminWriteForbiddenError, ForbiddenError, OwnListingError
from src.mp_gateway.auth.principal import Principal


class AccessClass(str, Enum):
    OWNER_BUYER = "owner-buyer"
    OWNER_SELLER = "owner-seller"
    ADMIN_READONLY = "admin-readonly"
    NONE = "none"


@dataclass(frozen=True)
class Participants:
    buyer_id: int
    seller_id: int


_READERS = frozenset(
    {AccessClass.OWNER_BUYER, AccessClass.OWNER_SELLER, AccessClass.ADMIN_READONLY}
)


def classify(principal: Principal, participants: Participants) -> AccessClass:
    if principal.is_admin:
        return AccessClass.ADMIN_READONLY
    if principal.user_id == participants.buyer_id:
        return AccessClass.OWNER_BUYER
    if principal.user_id == participants.seller_id:
        return AccessClass.OWNER_SELLER
    return AccessClass.NONE


def require_read(principal: Principal, participants: Participants) -> AccessClass:
    access = classify(principal, participants)
    if access not in _READERS:
        raise ForbiddenError()
    return access


def require_actor(
    principal: Principal, participants: Participants, actor: AccessClass
) -> AccessClass:
    """Allow only the participant named by ``actor`` (lifecycle edges)."""
    access = classify(principal, participants)
    if access != actor:
        raise ForbiddenError(f"Only the {actor.value.removeprefix('owner-')} may do this")
    return access


def require_message_writer(principal: Principal, participants: Participants) -> AccessClass:
    access = classify(principal, participants)
    if access == AccessClass.ADMIN_READONLY:
        raise AdminWriteForbiddenError()
    if access == AccessClass.NONE:
        raise ForbiddenError()
    return access


def require_not_seller(principal: Principal, seller_id: int) -> None:
    """Purchase guard: nobody buys their own listing."""
    if principal.user_id == seller_id:
        raise OwnListingError()


def require_not_admin(principal: Principal) -> None:
    """Trading guard: an admin can never advance an order it is party to."""
    if principal.is_admin:
        raise ForbiddenError("Admins cannot buy or sell")


def require_owner_or_admin(principal: Principal, owner_id: int) -> None:
    """Catalog moderation: the listing's seller or any admin."""
    if not principal.is_admin and principal.user_id != owner_id:
        raise ForbiddenError()


def require_admin(principal: Principal) -> None:
    if not principal.is_admin:
        raise ForbiddenError("Admin role required")
