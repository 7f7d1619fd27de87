"""JWT issue/verify for the identity gateway (HS256, shared JWT_SECRET).

Two token kinds share one shape, ``{sub, type, iat, exp}``; access tokens
also carry ``role``. ``sub`` is the numeric user id as a string. The role
claim is informational only: get_current_principal re-reads the role from
the users table, so a demoted admin loses privileges on the next request.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from config.settings import settings
from src.mp_common.errors import AppError, InvalidCredentialsError, InvalidRefreshTokenError

_ALGORITHM = settings.JWT_ALGORITHM
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
_REFRESH_EXPIRE = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)

# Which error a bad token of each kind turns into
_REJECTIONS: dict[str, type[AppError]] = {
    "access": InvalidCredentialsError,
    "refresh": InvalidRefreshTokenError,
}


def _issue(user_id: int, token_type: str, ttl: timedelta, **claims: Any) -> str:
    issued_at = datetime.now(UTC)
    claims.update(sub=str(user_id), type=token_type, iat=issued_at, exp=issued_at + ttl)
    return str(jwt.encode(claims, settings.JWT_SECRET, algorithm=_ALGORITHM))


def create_access_token(user_id: int, role: str) -> str:
    return _issue(user_id, "access", _ACCESS_EXPIRE, role=role)


def create_refresh_token(user_id: int) -> str:
    return _issue(user_id, "refresh", _REFRESH_EXPIRE)


def decode_token(token: str, expected_type: str) -> dict[str, str]:
    """Verify signature, expiry and token kind; return the claims.

    A refresh token presented as an access token (or the reverse) is rejected
    like a forged one.
    """
    rejection = _REJECTIONS[expected_type]
    try:
        # Pinned algorithm list: never trust the token header's "alg"
        claims: dict[str, str] = jwt.decode(token, settings.JWT_SECRET, algorithms=[_ALGORITHM])
    except JWTError:
        raise rejection() from None
    if claims.get("type") != expected_type:
        raise rejection()
    return claims
