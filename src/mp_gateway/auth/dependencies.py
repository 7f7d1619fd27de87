"""FastAPI dependency: get_current_principal.

Usage in any protected router:
    from src.mp_gateway.auth.dependencies import get_current_principal

    @router.get("/protected")
    async def protected(principal: Principal = Depends(get_current_principal)):
        ...

The returned Principal is the only identity the order engine ever sees.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.database import get_db_session
from src.mp_common.enums import Role
from src.mp_common.errors import InvalidCredentialsError
from src.mp_gateway.auth.jwt_handler import decode_token
from src.mp_gateway.auth.principal import Principal
from src.mp_gateway.user.service import UserService

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)

_users = UserService()


async def get_current_principal(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Principal:
    """Validate the JWT Bearer token and return the caller's Principal.

    Raises HTTP 401 if the token is missing, invalid, expired, or names an
    unknown user. Raises AccountDisabledError (403) for a frozen account.
    """
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    sub = payload.get("sub")
    if not sub or not sub.isdigit():
        raise _CREDENTIALS_EXCEPTION

    user = await _users.get_active_user(int(sub), db)
    if user is None:
        raise _CREDENTIALS_EXCEPTION

    principal = Principal(user_id=user.id, role=Role(user.role))
    # The session is shared with the route; end the lookup's implicit
    # transaction so services can open their own with db.begin().
    await db.rollback()
    return principal
