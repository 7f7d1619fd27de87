"""Account operations behind the identity gateway.

Works on the caller's AsyncSession; ``register`` expects the router to wrap
it in ``db.begin()``. Roles are never self-assigned: registration always
creates a plain ``user``, admins come from the seed migration.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.enums import Role
from src.mp_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
)
from src.mp_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.mp_gateway.auth.password import hash_password, verify_password
from src.mp_gateway.user.db_models import UserModel

logger = logging.getLogger(__name__)


async def _find_by_email(db: AsyncSession, email: str) -> UserModel | None:
    result = await db.execute(select(UserModel).where(UserModel.email == email))
    return result.scalar_one_or_none()


class UserService:
    async def register(self, email: str, password: str, db: AsyncSession) -> UserModel:
        # users.email UNIQUE still guards the race between check and insert
        if await _find_by_email(db, email) is not None:
            raise EmailExistsError()

        user = UserModel(
            email=email,
            password_hash=hash_password(password),
            role=Role.USER.value,
            is_active=True,
        )
        db.add(user)
        await db.flush()
        await db.refresh(user)  # server defaults: id, created_at
        logger.info("Registered user %s", user.id)
        return user

    async def login(
        self, email: str, password: str, db: AsyncSession
    ) -> tuple[UserModel, str, str]:
        """Return (user, access_token, refresh_token).

        Unknown email and wrong password are indistinguishable to the caller.
        """
        user = await _find_by_email(db, email)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        if not user.is_active:
            raise AccountDisabledError()
        return user, create_access_token(user.id, user.role), create_refresh_token(user.id)

    async def refresh(self, refresh_token: str, db: AsyncSession) -> str:
        claims = decode_token(refresh_token, expected_type="refresh")
        user = await self.get_active_user(int(claims["sub"]), db)
        if user is None:
            raise InvalidRefreshTokenError()
        return create_access_token(user.id, user.role)

    async def get_active_user(self, user_id: int, db: AsyncSession) -> UserModel | None:
        """The user row, or None if it no longer exists. A frozen account raises."""
        user = await db.get(UserModel, user_id)
        if user is not None and not user.is_active:
            raise AccountDisabledError()
        return user
