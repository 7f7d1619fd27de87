"""Request/response bodies for the identity endpoints.

Routers wrap every response model in ApiResponse.
"""

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

from config.settings import settings

# (pattern, what is missing): a password must match all of them
_PASSWORD_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "an uppercase letter"),
    (re.compile(r"[a-z]"), "a lowercase letter"),
    (re.compile(r"\d"), "a digit"),
)


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator("password")
    @classmethod
    def check_password_rules(cls, v: str) -> str:
        missing = [label for pattern, label in _PASSWORD_RULES if not pattern.search(v)]
        if missing:
            raise ValueError(f"Password needs {', '.join(missing)}")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class UserInfo(BaseModel):
    user_id: int
    email: str
    role: str


class RegisterResponse(UserInfo):
    created_at: str


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = settings.JWT_EXPIRE_MINUTES * 60
    user: UserInfo


class RefreshResponse(BaseModel):
    access_token: str
    expires_in: int = settings.JWT_EXPIRE_MINUTES * 60
