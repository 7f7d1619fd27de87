"""Unit tests for JWT handler."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from jose import jwt

from src.mp_common.errors import InvalidCredentialsError, InvalidRefreshTokenError
from src.mp_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)


def test_access_token_contains_correct_claims() -> None:
    token = create_access_token(42, "admin")
    # Decode without verification to inspect claims
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "42"
    assert payload["role"] == "admin"
    assert payload["type"] == "access"


def test_refresh_token_has_no_role() -> None:
    token = create_refresh_token(42)
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "42"
    assert payload["type"] == "refresh"
    assert "role" not in payload


def test_decode_valid_access_token() -> None:
    token = create_access_token(7, "user")
    payload = decode_token(token, expected_type="access")
    assert payload["sub"] == "7"


def test_access_token_used_as_refresh_raises_error() -> None:
    """Using access token where refresh is expected must fail."""
    token = create_access_token(7, "user")
    with pytest.raises(InvalidRefreshTokenError):
        decode_token(token, expected_type="refresh")


def test_refresh_token_used_as_access_raises_error() -> None:
    token = create_refresh_token(7)
    with pytest.raises(InvalidCredentialsError):
        decode_token(token, expected_type="access")


def test_expired_access_token_raises_credentials_error() -> None:
    with patch(
        "src.mp_gateway.auth.jwt_handler._ACCESS_EXPIRE",
        timedelta(seconds=-1),
    ):
        token = create_access_token(7, "user")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token, expected_type="access")


def test_tampered_token_raises_error() -> None:
    token = create_access_token(7, "user")
    tampered = token[:-4] + ("aaaa" if not token.endswith("aaaa") else "bbbb")
    with pytest.raises(InvalidCredentialsError):
        decode_token(tampered, expected_type="access")


def test_token_signed_with_other_secret_rejected() -> None:
    forged = jwt.encode({"sub": "1", "role": "admin", "type": "access"}, "guess", algorithm="HS256")
    with pytest.raises(InvalidCredentialsError):
        decode_token(forged, expected_type="access")
