"""Unit tests for JWT verification and the get_current_user_id dependency."""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from config.settings import settings
from src.lt_common.errors import InvalidCredentialsError
from src.lt_gateway.auth.dependencies import get_current_user_id
from src.lt_gateway.auth.jwt_handler import create_access_token, decode_token


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def test_access_token_contains_correct_claims() -> None:
    token = create_access_token(42)
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "42"
    assert payload["type"] == "access"


def test_decode_valid_access_token() -> None:
    payload = decode_token(create_access_token(42))
    assert payload["sub"] == "42"


def test_expired_token_raises_credentials_error() -> None:
    token = create_access_token(42, expires_in=timedelta(seconds=-1))
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_tampered_token_raises_error() -> None:
    token = create_access_token(42)
    with pytest.raises(InvalidCredentialsError):
        decode_token(token[:-4] + "xxxx")


def test_non_access_token_rejected() -> None:
    token = jwt.encode(
        {"sub": "42", "type": "refresh"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM
    )
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_other_secret_rejected() -> None:
    token = jwt.encode({"sub": "42", "type": "access"}, "another-secret", algorithm="HS256")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


class TestGetCurrentUserId:
    async def test_returns_int_subject(self) -> None:
        assert await get_current_user_id(_bearer(create_access_token(7))) == 7

    async def test_missing_header(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user_id(None)
        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    async def test_invalid_token(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user_id(_bearer("not-a-jwt"))
        assert exc_info.value.status_code == 401

    async def test_non_numeric_subject(self) -> None:
        token = jwt.encode(
            {"sub": "agent-7", "type": "access"},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
        with pytest.raises(HTTPException):
            await get_current_user_id(_bearer(token))
