"""Tests for the bearer-token authentication guard."""
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from core.auth import AuthenticatedUser, get_current_user, token_claims, user_from_claims
from core.config import Settings
from core.security import create_token
from models.user import User, UserRole
from services.exceptions import UnauthorizedError


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def _user(role: UserRole = UserRole.USER) -> User:
    return User(id=7, username="alice", email="alice@example.com", role=role)


async def test__get_current_user__valid_token(settings: Settings) -> None:
    token = create_token(token_claims(_user()), "access", settings)

    current = await get_current_user(credentials=_credentials(token), settings=settings)

    assert current == AuthenticatedUser(
        id=7, username="alice", email="alice@example.com", role=UserRole.USER,
    )
    assert current.is_admin is False


async def test__get_current_user__admin_role(settings: Settings) -> None:
    token = create_token(token_claims(_user(UserRole.ADMIN)), "access", settings)
    current = await get_current_user(credentials=_credentials(token), settings=settings)
    assert current.is_admin is True


async def test__get_current_user__missing_header(settings: Settings) -> None:
    with pytest.raises(UnauthorizedError, match="Not authenticated."):
        await get_current_user(credentials=None, settings=settings)


async def test__get_current_user__expired_token(settings: Settings) -> None:
    issued = datetime.now(UTC) - timedelta(days=1)
    token = create_token(token_claims(_user()), "access", settings, now=issued)

    with pytest.raises(UnauthorizedError, match="Token has expired."):
        await get_current_user(credentials=_credentials(token), settings=settings)


async def test__get_current_user__refresh_token_rejected(settings: Settings) -> None:
    token = create_token(token_claims(_user()), "refresh", settings)
    with pytest.raises(UnauthorizedError, match="Invalid token."):
        await get_current_user(credentials=_credentials(token), settings=settings)


def test__user_from_claims__missing_claims() -> None:
    with pytest.raises(UnauthorizedError):
        user_from_claims({"sub": "1"})


def test__user_from_claims__non_numeric_subject() -> None:
    with pytest.raises(UnauthorizedError):
        user_from_claims({"sub": "abc", "username": "a", "email": "a@example.com"})


def test__token_claims__subject_is_string() -> None:
    claims = token_claims(_user())
    assert claims == {
        "sub": "7",
        "username": "alice",
        "email": "alice@example.com",
        "role": "user",
    }
