"""Password hashing and JWT helpers."""
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any, Literal

import jwt
from passlib.context import CryptContext

from core.config import Settings

TOKEN_ALGORITHM = "HS256"

TokenType = Literal["access", "refresh"]


class TokenError(Exception):
    """Raised when a token cannot be decoded or fails validation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


@lru_cache
def _password_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a plaintext password with bcrypt."""
    return _password_context(rounds).hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored hash."""
    # rounds only matter for hashing; verification reads them from the hash
    return _password_context(10).verify(password, hashed_password)


def _secret_for(token_type: TokenType, settings: Settings) -> str:
    if token_type == "access":
        return settings.access_token_secret
    return settings.refresh_token_secret


def _lifetime_for(token_type: TokenType, settings: Settings) -> timedelta:
    if token_type == "access":
        return settings.access_token_lifetime
    return settings.refresh_token_lifetime


def create_token(
    claims: dict[str, Any],
    token_type: TokenType,
    settings: Settings,
    now: datetime | None = None,
) -> str:
    """
    Sign a JWT carrying the given claims.

    Args:
        claims: Payload claims. ``sub`` must be a string.
        token_type: "access" or "refresh"; selects secret and lifetime.
        settings: Application settings.
        now: Issue time override (used by tests to mint expired tokens).

    Returns:
        The encoded token.
    """
    issued_at = now or datetime.now(UTC)
    payload = {
        **claims,
        "type": token_type,
        "iat": issued_at,
        "exp": issued_at + _lifetime_for(token_type, settings),
    }
    return jwt.encode(payload, _secret_for(token_type, settings), algorithm=TOKEN_ALGORITHM)


def decode_token(token: str, token_type: TokenType, settings: Settings) -> dict[str, Any]:
    """
    Verify signature, expiry and type of a JWT and return its claims.

    Raises:
        TokenError: If the token is expired, malformed, signed with another
            secret, or of the wrong type.
    """
    try:
        payload = jwt.decode(
            token,
            _secret_for(token_type, settings),
            algorithms=[TOKEN_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenError("Token has expired.") from e
    except jwt.PyJWTError as e:
        raise TokenError("Invalid token.") from e

    if payload.get("type") != token_type:
        raise TokenError("Invalid token.")
    return payload
