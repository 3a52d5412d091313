"""Bearer-token authentication guard."""
import logging
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import Settings, get_app_settings
from core.security import TokenError, decode_token
from models.user import User, UserRole
from services.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


# HTTP Bearer token scheme; missing headers are reported by us, not FastAPI
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity decoded from a verified access token."""

    id: int
    username: str
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        """True for administrators."""
        return self.role == UserRole.ADMIN


def token_claims(user: User) -> dict:
    """Claims embedded in access and refresh tokens for a user."""
    return {
        "sub": str(user.id),
        "username": user.username,
        "email": user.email,
        "role": user.role.value,
    }


def user_from_claims(payload: dict) -> AuthenticatedUser:
    """
    Build the request identity from verified token claims.

    Raises:
        UnauthorizedError: If required claims are missing or malformed.
    """
    try:
        return AuthenticatedUser(
            id=int(payload["sub"]),
            username=payload["username"],
            email=payload["email"],
            role=UserRole(payload.get("role", UserRole.USER.value)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise UnauthorizedError("Invalid token.") from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_app_settings),
) -> AuthenticatedUser:
    """
    Dependency that verifies the bearer token and returns the caller's identity.

    The identity comes entirely from the signed token, so rejected requests
    never reach the database.
    """
    if credentials is None:
        raise UnauthorizedError("Not authenticated.")

    try:
        payload = decode_token(credentials.credentials, "access", settings)
    except TokenError as e:
        logger.warning("Access token rejected: %s", e)
        raise UnauthorizedError(str(e)) from e

    return user_from_claims(payload)
