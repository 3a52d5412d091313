"""Registration, login and token refresh endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_app_settings, get_async_session
from api.validation import BodyValidator, ValidatedBody
from core.config import Settings
from models.user import User
from schemas.common import DataResponse
from schemas.user import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPair,
    UserResponse,
)
from services import user_service

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: User, settings: Settings) -> AuthResponse:
    tokens = user_service.issue_tokens(user, settings)
    return AuthResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=DataResponse[AuthResponse])
async def register(
    body: ValidatedBody[RegisterRequest] = Depends(BodyValidator(RegisterRequest)),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_app_settings),
) -> DataResponse[AuthResponse]:
    """Create an account and sign the caller in."""
    user = await user_service.register_user(db, body.data, settings)
    return DataResponse(data=_auth_response(user, settings))


@router.post("/login", response_model=DataResponse[AuthResponse])
async def login(
    body: ValidatedBody[LoginRequest] = Depends(BodyValidator(LoginRequest)),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_app_settings),
) -> DataResponse[AuthResponse]:
    """Exchange email and password for an access/refresh token pair."""
    user = await user_service.authenticate(db, body.data.email, body.data.password)
    return DataResponse(data=_auth_response(user, settings))


@router.post("/refresh", response_model=DataResponse[TokenPair])
async def refresh(
    body: ValidatedBody[RefreshRequest] = Depends(BodyValidator(RefreshRequest)),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_app_settings),
) -> DataResponse[TokenPair]:
    """Exchange a refresh token for a new token pair."""
    tokens = await user_service.refresh_tokens(db, body.data.refresh_token, settings)
    return DataResponse(data=tokens)
