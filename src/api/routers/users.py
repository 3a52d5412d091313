"""User account endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import (
    get_app_settings,
    get_async_session,
    get_current_user,
    get_image_storage,
)
from api.validation import BodyValidator, ValidatedBody
from core.auth import AuthenticatedUser
from core.config import Settings
from schemas.common import DataResponse, MessageResponse
from schemas.user import UserCreate, UserResponse, UserUpdate
from services import user_service
from services.image_storage import ImageStorage

router = APIRouter(prefix="/user", tags=["user"])


@router.post("", response_model=DataResponse[UserResponse])
async def create_user(
    current_user: AuthenticatedUser = Depends(get_current_user),
    body: ValidatedBody[UserCreate] = Depends(BodyValidator(UserCreate)),
    db: AsyncSession = Depends(get_async_session),
    storage: ImageStorage = Depends(get_image_storage),
    settings: Settings = Depends(get_app_settings),
) -> DataResponse[UserResponse]:
    """Create a user, optionally with a profile image (``litmark_image``)."""
    user = await user_service.create_user(
        db, storage, current_user, body.data, settings, upload=body.image,
    )
    return DataResponse(data=UserResponse.model_validate(user))


@router.get("/{user_id}", response_model=DataResponse[UserResponse])
async def get_user(
    user_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> DataResponse[UserResponse]:
    """Get a user; regular users can only read their own account."""
    user = await user_service.get_user(db, current_user, user_id)
    return DataResponse(data=UserResponse.model_validate(user))


@router.patch("/{user_id}", response_model=DataResponse[UserResponse])
async def update_user(
    user_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    body: ValidatedBody[UserUpdate] = Depends(BodyValidator(UserUpdate)),
    db: AsyncSession = Depends(get_async_session),
    storage: ImageStorage = Depends(get_image_storage),
    settings: Settings = Depends(get_app_settings),
) -> DataResponse[UserResponse]:
    """Update username, email, password or profile image."""
    user = await user_service.update_user(
        db, storage, current_user, user_id, body.data, settings, upload=body.image,
    )
    return DataResponse(data=UserResponse.model_validate(user))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> MessageResponse:
    """Soft-delete a user."""
    await user_service.delete_user(db, current_user, user_id)
    return MessageResponse(message="User deleted successfully.")
