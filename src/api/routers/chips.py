"""Chip (bookmark) CRUD endpoints."""
from fastapi import APIRouter, Depends, Query
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
from schemas.chip import ChipCreate, ChipResponse, ChipUpdate
from schemas.common import DataResponse, MessageResponse
from services import chip_service
from services.image_storage import ImageStorage

router = APIRouter(prefix="/chip", tags=["chip"])


@router.get("", response_model=DataResponse[list[ChipResponse]])
async def list_chips(
    folder_id: int | None = Query(default=None, description="Only chips in this folder"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> DataResponse[list[ChipResponse]]:
    """List the caller's chips."""
    chips = await chip_service.list_chips(db, current_user.id, folder_id)
    return DataResponse(data=[ChipResponse.model_validate(c) for c in chips])


@router.get("/{chip_id}", response_model=DataResponse[ChipResponse])
async def get_chip(
    chip_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> DataResponse[ChipResponse]:
    """Get a single chip."""
    chip = await chip_service.get_chip(db, current_user.id, chip_id)
    return DataResponse(data=ChipResponse.model_validate(chip))


@router.post("", response_model=DataResponse[ChipResponse])
async def create_chip(
    current_user: AuthenticatedUser = Depends(get_current_user),
    body: ValidatedBody[ChipCreate] = Depends(BodyValidator(ChipCreate)),
    db: AsyncSession = Depends(get_async_session),
    storage: ImageStorage = Depends(get_image_storage),
    settings: Settings = Depends(get_app_settings),
) -> DataResponse[ChipResponse]:
    """Create a chip in one of the caller's folders."""
    chip = await chip_service.create_chip(
        db, storage, current_user, body.data, settings, upload=body.image,
    )
    return DataResponse(data=ChipResponse.model_validate(chip))


@router.patch("/{chip_id}", response_model=DataResponse[ChipResponse])
async def update_chip(
    chip_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    body: ValidatedBody[ChipUpdate] = Depends(BodyValidator(ChipUpdate)),
    db: AsyncSession = Depends(get_async_session),
    storage: ImageStorage = Depends(get_image_storage),
    settings: Settings = Depends(get_app_settings),
) -> DataResponse[ChipResponse]:
    """Rename a chip; optionally move it or change its URL or image."""
    chip = await chip_service.update_chip(
        db, storage, current_user, chip_id, body.data, settings, upload=body.image,
    )
    return DataResponse(data=ChipResponse.model_validate(chip))


@router.delete("/{chip_id}", response_model=MessageResponse)
async def delete_chip(
    chip_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> MessageResponse:
    """Soft-delete a chip."""
    await chip_service.delete_chip(db, current_user, chip_id)
    return MessageResponse(message="Chip deleted successfully.")
