"""Image upload and lookup endpoints."""
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
from schemas.common import DataResponse
from schemas.image import ImageCreate, ImageResponse
from services import image_service
from services.image_storage import ImageStorage

router = APIRouter(prefix="/image", tags=["image"])


@router.get("", response_model=DataResponse[list[ImageResponse]])
async def list_images(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> DataResponse[list[ImageResponse]]:
    """List images uploaded by the caller."""
    images = await image_service.list_images(db, current_user.id)
    return DataResponse(data=[ImageResponse.model_validate(i) for i in images])


@router.get("/{image_id}", response_model=DataResponse[ImageResponse])
async def get_image(
    image_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> DataResponse[ImageResponse]:
    """Get one of the caller's images or a shared placeholder."""
    image = await image_service.get_image(db, current_user.id, image_id)
    return DataResponse(data=ImageResponse.model_validate(image))


@router.post("", response_model=DataResponse[ImageResponse])
async def upload_image(
    current_user: AuthenticatedUser = Depends(get_current_user),
    body: ValidatedBody[ImageCreate] = Depends(BodyValidator(ImageCreate)),
    db: AsyncSession = Depends(get_async_session),
    storage: ImageStorage = Depends(get_image_storage),
    settings: Settings = Depends(get_app_settings),
) -> DataResponse[ImageResponse]:
    """Upload an image (multipart field ``litmark_image``)."""
    image = await image_service.upload_image(
        db, storage, body.image, body.data.type, settings,
        owner_id=current_user.id, username=current_user.username,
    )
    return DataResponse(data=ImageResponse.model_validate(image))
