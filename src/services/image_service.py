"""Service layer for image uploads and placeholder images."""
import logging
import uuid
from pathlib import PurePath

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from models.image import Image, ImageType
from repositories.image_repository import image_repository
from services.exceptions import InvalidArgumentError, NotFoundError
from services.image_storage import ImageStorage

logger = logging.getLogger(__name__)

IMAGE_NOT_FOUND = "Image does not exist."
IMAGE_REQUIRED = "Image file is required."
INVALID_IMAGE_TYPE = "Uploaded file must be an image."

# Names of the shared placeholder rows, one per entity kind
PLACEHOLDER_NAMES = {
    ImageType.USER: "default-user-image",
    ImageType.FOLDER: "default-folder-image",
    ImageType.CHIP: "default-chip-image",
}


def _placeholder_url(image_type: ImageType, settings: Settings) -> str:
    if image_type == ImageType.USER:
        return settings.default_user_image_url
    return settings.default_folder_image_url


def _stored_name(filename: str | None) -> str:
    """Unique name for an uploaded file, keeping its extension."""
    suffix = PurePath(filename).suffix.lower() if filename else ""
    return f"{uuid.uuid4()}{suffix}"


async def get_or_create_default_image(
    db: AsyncSession,
    image_type: ImageType,
    username: str,
    settings: Settings,
) -> Image:
    """
    Return the shared placeholder image for an entity kind, creating it on first use.

    Args:
        db: Database session.
        image_type: Kind of entity the placeholder is for.
        username: Recorded as creator if the row has to be created.
        settings: Supplies the placeholder URL.
    """
    name = PLACEHOLDER_NAMES[image_type]
    image = await image_repository.get_placeholder(db, image_type, name)
    if image is not None:
        return image

    logger.info("Creating placeholder image for %s", image_type.value)
    return await image_repository.add(
        db,
        Image(
            url=_placeholder_url(image_type, settings),
            type=image_type,
            name=name,
            user_id=None,
            created_by=username,
            updated_by=username,
        ),
    )


async def upload_image(
    db: AsyncSession,
    storage: ImageStorage,
    upload: UploadFile | None,
    image_type: ImageType,
    settings: Settings,
    *,
    owner_id: int,
    username: str,
) -> Image:
    """
    Upload a file to image storage and record it.

    The remote upload happens before the row is inserted and is not part of the
    database transaction: if the insert fails the uploaded file is orphaned.

    Raises:
        InvalidArgumentError: If no file was sent, it is not an image, or it is too large.
        StorageUploadError: If the storage provider fails.
    """
    if upload is None:
        raise InvalidArgumentError(IMAGE_REQUIRED)

    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise InvalidArgumentError(INVALID_IMAGE_TYPE)

    content = await upload.read()
    if not content:
        raise InvalidArgumentError(IMAGE_REQUIRED)
    if len(content) > settings.max_image_size_bytes:
        raise InvalidArgumentError(
            f"Image exceeds maximum size of {settings.max_image_size_bytes:,} bytes.",
        )

    name = _stored_name(upload.filename)
    url = await storage.upload(name, content, content_type)

    image = await image_repository.add(
        db,
        Image(
            url=url,
            type=image_type,
            name=name,
            user_id=owner_id,
            created_by=username,
            updated_by=username,
        ),
    )
    logger.info("User %s uploaded %s image %s", owner_id, image_type.value, image.id)
    return image


async def list_images(db: AsyncSession, user_id: int) -> list[Image]:
    """List a user's uploaded images."""
    return await image_repository.list_for_user(db, user_id)


async def get_image(db: AsyncSession, user_id: int, image_id: int) -> Image:
    """
    Get an image owned by the user, or a shared placeholder.

    Raises:
        NotFoundError: If the image is missing, deleted, or belongs to someone else.
    """
    image = await image_repository.get_visible(db, image_id, user_id)
    if image is None:
        raise NotFoundError(IMAGE_NOT_FOUND)
    return image
