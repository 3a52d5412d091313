"""Service layer for chip (bookmark) CRUD operations."""
import logging

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AuthenticatedUser
from core.config import Settings
from models.chip import Chip
from models.image import ImageType
from repositories.chip_repository import chip_repository
from repositories.folder_repository import folder_repository
from schemas.chip import ChipCreate, ChipUpdate
from services import image_service
from services.exceptions import InvalidArgumentError, NotFoundError
from services.image_storage import ImageStorage
from services.utils import validate_id

logger = logging.getLogger(__name__)

CHIP_NOT_FOUND = "Chip does not exist."
FOLDER_REQUIRED = "Name and folder ID are required."
FOLDER_NOT_AVAILABLE = "Folder does not exist."
NAME_REQUIRED = "Name is required."


async def _require_folder(db: AsyncSession, user_id: int, folder_id: int) -> None:
    """Chips may only point at an active folder of the same user."""
    folder = await folder_repository.get(db, folder_id, user_id=user_id)
    if folder is None:
        raise InvalidArgumentError(FOLDER_NOT_AVAILABLE)


async def list_chips(
    db: AsyncSession,
    user_id: int,
    folder_id: int | None = None,
) -> list[Chip]:
    """
    List the user's chips, optionally only those in one folder.

    Raises:
        InvalidArgumentError: If ``folder_id`` is given but not a positive integer.
    """
    if folder_id is not None:
        validate_id(folder_id)
    return await chip_repository.list_for_user(db, user_id, folder_id)


async def get_chip(db: AsyncSession, user_id: int, chip_id: int) -> Chip:
    """
    Get one of the user's chips.

    Raises:
        NotFoundError: If the chip is missing, deleted, or not the user's.
    """
    validate_id(chip_id)
    chip = await chip_repository.get(db, chip_id, user_id=user_id)
    if chip is None:
        raise NotFoundError(CHIP_NOT_FOUND)
    return chip


async def create_chip(
    db: AsyncSession,
    storage: ImageStorage,
    user: AuthenticatedUser,
    data: ChipCreate,
    settings: Settings,
    upload: UploadFile | None = None,
) -> Chip:
    """
    Create a chip inside one of the user's folders.

    Raises:
        InvalidArgumentError: If the folder does not exist or has been deleted.
        StorageUploadError: If the image upload fails.
    """
    if not data.name or not data.folder_id:
        raise InvalidArgumentError(FOLDER_REQUIRED)
    await _require_folder(db, user.id, data.folder_id)

    image_id = None
    if upload is not None:
        image = await image_service.upload_image(
            db, storage, upload, ImageType.CHIP, settings,
            owner_id=user.id, username=user.username,
        )
        image_id = image.id

    chip = await chip_repository.add(
        db,
        Chip(
            name=data.name,
            url=str(data.url) if data.url is not None else None,
            folder_id=data.folder_id,
            user_id=user.id,
            image_id=image_id,
            created_by=user.username,
            updated_by=user.username,
        ),
    )
    logger.info("User %s created chip %s in folder %s", user.id, chip.id, chip.folder_id)
    return chip


async def update_chip(
    db: AsyncSession,
    storage: ImageStorage,
    user: AuthenticatedUser,
    chip_id: int,
    data: ChipUpdate,
    settings: Settings,
    upload: UploadFile | None = None,
) -> Chip:
    """
    Rename a chip; optionally change its URL, image, or folder.

    Fields not supplied keep their current values.

    Raises:
        InvalidArgumentError: If ``name`` is missing/blank or the target folder is unavailable.
        NotFoundError: If the chip does not exist.
    """
    name = (data.name or "").strip()
    if not name:
        raise InvalidArgumentError(NAME_REQUIRED)

    chip = await get_chip(db, user.id, chip_id)

    changes: dict = {"name": name, "updated_by": user.username}
    if data.folder_id is not None and data.folder_id != chip.folder_id:
        await _require_folder(db, user.id, data.folder_id)
        changes["folder_id"] = data.folder_id
    if data.url is not None:
        changes["url"] = str(data.url)
    if upload is not None:
        image = await image_service.upload_image(
            db, storage, upload, ImageType.CHIP, settings,
            owner_id=user.id, username=user.username,
        )
        changes["image_id"] = image.id

    return await chip_repository.save(db, chip, **changes)


async def delete_chip(db: AsyncSession, user: AuthenticatedUser, chip_id: int) -> None:
    """
    Soft-delete a chip.

    Raises:
        NotFoundError: If the chip does not exist.
    """
    chip = await get_chip(db, user.id, chip_id)
    await chip_repository.soft_delete(db, chip, user.username)
    logger.info("User %s deleted chip %s", user.id, chip.id)
