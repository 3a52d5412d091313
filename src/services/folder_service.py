"""Service layer for folder CRUD, nesting and sorting."""
import logging

from fastapi import UploadFile
from sqlalchemy import ColumnElement, func
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AuthenticatedUser
from core.config import Settings
from models.chip import Chip
from models.folder import Folder
from models.image import ImageType
from repositories.chip_repository import chip_repository
from repositories.folder_repository import folder_repository
from schemas.folder import FolderCreate, FolderUpdate
from services import image_service
from services.exceptions import InvalidArgumentError, NotFoundError
from services.image_storage import ImageStorage
from services.utils import validate_id

logger = logging.getLogger(__name__)

FOLDER_NOT_FOUND = "Folder does not exist."
PARENT_NOT_FOUND = "Parent folder does not exist."
NAME_REQUIRED = "Name is required."
SORT_INVALID = "Sort must be one of: date, alphabet."
ORDER_INVALID = "Order must be one of: asc, desc."

# Allow-list of sortable fields and the columns they map to
SORT_FIELDS: dict[str, list[ColumnElement]] = {
    "date": [Folder.created_at],
    "alphabet": [func.lower(Folder.name), Folder.name],
}
SORT_ORDERS = ("asc", "desc")


async def list_root_folders(db: AsyncSession, user_id: int) -> list[Folder]:
    """List the user's top-level folders (an empty list is a valid result)."""
    return await folder_repository.list_children(db, user_id, None)


async def list_child_folders(db: AsyncSession, user_id: int, parent_id: int) -> list[Folder]:
    """
    List folders directly inside ``parent_id``.

    Raises:
        InvalidArgumentError: If ``parent_id`` is not a positive integer.
    """
    validate_id(parent_id)
    return await folder_repository.list_children(db, user_id, parent_id)


async def get_folder(db: AsyncSession, user_id: int, folder_id: int) -> Folder:
    """
    Get one of the user's folders.

    Raises:
        InvalidArgumentError: If ``folder_id`` is not a positive integer.
        NotFoundError: If the folder is missing, deleted, or not the user's.
    """
    validate_id(folder_id)
    folder = await folder_repository.get(db, folder_id, user_id=user_id)
    if folder is None:
        raise NotFoundError(FOLDER_NOT_FOUND)
    return folder


async def create_folder(
    db: AsyncSession,
    storage: ImageStorage,
    user: AuthenticatedUser,
    data: FolderCreate,
    settings: Settings,
    upload: UploadFile | None = None,
) -> int:
    """
    Create a folder and return its id.

    An uploaded image is stored and attached; without one the shared folder
    placeholder image is assigned.
    A parent, when given, must be an active folder of the same user; because
    the parent always exists first, the hierarchy cannot form cycles.

    Raises:
        InvalidArgumentError: If the parent folder does not exist or the upload is invalid.
        StorageUploadError: If the image upload fails.
    """
    if data.folder_id is not None:
        parent = await folder_repository.get(db, data.folder_id, user_id=user.id)
        if parent is None:
            raise InvalidArgumentError(PARENT_NOT_FOUND)

    if upload is not None:
        image = await image_service.upload_image(
            db, storage, upload, ImageType.FOLDER, settings,
            owner_id=user.id, username=user.username,
        )
    else:
        image = await image_service.get_or_create_default_image(
            db, ImageType.FOLDER, user.username, settings,
        )

    folder = await folder_repository.add(
        db,
        Folder(
            name=data.name,
            user_id=user.id,
            folder_id=data.folder_id,
            image_id=image.id,
            created_by=user.username,
            updated_by=user.username,
        ),
    )
    logger.info("User %s created folder %s", user.id, folder.id)
    return folder.id


async def update_folder(
    db: AsyncSession,
    storage: ImageStorage,
    user: AuthenticatedUser,
    folder_id: int,
    data: FolderUpdate,
    settings: Settings,
    upload: UploadFile | None = None,
) -> Folder:
    """
    Rename a folder and optionally replace its image.

    Only ``name``, ``image_id`` and ``updated_by`` change; owner and parent are kept.

    Raises:
        InvalidArgumentError: If ``name`` is missing or blank.
        NotFoundError: If the folder does not exist.
    """
    name = (data.name or "").strip()
    if not name:
        raise InvalidArgumentError(NAME_REQUIRED)

    folder = await get_folder(db, user.id, folder_id)

    image_id = folder.image_id
    if upload is not None:
        image = await image_service.upload_image(
            db, storage, upload, ImageType.FOLDER, settings,
            owner_id=user.id, username=user.username,
        )
        image_id = image.id

    return await folder_repository.save(
        db,
        folder,
        name=name,
        image_id=image_id,
        updated_by=user.username,
    )


async def delete_folder(db: AsyncSession, user: AuthenticatedUser, folder_id: int) -> None:
    """
    Soft-delete a folder together with its subfolders and their chips.

    Raises:
        NotFoundError: If the folder does not exist.
    """
    folder = await get_folder(db, user.id, folder_id)
    descendants = await folder_repository.descendant_ids(db, user.id, folder.id)
    subtree = [folder.id, *descendants]

    await folder_repository.soft_delete(db, folder, user.username)
    await folder_repository.soft_delete_where(db, Folder.id, descendants, user.username)
    chips = await chip_repository.soft_delete_where(db, Chip.folder_id, subtree, user.username)
    logger.info(
        "User %s deleted folder %s (%s subfolders, %s chips)",
        user.id, folder.id, len(descendants), chips,
    )


async def sort_folders(
    db: AsyncSession,
    user_id: int,
    parent_id: int | None,
    field: str | None,
    order: str | None = "asc",
) -> list[Folder]:
    """
    List folders under ``parent_id`` (None = root) sorted by an allow-listed field.

    Args:
        field: "date" (creation time) or "alphabet" (name, case-insensitive).
        order: "asc" (default) or "desc".

    Raises:
        InvalidArgumentError: For an unknown field or order, or a bad parent id.
    """
    if field not in SORT_FIELDS:
        raise InvalidArgumentError(SORT_INVALID)
    order = order or "asc"
    if order not in SORT_ORDERS:
        raise InvalidArgumentError(ORDER_INVALID)
    if parent_id is not None:
        validate_id(parent_id)

    return await folder_repository.list_sorted(
        db, user_id, parent_id, SORT_FIELDS[field], order,
    )
