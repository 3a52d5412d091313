"""Folder CRUD and sorting endpoints."""
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
from schemas.common import DataResponse, MessageResponse
from schemas.folder import (
    FolderCreate,
    FolderCreated,
    FolderDetailResponse,
    FolderResponse,
    FolderUpdate,
)
from services import folder_service
from services.image_storage import ImageStorage

router = APIRouter(prefix="/folder", tags=["folder"])


@router.get("", response_model=DataResponse[list[FolderResponse]])
async def list_folders(
    sort: str | None = Query(default=None, description="Sort field: 'date' or 'alphabet'"),
    order: str | None = Query(default=None, description="Sort order: 'asc' (default) or 'desc'"),
    folder_id: int | None = Query(default=None, description="Parent folder (omit for root)"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> DataResponse[list[FolderResponse]]:
    """
    List folders.

    - Without ``sort``: the root folders, or the children of ``folder_id``
    - With ``sort``: the same level sorted by ``sort`` in ``order``

    ``order`` only applies to a sort, so giving it without ``sort`` is a 400.
    """
    if sort is not None or order is not None:
        folders = await folder_service.sort_folders(
            db, current_user.id, folder_id, sort, order,
        )
    elif folder_id is not None:
        folders = await folder_service.list_child_folders(db, current_user.id, folder_id)
    else:
        folders = await folder_service.list_root_folders(db, current_user.id)
    return DataResponse(data=[FolderResponse.model_validate(f) for f in folders])


@router.get("/{folder_id}", response_model=DataResponse[FolderDetailResponse])
async def get_folder(
    folder_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> DataResponse[FolderDetailResponse]:
    """Get a folder with its direct subfolders."""
    folder = await folder_service.get_folder(db, current_user.id, folder_id)
    children = await folder_service.list_child_folders(db, current_user.id, folder.id)
    detail = FolderDetailResponse(
        **FolderResponse.model_validate(folder).model_dump(),
        folders=[FolderResponse.model_validate(c) for c in children],
    )
    return DataResponse(data=detail)


@router.post("", response_model=DataResponse[FolderCreated])
async def create_folder(
    current_user: AuthenticatedUser = Depends(get_current_user),
    body: ValidatedBody[FolderCreate] = Depends(BodyValidator(FolderCreate)),
    db: AsyncSession = Depends(get_async_session),
    storage: ImageStorage = Depends(get_image_storage),
    settings: Settings = Depends(get_app_settings),
) -> DataResponse[FolderCreated]:
    """Create a folder, optionally nested and with an image (``litmark_image``)."""
    folder_id = await folder_service.create_folder(
        db, storage, current_user, body.data, settings, upload=body.image,
    )
    return DataResponse(data=FolderCreated(folder_Id=folder_id))


@router.patch("/{folder_id}", response_model=DataResponse[FolderResponse])
async def update_folder(
    folder_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    body: ValidatedBody[FolderUpdate] = Depends(BodyValidator(FolderUpdate)),
    db: AsyncSession = Depends(get_async_session),
    storage: ImageStorage = Depends(get_image_storage),
    settings: Settings = Depends(get_app_settings),
) -> DataResponse[FolderResponse]:
    """Rename a folder and optionally replace its image."""
    folder = await folder_service.update_folder(
        db, storage, current_user, folder_id, body.data, settings, upload=body.image,
    )
    return DataResponse(data=FolderResponse.model_validate(folder))


@router.delete("/{folder_id}", response_model=MessageResponse)
async def delete_folder(
    folder_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> MessageResponse:
    """Soft-delete a folder, its subfolders and their chips."""
    await folder_service.delete_folder(db, current_user, folder_id)
    return MessageResponse(message="Folder deleted successfully.")
