"""Pydantic schemas for folder endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from schemas.common import NamedSchema


class FolderCreate(NamedSchema):
    """Schema for creating a folder. ``folder_id`` is the parent (omit for a root folder)."""

    name: str = Field(max_length=255)
    folder_id: int | None = Field(default=None, gt=0)


class FolderUpdate(BaseModel):
    """
    Schema for updating a folder.

    ``name`` is checked by the service so an empty value is reported as
    "Name is required." rather than a generic validation message.
    """

    name: str | None = Field(default=None, max_length=255)


class FolderCreated(BaseModel):
    """Id of a newly created folder."""

    folder_Id: int  # noqa: N815


class FolderResponse(BaseModel):
    """Folder as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    image_id: int | None
    image_url: str | None
    user_id: int
    folder_id: int | None
    created_at: datetime
    updated_at: datetime


class FolderDetailResponse(FolderResponse):
    """Folder with its direct child folders."""

    folders: list[FolderResponse] = []
