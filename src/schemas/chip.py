"""Pydantic schemas for chip endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from schemas.common import NamedSchema


class ChipCreate(NamedSchema):
    """Schema for creating a chip inside a folder."""

    name: str = Field(max_length=255)
    folder_id: int = Field(gt=0)
    url: HttpUrl | None = None


class ChipUpdate(BaseModel):
    """Schema for updating a chip. Supplying ``folder_id`` moves it to that folder."""

    name: str | None = Field(default=None, max_length=255)
    folder_id: int | None = Field(default=None, gt=0)
    url: HttpUrl | None = None


class ChipResponse(BaseModel):
    """Chip as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    url: str | None
    folder_id: int
    user_id: int
    image_id: int | None
    image_url: str | None
    created_at: datetime
    updated_at: datetime
