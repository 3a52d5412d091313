"""Pydantic schemas for image endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from models.image import ImageType


class ImageCreate(BaseModel):
    """Form fields accompanying an image upload."""

    type: ImageType = ImageType.CHIP


class ImageResponse(BaseModel):
    """Image as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    url: str
    type: ImageType
    name: str
    created_at: datetime
