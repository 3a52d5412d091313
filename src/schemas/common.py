"""Response envelope shared by every endpoint."""
from typing import Generic, TypeVar

from pydantic import BaseModel, field_validator

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Successful response carrying a payload: ``{"success": true, "data": ...}``."""

    success: bool = True
    data: T


class MessageResponse(BaseModel):
    """Successful response carrying only a message."""

    success: bool = True
    message: str


class HealthStatus(BaseModel):
    """Payload of the health endpoint."""

    status: str
    database: bool
    image_storage: bool


class ErrorResponse(BaseModel):
    """Error response: ``{"success": false, "message": ...}``."""

    success: bool = False
    message: str


def strip_required_name(value: str) -> str:
    """Trim a name and reject it when nothing is left."""
    stripped = value.strip()
    if not stripped:
        raise ValueError("Name is required.")
    return stripped


class NamedSchema(BaseModel):
    """Mixin schema for bodies whose ``name`` must be non-blank."""

    name: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        """Reject blank names."""
        return strip_required_name(v)
