"""FastAPI dependencies for injection."""
from fastapi import Request

from core.auth import get_current_user
from core.config import get_app_settings
from db.session import get_async_session
from services.image_storage import ImageStorage


def get_image_storage(request: Request) -> ImageStorage:
    """Image storage client the running app was created with."""
    return request.app.state.image_storage


__all__ = [
    "get_app_settings",
    "get_async_session",
    "get_current_user",
    "get_image_storage",
]
