"""Test doubles shared across test modules."""
from services.exceptions import StorageUploadError


class FakeImageStorage:
    """In-memory image storage that records uploads and returns predictable URLs."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.uploads: list[tuple[str, bytes, str]] = []

    async def upload(self, filename: str, content: bytes, content_type: str) -> str:
        if self.fail:
            raise StorageUploadError("storage unavailable")
        self.uploads.append((filename, content, content_type))
        return f"https://images.test/{filename}"


class FakeUpload:
    """Minimal stand-in for an uploaded multipart file."""

    def __init__(
        self,
        content: bytes = b"\x89PNG fake image bytes",
        filename: str | None = "photo.png",
        content_type: str | None = "image/png",
    ) -> None:
        self.content = content
        self.filename = filename
        self.content_type = content_type

    async def read(self) -> bytes:
        return self.content
