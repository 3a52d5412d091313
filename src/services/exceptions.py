"""Shared exceptions for service layer operations."""


class ServiceError(Exception):
    """
    Base class for errors the API translates into an HTTP response.

    Subclasses set ``status_code``; the message is returned to the client
    in the error envelope, so it must never contain internal details.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidArgumentError(ServiceError):
    """Raised for bad or missing input (HTTP 400)."""

    status_code = 400


class UnauthorizedError(ServiceError):
    """Raised for bad credentials or an invalid/expired token (HTTP 401)."""

    status_code = 401


class ForbiddenError(ServiceError):
    """Raised when an authenticated user asks for something their role does not allow (HTTP 403)."""

    status_code = 403


class NotFoundError(ServiceError):
    """Raised when an entity is missing, deleted, or owned by another user (HTTP 404)."""

    status_code = 404


class ConflictError(ServiceError):
    """Raised when a unique value (e.g. email) is already taken (HTTP 409)."""

    status_code = 409


class ServiceUnavailableError(ServiceError):
    """Raised when a backing service the API depends on cannot be reached (HTTP 503)."""

    status_code = 503


class StorageUploadError(ServiceError):
    """
    Raised when the image storage provider rejects or cannot receive an upload.

    The underlying reason is logged server-side; clients get a generic message.
    """

    status_code = 500

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__("Failed to upload image.")
