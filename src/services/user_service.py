"""Service layer for accounts: registration, login, tokens and user CRUD."""
import logging

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AuthenticatedUser, token_claims
from core.config import Settings
from core.security import TokenError, create_token, decode_token, hash_password, verify_password
from models.image import ImageType
from models.user import User, UserRole
from repositories.user_repository import user_repository
from schemas.user import RegisterRequest, TokenPair, UserCreate, UserUpdate
from services import image_service
from services.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from services.image_storage import ImageStorage
from services.utils import validate_id

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."
EMAIL_TAKEN = "Email is already registered."
USER_NOT_FOUND = "User does not exist."
INVALID_REFRESH_TOKEN = "Invalid refresh token."
ROLE_NOT_ALLOWED = "Only administrators can assign roles."


async def _ensure_email_available(
    db: AsyncSession,
    email: str,
    exclude_user_id: int | None = None,
) -> None:
    existing = await user_repository.get_by_email(db, email)
    if existing is not None and existing.id != exclude_user_id:
        raise ConflictError(EMAIL_TAKEN)


async def _flush_user(db: AsyncSession, user: User) -> User:
    """
    Insert a new user, translating a unique-email violation into ConflictError.

    The pre-check only sees active users; the unique constraint also covers
    soft-deleted accounts.
    """
    try:
        return await user_repository.add(db, user)
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError(EMAIL_TAKEN) from e


async def _create_account(
    db: AsyncSession,
    storage: ImageStorage | None,
    data: RegisterRequest,
    role: UserRole,
    created_by: str,
    settings: Settings,
    upload: UploadFile | None = None,
) -> User:
    await _ensure_email_available(db, data.email)

    placeholder = await image_service.get_or_create_default_image(
        db, ImageType.USER, created_by, settings,
    )
    user = await _flush_user(
        db,
        User(
            username=data.username,
            email=data.email,
            password=hash_password(data.password, settings.password_hash_rounds),
            role=role,
            image_id=placeholder.id,
            created_by=created_by,
            updated_by=created_by,
        ),
    )

    if upload is not None and storage is not None:
        # The image is owned by the new account, so it is uploaded once the row exists
        image = await image_service.upload_image(
            db, storage, upload, ImageType.USER, settings,
            owner_id=user.id, username=created_by,
        )
        user = await user_repository.save(db, user, image_id=image.id)

    logger.info("Created user %s (%s)", user.id, role.value)
    return user


def issue_tokens(user: User, settings: Settings) -> TokenPair:
    """Sign a new access/refresh token pair for a user."""
    claims = token_claims(user)
    return TokenPair(
        access_token=create_token(claims, "access", settings),
        refresh_token=create_token(claims, "refresh", settings),
    )


async def register_user(
    db: AsyncSession,
    data: RegisterRequest,
    settings: Settings,
) -> User:
    """
    Create an account with role ``user`` and the default profile image.

    Raises:
        ConflictError: If the email is already registered.
    """
    return await _create_account(db, None, data, UserRole.USER, data.username, settings)


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """
    Check credentials and return the matching user.

    Raises:
        UnauthorizedError: If the email is unknown or the password is wrong.
    """
    user = await user_repository.get_by_email(db, email)
    if user is None or not verify_password(password, user.password):
        logger.warning("Failed login for %s", email)
        raise UnauthorizedError(INVALID_CREDENTIALS)
    return user


async def refresh_tokens(db: AsyncSession, refresh_token: str, settings: Settings) -> TokenPair:
    """
    Exchange a refresh token for a new token pair.

    Raises:
        UnauthorizedError: If the token is invalid/expired or its user no longer exists.
    """
    try:
        payload = decode_token(refresh_token, "refresh", settings)
        user_id = int(payload["sub"])
    except (TokenError, KeyError, ValueError) as e:
        logger.warning("Refresh token rejected: %s", e)
        raise UnauthorizedError(INVALID_REFRESH_TOKEN) from e

    user = await user_repository.get(db, user_id)
    if user is None:
        raise UnauthorizedError(INVALID_REFRESH_TOKEN)
    return issue_tokens(user, settings)


async def create_user(
    db: AsyncSession,
    storage: ImageStorage,
    actor: AuthenticatedUser,
    data: UserCreate,
    settings: Settings,
    upload: UploadFile | None = None,
) -> User:
    """
    Create an account on behalf of an authenticated user.

    Only an administrator may create an account with a role other than ``user``.

    Raises:
        ForbiddenError: If a non-administrator asks for an elevated role.
        ConflictError: If the email is already registered.
        StorageUploadError: If the image upload fails.
    """
    if data.role != UserRole.USER and not actor.is_admin:
        logger.warning("User %s tried to create a %s account", actor.id, data.role.value)
        raise ForbiddenError(ROLE_NOT_ALLOWED)
    return await _create_account(
        db, storage, data, data.role, actor.username, settings, upload,
    )


async def get_user(db: AsyncSession, actor: AuthenticatedUser, user_id: int) -> User:
    """
    Get a user. Accounts are only visible to themselves.

    Raises:
        NotFoundError: If the user is missing, deleted, or not the actor.
    """
    validate_id(user_id)
    if actor.id != user_id:
        raise NotFoundError(USER_NOT_FOUND)
    user = await user_repository.get(db, user_id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND)
    return user


async def update_user(
    db: AsyncSession,
    storage: ImageStorage,
    actor: AuthenticatedUser,
    user_id: int,
    data: UserUpdate,
    settings: Settings,
    upload: UploadFile | None = None,
) -> User:
    """
    Apply a partial update; fields not supplied are kept.

    Raises:
        NotFoundError: If the user is not visible to the actor.
        ConflictError: If the new email belongs to another account.
    """
    user = await get_user(db, actor, user_id)

    changes: dict = {"updated_by": actor.username}
    if data.username is not None:
        changes["username"] = data.username
    if data.email is not None and data.email.lower() != user.email.lower():
        await _ensure_email_available(db, data.email, exclude_user_id=user.id)
        changes["email"] = data.email
    if data.password is not None:
        changes["password"] = hash_password(data.password, settings.password_hash_rounds)
    if upload is not None:
        image = await image_service.upload_image(
            db, storage, upload, ImageType.USER, settings,
            owner_id=user.id, username=actor.username,
        )
        changes["image_id"] = image.id

    try:
        return await user_repository.save(db, user, **changes)
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError(EMAIL_TAKEN) from e


async def delete_user(db: AsyncSession, actor: AuthenticatedUser, user_id: int) -> None:
    """
    Soft-delete a user account.

    Raises:
        NotFoundError: If the user is not visible to the actor.
    """
    user = await get_user(db, actor, user_id)
    await user_repository.soft_delete(db, user, actor.username)
    logger.info("User %s deleted user %s", actor.id, user.id)
