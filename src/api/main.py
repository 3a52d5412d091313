"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.routers import auth, chips, folders, health, images, users
from core.config import Settings, get_settings
from db.session import create_engine_from_settings, create_session_factory
from services.image_storage import CloudinaryStorage, ImageStorage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - dispose the database pool on shutdown."""
    logger.info("%s starting", app.state.settings.app_name)
    yield
    await app.state.engine.dispose()
    logger.info("%s stopped", app.state.settings.app_name)


def create_app(
    settings: Settings | None = None,
    image_storage: ImageStorage | None = None,
) -> FastAPI:
    """
    Build the application from explicit settings.

    The engine, session factory and image storage client are created once and
    kept on ``app.state``; dependencies read them from there.

    Args:
        settings: Configuration; read from the environment when omitted.
        image_storage: Storage client; a Cloudinary client built from the
            settings when omitted.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Litmark API",
        description="Bookmark management: nested folders, chips and images.",
        version="0.1.0",
        lifespan=lifespan,
    )

    engine = create_engine_from_settings(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.image_storage = image_storage or CloudinaryStorage(settings)
    if image_storage is None and not settings.storage_configured:
        logger.warning("Cloudinary credentials are not set; image uploads will fail")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    for module in (health, auth, users, folders, chips, images):
        app.include_router(module.router, prefix=settings.api_prefix)

    return app


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        create_app(settings),
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
