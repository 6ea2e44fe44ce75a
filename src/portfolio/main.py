from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from src.portfolio.api.middlewares import setup_middlewares
from src.portfolio.api.v1.router import api_router
from src.portfolio.core.config import get_settings
from src.portfolio.core.db import dispose_engine, run_migrations_async
from src.portfolio.core.exceptions import setup_exception_handlers
from src.portfolio.core.health import setup_health_endpoint, setup_metrics
from src.portfolio.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}", env=settings.app_env)

    if settings.run_migrations_on_startup:
        logger.info("Running database migrations")
        await run_migrations_async()

    yield

    logger.info("Closing connections...")
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "projects", "description": "Project submission, moderation and portfolio"},
    {"name": "dashboard", "description": "Member and project counters"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Team portfolio API with project moderation",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)
    setup_middlewares(app, settings)

    app.include_router(api_router)

    # Uploaded pictures and media are served from the local blob store
    Path(settings.media_root).mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.media_url_prefix,
        StaticFiles(directory=settings.media_root, check_dir=False),
        name="media",
    )

    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
