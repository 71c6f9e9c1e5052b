"""FastAPI application factory.

Usage:
    # Development
    fastapi dev src/swimcoach/api/app.py

    # Production
    fastapi run src/swimcoach/api/app.py
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from swimcoach import configure_logging, get_logger
from swimcoach.api.routes import health_router, imports_router
from swimcoach.config import get_settings
from swimcoach.dao.base import close_supabase_client, create_supabase_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    configure_logging()
    logger.info(
        "app_starting",
        environment=settings.environment.value,
        supabase_url=settings.supabase_url,
    )
    app.state.supabase = await create_supabase_client(
        settings.supabase_url,
        settings.supabase_key.get_secret_value(),
    )
    yield
    await close_supabase_client(app.state.supabase)
    logger.info("app_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Swimcoach Import API",
        description="Upload meet entries files and results reports",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    # Register routes
    app.include_router(health_router)
    app.include_router(imports_router, prefix="/api/v1")

    return app


# Application instance for uvicorn
app = create_app()
