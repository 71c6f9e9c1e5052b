"""API route modules."""

from swimcoach.api.routes.health import router as health_router
from swimcoach.api.routes.imports import router as imports_router

__all__ = [
    "health_router",
    "imports_router",
]
