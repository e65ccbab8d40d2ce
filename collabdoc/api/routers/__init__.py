"""API routers."""

from .annotations import router as annotations_router
from .decisions import router as decisions_router
from .documents import router as documents_router
from .exports import router as exports_router
from .health import router as health_router
from .mcp import router as mcp_router
from .sessions import router as sessions_router

__all__ = [
    "annotations_router",
    "decisions_router",
    "documents_router",
    "exports_router",
    "health_router",
    "mcp_router",
    "sessions_router",
]
