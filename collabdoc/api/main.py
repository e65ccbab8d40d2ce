"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, collabdoc.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from collabdoc import __version__
from collabdoc.api.deps.dependencies import get_service_cache
from collabdoc.boundary.db import dispose_engine
from collabdoc.boundary.db.create_tables import create_all_tables
from collabdoc.configs import get_settings
from collabdoc.core.exceptions import CollabDocException
from collabdoc.observability.logger import configure_logging
from collabdoc.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import (
    annotations_router,
    decisions_router,
    documents_router,
    exports_router,
    health_router,
    mcp_router,
    sessions_router,
)
from .routers.router_utils.error_handling import status_code_for

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Configures logging and optionally creates tables on startup; closes the
    Mercure client and the database pool on shutdown.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    if settings.database.auto_create_tables:
        await create_all_tables()
    logger.info("CollabDoc API started", extra={"environment": settings.environment})

    yield

    await get_service_cache().aclose()
    await dispose_engine()
    logger.info("CollabDoc API stopped")


async def domain_exception_handler(request: Request, exc: CollabDocException) -> JSONResponse:
    """Domain errors raised outside a router (e.g. in a dependency)."""
    status_code = status_code_for(exc)
    logger.warning(
        "Domain error outside router",
        extra={"path": request.url.path, "status_code": status_code, "error": exc.message},
    )
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies and parameters as 400."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Requête invalide")
    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "error_count": len(errors)},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"{location}: {message}" if location else message},
    )


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings()

    app = FastAPI(
        title="CollabDoc API",
        description="Collaborative documentation sessions with annotations, decisions and AI agents",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Added last so it runs first and binds the correlation ID for the logger
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(CollabDocException, domain_exception_handler)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(sessions_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")
    app.include_router(mcp_router, prefix="/api/v1")
    app.include_router(annotations_router, prefix="/api/v1")
    app.include_router(decisions_router, prefix="/api/v1")
    app.include_router(exports_router, prefix="/api/v1")

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "collabdoc.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
    )


if __name__ == "__main__":
    run()
