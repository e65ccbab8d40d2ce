"""
API error handling utilities.

Provides a decorator that maps domain exceptions to HTTP errors with
consistent logging across all routers.

Dependencies: fastapi, collabdoc.core.exceptions, collabdoc.observability
System role: Domain error to HTTP translation
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from collabdoc.core.exceptions import (
    CollabDocException,
    ConflictError,
    NotFoundError,
    SessionArchivedError,
    ValidationError,
)
from collabdoc.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])

INTERNAL_ERROR_MESSAGE = "Une erreur interne est survenue"


def status_code_for(error: CollabDocException) -> int:
    """HTTP status for a domain exception."""
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, ConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(error, SessionArchivedError):
        return status.HTTP_410_GONE
    return status.HTTP_400_BAD_REQUEST


def handle_api_errors(func: F) -> F:
    """
    Decorator to transform domain errors into HTTPExceptions.

    This centralizes:
    - Logging of errors with their context
    - Mapping exception classes to HTTP status codes
    - Hiding unexpected failures behind a generic 500
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except CollabDocException as e:
            status_code = status_code_for(e)
            log_with_context(
                logger,
                logging.WARNING,
                f"{type(e).__name__} in {func.__name__}",
                status_code=status_code,
                error=e.message,
                details=str(e.details) if e.details else None,
                field=e.field if isinstance(e, ValidationError) else None,
            )
            raise HTTPException(status_code=status_code, detail=e.message) from e

        except Exception as e:
            log_exception_with_context(logger, f"Unexpected failure in {func.__name__}", e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=INTERNAL_ERROR_MESSAGE,
            ) from e

    return wrapper  # type: ignore
