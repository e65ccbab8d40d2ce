"""Shared helpers for API routers."""

from .error_handling import handle_api_errors
from .identifiers import parse_optional_uuid, parse_uuid
from .validators import require

__all__ = ["handle_api_errors", "parse_optional_uuid", "parse_uuid", "require"]
