"""
Request field checks shared by routers.

Pydantic enforces types; these helpers enforce presence with the French
messages clients display as-is.

Dependencies: collabdoc.core.exceptions
System role: Request business validation
"""

from typing import TypeVar

from collabdoc.core.exceptions import ValidationError

T = TypeVar("T")


def require(value: T | None, message: str, field: str) -> T:
    """
    Return value, rejecting None and blank strings.

    Raises:
        ValidationError: value is missing or blank
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(message, field=field)
    return value
