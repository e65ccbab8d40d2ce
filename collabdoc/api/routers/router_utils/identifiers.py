"""
Identifier parsing for path and query parameters.

Path ids are declared as plain strings so that malformed values map to a
400 with a French message instead of FastAPI's generic 422.

Dependencies: collabdoc.core.exceptions
System role: Request identifier validation
"""

from uuid import UUID

from collabdoc.core.exceptions import InvalidIdentifierError


def parse_uuid(value: str, label: str = "ID invalide") -> UUID:
    """
    Parse a UUID string.

    Raises:
        InvalidIdentifierError: value is not a UUID
    """
    try:
        return UUID(str(value))
    except (TypeError, ValueError) as e:
        raise InvalidIdentifierError(value, label) from e


def parse_optional_uuid(value: str | None, label: str = "ID invalide") -> UUID | None:
    return parse_uuid(value, label) if value else None
