"""
Exception hierarchy for the collaborative documentation service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.
Messages are user-facing and written in French.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class CollabDocException(Exception):
    """Base exception for all collaborative documentation errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(CollabDocException):
    """Raised when input validation fails (missing field, bad enum value...)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        self.field = field
        super().__init__(message, details)


class InvalidIdentifierError(ValidationError):
    """Raised when an identifier is not a well-formed UUID."""

    def __init__(self, value: str, label: str = "ID invalide") -> None:
        super().__init__(label, details={"value": value})


class NotFoundError(CollabDocException):
    """Base class for missing resources."""

    resource = "Ressource"

    def __init__(self, resource_id: Any, details: dict[str, Any] | None = None) -> None:
        """
        Initialize not found error.

        Args:
            resource_id: ID (or lookup key) of the missing resource
            details: Additional context
        """
        details = details or {}
        details["resource_id"] = str(resource_id)
        self.resource_id = resource_id
        super().__init__(f"{self.resource} non trouvé(e): {resource_id}", details)


class SessionNotFoundError(NotFoundError):
    """Raised when a session cannot be found."""

    resource = "Session"


class DocumentNotFoundError(NotFoundError):
    """Raised when a document cannot be found."""

    resource = "Document"


class AnnotationNotFoundError(NotFoundError):
    """Raised when an annotation cannot be found."""

    resource = "Annotation"


class DecisionNotFoundError(NotFoundError):
    """Raised when a decision cannot be found."""

    resource = "Décision"


class ParticipantNotFoundError(NotFoundError):
    """Raised when a participant cannot be found."""

    resource = "Participant"


class InvalidInviteCodeError(NotFoundError):
    """Raised when no session matches an invite code."""

    def __init__(self, invite_code: str) -> None:
        super().__init__(invite_code)
        self.message = "Code d'invitation invalide"


class ConflictError(CollabDocException):
    """Raised when an operation conflicts with the current state."""


class LockedDecisionError(ConflictError):
    """Raised when voting on or modifying a locked decision."""

    def __init__(
        self,
        decision_id: Any,
        message: str = "Cette décision est verrouillée.",
    ) -> None:
        super().__init__(message, {"decision_id": str(decision_id)})
        self.decision_id = decision_id


class SessionArchivedError(CollabDocException):
    """Raised when joining a session that has been archived."""

    def __init__(self, session_id: Any) -> None:
        super().__init__("Cette session est archivée", {"session_id": str(session_id)})
        self.session_id = session_id
