"""
Decision validation utilities.

Business checks not covered by the Pydantic models. Messages are the
user-facing French strings returned in the 400 response.

Dependencies: collabdoc.models.decision, collabdoc.application.services
System role: Decision request validation
"""

from collabdoc.application.services.decision_service import DECISION_STATUSES
from collabdoc.core.exceptions import ValidationError
from collabdoc.models.decision import (
    CreateDecisionRequest,
    UpdateDecisionStatusRequest,
    ValidateDecisionRequest,
    VoteRequest,
)

MIN_OPTIONS = 2


def validate_decision_creation(request: CreateDecisionRequest) -> None:
    """
    Validate decision creation request.

    Raises:
        ValidationError: Missing session_id or title, fewer than two options,
            or an option without a label
    """
    if request.session_id is None:
        raise ValidationError("session_id est requis", field="session_id")
    if not request.title or not request.title.strip():
        raise ValidationError("Le titre est requis", field="title")
    if not request.options or len(request.options) < MIN_OPTIONS:
        raise ValidationError("Au moins 2 options sont requises", field="options")
    if any(not option.label or not option.label.strip() for option in request.options):
        raise ValidationError("Chaque option doit avoir un libellé", field="options")


def validate_vote(request: VoteRequest) -> None:
    if request.participant_id is None:
        raise ValidationError("participant_id est requis", field="participant_id")
    if not request.option_id:
        raise ValidationError("option_id est requis", field="option_id")


def validate_status_update(request: UpdateDecisionStatusRequest) -> None:
    if not request.status or request.status not in DECISION_STATUSES:
        raise ValidationError("Statut invalide", field="status")


def validate_selection(request: ValidateDecisionRequest) -> None:
    if not request.selected_option_id:
        raise ValidationError("selected_option_id est requis", field="selected_option_id")
