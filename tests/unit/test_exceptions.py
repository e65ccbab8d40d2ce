"""
Test suite for the domain exception hierarchy.

System role: Verification of error messages and HTTP status mapping
"""

from uuid import uuid4

import pytest
from fastapi import status

from collabdoc.api.routers.router_utils.error_handling import status_code_for
from collabdoc.core.exceptions import (
    CollabDocException,
    ConflictError,
    DecisionNotFoundError,
    DocumentNotFoundError,
    InvalidIdentifierError,
    InvalidInviteCodeError,
    LockedDecisionError,
    SessionArchivedError,
    SessionNotFoundError,
    ValidationError,
)


class TestCollabDocException:
    def test_str_without_details_should_be_message(self) -> None:
        assert str(CollabDocException("Erreur")) == "Erreur"

    def test_str_with_details_should_include_them(self) -> None:
        error = CollabDocException("Erreur", {"key": "value"})

        assert str(error) == "Erreur | Details: {'key': 'value'}"
        assert error.message == "Erreur"

    def test_validation_error_should_record_field(self) -> None:
        error = ValidationError("Le titre est requis", field="title")

        assert error.field == "title"
        assert error.details == {"field": "title"}

    def test_not_found_should_name_resource(self) -> None:
        session_id = uuid4()
        error = SessionNotFoundError(session_id)

        assert error.message == f"Session non trouvé(e): {session_id}"
        assert error.details["resource_id"] == str(session_id)

    def test_invalid_invite_code_should_use_dedicated_message(self) -> None:
        assert InvalidInviteCodeError("abc").message == "Code d'invitation invalide"

    def test_locked_decision_default_message(self) -> None:
        error = LockedDecisionError(uuid4())

        assert error.message == "Cette décision est verrouillée."
        assert isinstance(error, ConflictError)


class TestStatusCodeFor:
    @pytest.mark.parametrize(
        "error, expected",
        [
            (ValidationError("x"), status.HTTP_400_BAD_REQUEST),
            (InvalidIdentifierError("nope"), status.HTTP_400_BAD_REQUEST),
            (DocumentNotFoundError(uuid4()), status.HTTP_404_NOT_FOUND),
            (DecisionNotFoundError(uuid4()), status.HTTP_404_NOT_FOUND),
            (InvalidInviteCodeError("abc"), status.HTTP_404_NOT_FOUND),
            (ConflictError("x"), status.HTTP_409_CONFLICT),
            (LockedDecisionError(uuid4()), status.HTTP_409_CONFLICT),
            (SessionArchivedError(uuid4()), status.HTTP_410_GONE),
        ],
    )
    def test_should_map_error_to_status(self, error, expected) -> None:
        assert status_code_for(error) == expected
