"""
Test suite for request schemas with normalization rules.

System role: Verification of accepted request shapes
"""

from uuid import uuid4

from collabdoc.models.decision import CreateDecisionRequest


class TestCreateDecisionRequest:
    def test_string_options_should_become_labels(self) -> None:
        request = CreateDecisionRequest.model_validate(
            {"title": "DB choice", "options": ["Postgres", "MySQL"]}
        )

        assert [option.label for option in request.options] == ["Postgres", "MySQL"]
        assert request.options[0].description is None

    def test_text_alias_should_fill_label(self) -> None:
        request = CreateDecisionRequest.model_validate(
            {"title": "DB choice", "options": [{"text": "Postgres", "description": "Robuste"}, "MySQL"]}
        )

        assert request.options[0].label == "Postgres"
        assert request.options[0].description == "Robuste"

    def test_linked_document_id_alias(self) -> None:
        document_id = uuid4()
        request = CreateDecisionRequest.model_validate(
            {"title": "DB choice", "options": [], "linked_document_id": str(document_id)}
        )

        assert request.document_id == document_id

    def test_missing_fields_default_to_none(self) -> None:
        request = CreateDecisionRequest.model_validate({})

        assert request.title is None
        assert request.options is None
        assert request.session_id is None
