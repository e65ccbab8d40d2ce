"""
Test suite for AgentService against an in-memory database.

System role: Verification of the agent facade (documents, annotations, status)
"""

import pytest

from collabdoc.boundary.db.CRUD import AnnotationFilters
from collabdoc.core.exceptions import DocumentNotFoundError, ValidationError


class TestAgentDocuments:
    async def test_create_and_update_attributed_to_agent(
        self, agent_service, document_service, sample_session, agent
    ) -> None:
        created = await agent_service.create_document(
            sample_session.id, {"title": "Synthèse", "content": "v1", "type": "synthesis"}, agent.id
        )

        updated = await agent_service.update_document(
            created["id"], {"content": "v2", "change_description": None}, agent.id
        )

        assert updated["current_version"] == 2
        document = await document_service.get_document_or_raise(created["id"])
        versions = await document_service.serialize_versions(
            await document_service.get_versions(document)
        )
        assert versions[0]["author"] == "Claude Assistant"
        assert versions[0]["change_description"] == "Mise à jour par l'agent IA"

    async def test_update_keeps_explicit_change_description(
        self, agent_service, sample_document, agent
    ) -> None:
        await agent_service.update_document(
            sample_document.id, {"content": "v2", "change_description": "Reformulation"}, agent.id
        )

        data = await agent_service.read_document(sample_document.id, include_versions=True)

        assert data["versions"][0]["change_description"] == "Reformulation"

    async def test_list_documents_omits_content(self, agent_service, sample_session, sample_document) -> None:
        documents = await agent_service.list_documents(sample_session.id)

        assert [d["id"] for d in documents] == [str(sample_document.id)]
        assert "content" not in documents[0]

    async def test_read_document_with_annotations(
        self, agent_service, annotation_service, sample_document, alice
    ) -> None:
        await annotation_service.create(sample_document, alice, "Une question", "question")

        data = await agent_service.read_document(sample_document.id, include_annotations=True)

        assert data["content"] == sample_document.content
        assert [a["content"] for a in data["annotations"]] == ["Une question"]
        assert "versions" not in data

    async def test_delete_document(self, agent_service, sample_document, agent) -> None:
        document_id = sample_document.id

        deleted = await agent_service.delete_document(document_id, agent.id)

        assert deleted == [document_id]
        with pytest.raises(DocumentNotFoundError):
            await agent_service.read_document(document_id)


class TestAgentAnnotations:
    async def test_respond_requires_author(self, agent_service, annotation_service, sample_document, alice) -> None:
        annotation = await annotation_service.create(sample_document, alice, "Q ?", "question")

        with pytest.raises(ValidationError) as exc_info:
            await agent_service.respond_to_annotation(annotation.id, "Réponse", None)

        assert exc_info.value.message == "Un auteur est requis pour répondre à une annotation"

    async def test_respond_creates_reply(
        self, agent_service, annotation_service, sample_document, alice, agent
    ) -> None:
        annotation = await annotation_service.create(sample_document, alice, "Q ?", "question")

        reply = await agent_service.respond_to_annotation(annotation.id, "Réponse", agent.id)

        assert reply["parent_id"] == str(annotation.id)
        assert reply["author"]["is_agent"] is True

    async def test_acknowledge_and_untreated_filter(
        self, agent_service, annotation_service, sample_document, alice
    ) -> None:
        first = await annotation_service.create(sample_document, alice, "Q1", "question")
        second = await annotation_service.create(sample_document, alice, "Q2", "question")

        acknowledged = await agent_service.acknowledge_annotation(first.id)
        untreated = await agent_service.read_annotations(
            sample_document.id, AnnotationFilters(untreated_only=True)
        )

        assert acknowledged["taken_into_account"] is True
        assert [a["id"] for a in untreated] == [str(second.id)]


class TestSessionStatus:
    async def test_status_dashboard(
        self, agent_service, annotation_service, decision_service, sample_session, sample_document, alice
    ) -> None:
        question = await annotation_service.create(sample_document, alice, "Q ?", "question")
        await annotation_service.create(sample_document, alice, "Un commentaire")
        await decision_service.create(sample_session, "Choix", [{"label": "A"}, {"label": "B"}])

        status = await agent_service.get_session_status(sample_session.id)

        assert status["session"]["title"] == "Sprint Review"
        assert status["statistics"] == {
            "total_documents": 1,
            "open_annotations": 2,
            "untreated_annotations": 2,
            "pending_decisions": 1,
            "online_participants": 1,
        }
        assert [d["title"] for d in status["decisions"]] == ["Choix"]
        assert [a["id"] for a in status["priority_annotations"]] == [str(question.id)]
