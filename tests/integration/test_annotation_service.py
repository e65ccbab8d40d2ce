"""
Test suite for AnnotationService against an in-memory database.

Covers creation, replies, mentions, resolution and filtered listings.

System role: Verification of annotation use cases
"""

import pytest

from collabdoc.boundary.db.CRUD import AnnotationFilters
from collabdoc.core.exceptions import ValidationError


class TestCreateAnnotation:
    async def test_should_default_to_open_comment(self, annotation_service, sample_document, alice) -> None:
        annotation = await annotation_service.create(sample_document, alice, "Bonne idée")

        assert annotation.type == "comment"
        assert annotation.status == "open"
        assert annotation.taken_into_account is False
        assert annotation.parent_annotation_id is None

    async def test_should_resolve_mentions_in_order_without_duplicates(
        self, annotation_service, sample_document, alice, bob
    ) -> None:
        annotation = await annotation_service.create(
            sample_document, alice, "@bob tu peux voir ? @inconnu @alice @bob"
        )

        assert annotation.mentions == [str(bob.id), str(alice.id)]

    async def test_unknown_type_should_raise(self, annotation_service, sample_document, alice) -> None:
        with pytest.raises(ValidationError):
            await annotation_service.create(sample_document, alice, "x", "remark")

    async def test_should_publish_to_document(
        self, annotation_service, sample_document, alice, mock_publisher
    ) -> None:
        await annotation_service.create(sample_document, alice, "x")

        session_id, document_id, payload = mock_publisher.publish_annotation_created.await_args.args
        assert session_id == sample_document.session_id
        assert document_id == sample_document.id
        assert payload["author"]["pseudo"] == "alice"


class TestResolveAnnotation:
    async def test_resolve_question(self, annotation_service, sample_document, alice, bob) -> None:
        annotation = await annotation_service.create(sample_document, alice, "Pourquoi ?", "question")
        assert annotation.status == "open"

        resolved = await annotation_service.resolve(annotation, bob)

        assert resolved.status == "resolved"
        assert resolved.resolved_by_id == bob.id
        data = await annotation_service.serialize(resolved)
        assert data["resolved_by"] == "bob"

    async def test_set_status_any_transition(self, annotation_service, sample_document, alice, bob) -> None:
        annotation = await annotation_service.create(sample_document, alice, "x")
        await annotation_service.resolve(annotation, bob)

        reopened = await annotation_service.set_status(annotation, "open")

        assert reopened.status == "open"

    async def test_set_unknown_status_should_raise(self, annotation_service, sample_document, alice) -> None:
        annotation = await annotation_service.create(sample_document, alice, "x")

        with pytest.raises(ValidationError):
            await annotation_service.set_status(annotation, "closed")

    async def test_acknowledge(self, annotation_service, sample_document, alice) -> None:
        annotation = await annotation_service.create(sample_document, alice, "x")

        acknowledged = await annotation_service.mark_as_taken_into_account(annotation)

        assert acknowledged.taken_into_account is True


class TestReplies:
    async def test_reply_is_comment_on_parent_document(
        self, annotation_service, sample_document, alice, bob
    ) -> None:
        parent = await annotation_service.create(sample_document, alice, "Pourquoi ?", "question")

        reply = await annotation_service.create_reply(parent, "Parce que @alice", bob)

        assert reply.document_id == sample_document.id
        assert reply.parent_annotation_id == parent.id
        assert reply.type == "comment"
        assert reply.mentions == [str(alice.id)]

    async def test_listings_return_roots_with_reply_count(
        self, annotation_service, sample_document, alice, bob
    ) -> None:
        parent = await annotation_service.create(sample_document, alice, "Pourquoi ?", "question")
        await annotation_service.create_reply(parent, "Réponse 1", bob)
        await annotation_service.create_reply(parent, "Réponse 2", alice)

        roots = await annotation_service.list_for_document(sample_document.id)
        data = await annotation_service.serialize_many(roots)

        assert [a["id"] for a in data] == [str(parent.id)]
        assert data[0]["reply_count"] == 2
        replies = await annotation_service.get_replies(parent)
        assert [r.content for r in replies] == ["Réponse 1", "Réponse 2"]

    async def test_update_recomputes_mentions(self, annotation_service, sample_document, alice, bob) -> None:
        annotation = await annotation_service.create(sample_document, alice, "@bob")

        updated = await annotation_service.update(annotation, "Finalement rien")

        assert updated.content == "Finalement rien"
        assert updated.mentions == []


class TestFilters:
    async def test_session_listing_filters(
        self, annotation_service, sample_document, alice, bob
    ) -> None:
        question = await annotation_service.create(sample_document, alice, "Q", "question")
        objection = await annotation_service.create(sample_document, bob, "O", "objection")
        await annotation_service.create(sample_document, alice, "C")
        await annotation_service.resolve(objection, alice)
        session_id = sample_document.session_id

        questions = await annotation_service.list_for_session(
            session_id, AnnotationFilters(type="question")
        )
        untreated = await annotation_service.list_for_session(
            session_id, AnnotationFilters(untreated_only=True)
        )
        by_bob = await annotation_service.list_for_session(
            session_id, AnnotationFilters(author_id=bob.id)
        )

        assert [a.id for a in questions] == [question.id]
        assert objection.id not in {a.id for a in untreated}
        assert len(untreated) == 2
        assert [a.id for a in by_bob] == [objection.id]
