"""
Test suite for SessionService against an in-memory database.

Covers session lifecycle, idempotent joins, presence and invite codes.

System role: Verification of session and presence use cases
"""

from datetime import timedelta
from uuid import uuid4

import pytest

from collabdoc.application.services import session_service as session_service_module
from collabdoc.boundary.db.base import utcnow
from collabdoc.boundary.db.models.participant_model import PARTICIPANT_COLORS
from collabdoc.core.exceptions import SessionNotFoundError, ValidationError


class TestCreateSession:
    async def test_should_start_in_preparation_with_invite_code(self, session_service) -> None:
        session = await session_service.create_session("Sprint Review")

        assert session.status == "preparation"
        assert len(session.invite_code) == 32
        assert session.description is None

    async def test_invite_codes_should_differ(self, session_service) -> None:
        first = await session_service.create_session("A")
        second = await session_service.create_session("B")

        assert first.invite_code != second.invite_code

    async def test_get_all_sessions_should_list_created(self, session_service, sample_session) -> None:
        sessions = await session_service.get_all_sessions()

        assert [s.id for s in sessions] == [sample_session.id]

    async def test_get_session_or_raise_unknown_id(self, session_service) -> None:
        with pytest.raises(SessionNotFoundError):
            await session_service.get_session_or_raise(uuid4())


class TestJoinSession:
    async def test_should_create_participant_with_palette_color(
        self, session_service, sample_session, mock_publisher
    ) -> None:
        participant = await session_service.join_session(sample_session, "alice")

        assert participant.pseudo == "alice"
        assert participant.color in PARTICIPANT_COLORS
        assert participant.is_agent is False
        assert participant.last_seen_at is not None
        mock_publisher.publish_presence_update.assert_awaited_once()

    async def test_rejoin_with_same_pseudo_should_return_existing(
        self, session_service, sample_session
    ) -> None:
        first = await session_service.join_session(sample_session, "alice")
        second = await session_service.join_session(sample_session, "alice")

        assert first.id == second.id
        stats = await session_service.get_session_stats(sample_session.id)
        assert stats["participant_count"] == 1

    async def test_same_pseudo_in_other_session_is_distinct(self, session_service, sample_session) -> None:
        other = await session_service.create_session("Autre")

        first = await session_service.join_session(sample_session, "alice")
        second = await session_service.join_session(other, "alice")

        assert first.id != second.id

    async def test_find_by_invite_code(self, session_service, sample_session) -> None:
        found = await session_service.find_by_invite_code(sample_session.invite_code)

        assert found.id == sample_session.id
        assert await session_service.find_by_invite_code("unknown") is None


class TestSessionStatus:
    async def test_update_status_should_publish(self, session_service, sample_session, mock_publisher) -> None:
        session = await session_service.update_status(sample_session, "en_cours")

        assert session.status == "en_cours"
        mock_publisher.publish_session_status_changed.assert_awaited_once_with(
            sample_session.id, "en_cours"
        )

    async def test_archived_session_can_still_change_status(self, session_service, sample_session) -> None:
        await session_service.archive(sample_session)
        assert sample_session.is_archived

        session = await session_service.update_status(sample_session, "en_cours")

        assert session.status == "en_cours"

    async def test_unknown_status_should_raise(self, session_service, sample_session) -> None:
        with pytest.raises(ValidationError):
            await session_service.update_status(sample_session, "closed")

    async def test_regenerate_invite_code(self, session_service, sample_session) -> None:
        previous = sample_session.invite_code

        session = await session_service.regenerate_invite_code(sample_session)

        assert session.invite_code != previous
        assert await session_service.find_by_invite_code(previous) is None

    async def test_taken_invite_code_should_be_redrawn(
        self, session_service, sample_session, monkeypatch
    ) -> None:
        codes = iter([sample_session.invite_code, "f" * 32])
        monkeypatch.setattr(session_service_module, "generate_invite_code", lambda: next(codes))

        session = await session_service.create_session("Doublon")

        assert session.invite_code == "f" * 32

    async def test_invite_code_allocation_gives_up(
        self, session_service, sample_session, monkeypatch
    ) -> None:
        monkeypatch.setattr(
            session_service_module, "generate_invite_code", lambda: sample_session.invite_code
        )

        with pytest.raises(RuntimeError):
            await session_service.regenerate_invite_code(sample_session)


class TestPresence:
    async def test_recent_participants_are_online(self, session_service, sample_session, alice, bob) -> None:
        online = await session_service.get_online_participants(sample_session.id)

        assert [p.pseudo for p in online] == ["alice", "bob"]

    async def test_stale_participant_is_offline(
        self, session_service, sample_session, alice, bob, test_async_db
    ) -> None:
        bob.last_seen_at = utcnow() - timedelta(seconds=31)
        await test_async_db.commit()

        online = await session_service.get_online_participants(sample_session.id)

        assert [p.pseudo for p in online] == ["alice"]

    async def test_heartbeat_should_refresh_presence_and_document(
        self, session_service, sample_session, alice, sample_document, test_async_db
    ) -> None:
        alice.last_seen_at = utcnow() - timedelta(minutes=5)
        await test_async_db.commit()

        participant = await session_service.update_participant_presence(alice, sample_document.id)

        assert participant.current_document_id == sample_document.id
        assert participant.is_online()

    async def test_stats_should_count_entities(
        self, session_service, sample_session, alice, sample_document
    ) -> None:
        stats = await session_service.get_session_stats(sample_session.id)

        assert stats == {"document_count": 1, "participant_count": 1, "decision_count": 0}
