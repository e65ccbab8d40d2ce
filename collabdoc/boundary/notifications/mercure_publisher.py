"""
Mercure hub publisher.

Publishes typed JSON change events to per-session and per-document topics.
Every event body is {"type", "data", "timestamp"} and the SSE event type is
the event name, so browsers can subscribe with addEventListener(type).

Publishing is fire-and-forget: transport failures are logged and never
raised to the caller.

Dependencies: httpx, PyJWT, collabdoc.configs
System role: Real-time notification relay
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

import httpx
import jwt

from collabdoc.configs.mercure import MercureSettings

logger = logging.getLogger(__name__)


def session_topic(session_id: Any) -> str:
    return f"/sessions/{session_id}"


def documents_topic(session_id: Any) -> str:
    return f"/sessions/{session_id}/documents"


def document_topic(session_id: Any, document_id: Any) -> str:
    return f"/sessions/{session_id}/documents/{document_id}"


def annotations_topic(session_id: Any) -> str:
    return f"/sessions/{session_id}/annotations"


def decisions_topic(session_id: Any) -> str:
    return f"/sessions/{session_id}/decisions"


def presence_topic(session_id: Any) -> str:
    return f"/sessions/{session_id}/presence"


class MercurePublisher:
    """
    Async client for the Mercure publish endpoint.

    One instance is shared by the application (see ServiceCache); it owns an
    httpx.AsyncClient that is closed on shutdown with aclose().
    """

    def __init__(
        self,
        settings: MercureSettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize publisher.

        Args:
            settings: Mercure hub settings
            client: Optional pre-built HTTP client (tests inject a mock transport)
        """
        self.settings = settings
        self._client = client
        self._token: str | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.timeout)
        return self._client

    def _publisher_token(self) -> str:
        if self._token is None:
            payload = {"mercure": {"publish": ["*"]}}
            self._token = jwt.encode(
                payload,
                self.settings.jwt_secret,
                algorithm=self.settings.jwt_algorithm,
            )
        return self._token

    async def publish(self, topics: list[str], event_type: str, data: dict[str, Any]) -> None:
        """
        Publish one event to one or more topics.

        Args:
            topics: Topic paths, prefixed with the configured topic prefix
            event_type: Event name, also used as the SSE event type
            data: JSON-serializable payload
        """
        full_topics = [f"{self.settings.topic_prefix}{topic}" for topic in topics]
        body = json.dumps(
            {
                "type": event_type,
                "data": data,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
            default=str,
        )

        if not self.settings.enabled:
            logger.debug(
                "Mercure disabled, update not published",
                extra={"event_type": event_type, "topics": full_topics},
            )
            return

        try:
            response = await self.client.post(
                self.settings.hub_url,
                data={"topic": full_topics, "data": body, "type": event_type},
                headers={"Authorization": f"Bearer {self._publisher_token()}"},
            )
            response.raise_for_status()
            logger.debug(
                "Mercure update published",
                extra={"event_type": event_type, "topics": full_topics},
            )
        except httpx.HTTPError as e:
            logger.warning(
                "Failed to publish Mercure update",
                extra={"event_type": event_type, "topics": full_topics, "error": str(e)},
            )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # Documents

    async def publish_document_created(self, session_id: Any, document: dict) -> None:
        await self.publish([documents_topic(session_id)], "document.created", document)

    async def publish_document_updated(self, session_id: Any, document_id: Any, document: dict) -> None:
        await self.publish(
            [documents_topic(session_id), document_topic(session_id, document_id)],
            "document.updated",
            document,
        )

    async def publish_document_deleted(self, session_id: Any, document_id: Any) -> None:
        await self.publish(
            [documents_topic(session_id)],
            "document.deleted",
            {"id": str(document_id)},
        )

    # Annotations

    async def publish_annotation_created(self, session_id: Any, document_id: Any, annotation: dict) -> None:
        await self.publish(
            [annotations_topic(session_id), document_topic(session_id, document_id)],
            "annotation.created",
            annotation,
        )

    async def publish_annotation_updated(self, session_id: Any, annotation: dict) -> None:
        await self.publish([annotations_topic(session_id)], "annotation.updated", annotation)

    async def publish_annotation_resolved(self, session_id: Any, document_id: Any, annotation: dict) -> None:
        await self.publish(
            [annotations_topic(session_id), document_topic(session_id, document_id)],
            "annotation.resolved",
            annotation,
        )

    # Decisions

    async def publish_decision_created(self, session_id: Any, decision: dict) -> None:
        await self.publish(
            [session_topic(session_id), decisions_topic(session_id)],
            "decision.created",
            decision,
        )

    async def publish_decision_status_changed(self, session_id: Any, decision: dict) -> None:
        await self.publish([decisions_topic(session_id)], "decision.status_changed", decision)

    async def publish_decision_deleted(self, session_id: Any, decision_id: Any, document_id: Any = None) -> None:
        await self.publish(
            [session_topic(session_id), decisions_topic(session_id)],
            "decision.deleted",
            {"id": str(decision_id), "document_id": str(document_id) if document_id else None},
        )

    async def publish_vote_received(self, session_id: Any, decision_id: Any, stats: dict) -> None:
        await self.publish(
            [decisions_topic(session_id)],
            "vote.received",
            {"decision_id": str(decision_id), "stats": stats},
        )

    # Sessions and presence

    async def publish_presence_update(self, session_id: Any, participants: list[dict]) -> None:
        await self.publish(
            [presence_topic(session_id)],
            "presence.update",
            {"participants": participants},
        )

    async def publish_session_status_changed(self, session_id: Any, status: str) -> None:
        await self.publish([session_topic(session_id)], "session.status_changed", {"status": status})
