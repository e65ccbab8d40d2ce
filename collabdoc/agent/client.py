"""
Async HTTP client for the CollabDoc REST API.

Used by the MCP tool adapter. The current session and participant live in
an AgentContext owned by the client; once set, every request carries the
participant id in the X-Agent-Id header.

Dependencies: httpx
System role: Agent-side API client
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

NO_ACTIVE_SESSION = "No active session. Use create_session or join_session first."


class CollabDocAPIError(RuntimeError):
    """Raised when the API is unreachable or answers with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class AgentContext:
    """Session the agent is working in, set by create_session or join_session."""

    session_id: str | None = None
    participant_id: str | None = None
    pseudo: str | None = None

    def require_session(self) -> str:
        if not self.session_id:
            raise CollabDocAPIError(NO_ACTIVE_SESSION)
        return self.session_id

    def require_participant(self) -> str:
        if not self.participant_id:
            raise CollabDocAPIError(NO_ACTIVE_SESSION)
        return self.participant_id


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


class CollabDocClient:
    """Async client for the CollabDoc API (all paths relative to /api/v1)."""

    def __init__(
        self,
        *,
        base_url: str,
        verify_ssl: bool = False,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.context = AgentContext()
        self._client = httpx.AsyncClient(
            base_url=f"{self.base_url}/api/v1",
            verify=verify_ssl,
            timeout=httpx.Timeout(timeout_seconds),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: Any | None = None,
    ) -> Any:
        headers = {}
        if self.context.participant_id:
            headers["X-Agent-Id"] = self.context.participant_id
        try:
            resp = await self._client.request(
                method,
                path,
                params=_drop_none(params) if params else None,
                json=body,
                headers=headers,
            )
        except httpx.RequestError as e:
            raise CollabDocAPIError(f"Request failed ({method} {path}): {e}") from e

        if resp.is_error:
            detail = resp.text
            try:
                payload = resp.json()
            except ValueError:
                payload = None
            if isinstance(payload, dict) and payload.get("detail"):
                detail = payload["detail"]
            logger.warning(
                "API call failed",
                extra={"method": method, "path": path, "status_code": resp.status_code},
            )
            raise CollabDocAPIError(str(detail), status_code=resp.status_code)

        if resp.status_code == httpx.codes.NO_CONTENT or not resp.content:
            return None
        return resp.json()

    # Sessions

    async def list_sessions(self) -> dict[str, Any]:
        return await self._request("GET", "/sessions")

    async def create_session(
        self, title: str, description: str | None = None, agent_name: str | None = None
    ) -> dict[str, Any]:
        """Create a session, join it as an agent and make it the active session."""
        data = await self._request(
            "POST",
            "/sessions/agent/create",
            body=_drop_none({"title": title, "description": description, "agent_name": agent_name}),
        )
        self.context = AgentContext(
            session_id=data["session"]["id"],
            participant_id=data["agent"]["participant_id"],
            pseudo=data["agent"]["pseudo"],
        )
        logger.info("Agent session created", extra={"session_id": self.context.session_id})
        return data

    async def join_session(self, invite_code: str, agent_name: str) -> dict[str, Any]:
        data = await self._request(
            "POST",
            f"/sessions/join/{invite_code}",
            body={"pseudo": agent_name, "is_agent": True},
        )
        self.context = AgentContext(
            session_id=data["session"]["id"],
            participant_id=data["participant"]["id"],
            pseudo=data["participant"]["pseudo"],
        )
        logger.info("Agent joined session", extra={"session_id": self.context.session_id})
        return data

    async def get_session_status(self) -> dict[str, Any]:
        session_id = self.context.require_session()
        return await self._request("GET", f"/mcp/sessions/{session_id}/status")

    # Documents

    async def list_documents(self, parent_id: str | None = None) -> dict[str, Any]:
        session_id = self.context.require_session()
        return await self._request(
            "GET", f"/mcp/sessions/{session_id}/documents", params={"parent_id": parent_id}
        )

    async def read_document(
        self, document_id: str, include_annotations: bool = False
    ) -> dict[str, Any]:
        params = {"include_annotations": "true"} if include_annotations else None
        return await self._request("GET", f"/mcp/documents/{document_id}", params=params)

    async def create_document(
        self,
        title: str,
        content: str,
        doc_type: str = "general",
        parent_id: str | None = None,
    ) -> dict[str, Any]:
        session_id = self.context.require_session()
        participant_id = self.context.require_participant()
        return await self._request(
            "POST",
            f"/mcp/sessions/{session_id}/documents",
            body=_drop_none({
                "title": title,
                "content": content,
                "type": doc_type,
                "parent_id": parent_id,
                "participant_id": participant_id,
            }),
        )

    async def update_document(self, document_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Send only the non-empty fields; omitted fields are left unchanged."""
        participant_id = self.context.require_participant()
        body = {key: value for key, value in fields.items() if value}
        body["participant_id"] = participant_id
        return await self._request("PUT", f"/mcp/documents/{document_id}", body=body)

    async def delete_document(self, document_id: str) -> None:
        self.context.require_participant()
        await self._request("DELETE", f"/mcp/documents/{document_id}")

    # Annotations

    async def list_annotations(
        self,
        document_id: str | None = None,
        annotation_type: str | None = None,
        status: str | None = None,
    ) -> dict[str, Any]:
        """Annotations of one document, or of the whole active session."""
        params = {"type": annotation_type, "status": status}
        if document_id:
            return await self._request(
                "GET", f"/mcp/documents/{document_id}/annotations", params=params
            )
        session_id = self.context.require_session()
        return await self._request("GET", f"/mcp/sessions/{session_id}/annotations", params=params)

    async def respond_to_annotation(self, annotation_id: str, content: str) -> dict[str, Any]:
        participant_id = self.context.require_participant()
        return await self._request(
            "POST",
            f"/mcp/annotations/{annotation_id}/respond",
            body={"content": content, "participant_id": participant_id},
        )

    async def resolve_annotation(self, annotation_id: str) -> dict[str, Any]:
        participant_id = self.context.require_participant()
        return await self._request(
            "POST",
            f"/annotations/{annotation_id}/resolve",
            body={"participant_id": participant_id},
        )

    # Decisions

    async def create_decision(
        self,
        title: str,
        options: list[dict[str, Any]],
        description: str | None = None,
        document_id: str | None = None,
    ) -> dict[str, Any]:
        session_id = self.context.require_session()
        return await self._request(
            "POST",
            "/decisions",
            body=_drop_none({
                "session_id": session_id,
                "title": title,
                "description": description,
                "options": options,
                "document_id": document_id,
            }),
        )

    async def list_decisions(
        self, document_id: str | None = None, status: str | None = None
    ) -> list[dict[str, Any]]:
        session_id = self.context.require_session()
        return await self._request(
            "GET",
            f"/decisions/session/{session_id}",
            params={"document_id": document_id, "status": status},
        )

    async def vote(
        self, decision_id: str, option_id: str, comment: str | None = None
    ) -> dict[str, Any]:
        participant_id = self.context.require_participant()
        return await self._request(
            "POST",
            f"/decisions/{decision_id}/vote",
            body=_drop_none({
                "participant_id": participant_id,
                "option_id": option_id,
                "comment": comment,
            }),
        )

    async def delete_decision(self, decision_id: str) -> dict[str, Any]:
        self.context.require_session()
        return await self._request("DELETE", f"/decisions/{decision_id}")

    async def get_arbitrations(self) -> list[dict[str, Any]]:
        session_id = self.context.require_session()
        return await self._request("GET", f"/decisions/session/{session_id}/arbitrations")
