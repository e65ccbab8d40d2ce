"""
MCP tool server for AI agents.

Each tool is a thin pass-through to the REST API through CollabDocClient.
Results are returned as indented JSON text; API failures surface as
ToolError so the agent sees the server's message.

Dependencies: mcp (FastMCP), collabdoc.agent.client
System role: Agent tool surface over stdio
"""

import json
import logging
from datetime import datetime
from typing import Any, Literal

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import BaseModel, Field

from collabdoc.agent.client import CollabDocAPIError, CollabDocClient

logger = logging.getLogger(__name__)

DocumentType = Literal["general", "synthesis", "question", "comparison", "annexe", "compte_rendu"]
AnnotationType = Literal["question", "objection", "suggestion", "comment", "validation"]
AnnotationStatus = Literal["open", "in_progress", "resolved"]
DecisionStatus = Literal["ouvert", "en_discussion", "consensus", "valide", "reporte"]


class DecisionOptionArg(BaseModel):
    label: str = Field(description='Option label (e.g. "Option A: Event Subscriber")')
    description: str | None = Field(None, description="Detailed description of this option")


def _dump(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _format_date(value: str | None) -> str:
    if not value:
        return "N/A"
    return datetime.fromisoformat(value).strftime("%d/%m/%Y")


def arbitrations_summary(arbitrations: list[dict[str, Any]]) -> str:
    """French Markdown digest of validated decisions."""
    summary = f"## Arbitrages validés ({len(arbitrations)})\n\n"
    if not arbitrations:
        return summary + "_Aucun arbitrage validé pour le moment._\n"

    for index, arbitration in enumerate(arbitrations, start=1):
        selected = arbitration.get("selected_option") or {}
        summary += f"### {index}. {arbitration['title']}\n"
        if arbitration.get("description"):
            summary += f"{arbitration['description']}\n"
        summary += f"**Choix retenu:** {selected.get('label') or 'N/A'}\n"
        if selected.get("description"):
            summary += f"> {selected['description']}\n"
        summary += (
            f"_{arbitration['vote_count']} vote(s) - "
            f"Validé le {_format_date(arbitration.get('validated_at'))}_\n\n"
        )
    return summary


def build_server(client: CollabDocClient, agent_name: str = "Claude Assistant") -> FastMCP:
    """
    Create the FastMCP server with every CollabDoc tool bound to `client`.

    Args:
        client: API client; its AgentContext holds the active session
        agent_name: Pseudo used when a tool call does not name the agent

    Returns:
        FastMCP: Server ready for mcp.run(transport="stdio")
    """
    mcp = FastMCP("collabdoc")
    default_name = agent_name

    async def call(coro) -> Any:
        try:
            return await coro
        except CollabDocAPIError as e:
            logger.warning("Tool call failed", extra={"status_code": e.status_code})
            raise ToolError(str(e)) from e

    @mcp.tool()
    async def list_sessions() -> str:
        """List all existing documentation sessions."""
        return _dump(await call(client.list_sessions()))

    @mcp.tool()
    async def create_session(
        title: str, description: str | None = None, agent_name: str | None = None
    ) -> str:
        """Create a new documentation session and join it as an AI agent.

        Returns session info and the invite code to share with users.
        """
        data = await call(client.create_session(title, description, agent_name or default_name))
        invite_code = data["session"]["invite_code"]
        return _dump({
            "success": True,
            "session_id": client.context.session_id,
            "participant_id": client.context.participant_id,
            "invite_code": invite_code,
            "invite_url": data.get("invite_url"),
            "message": f'Session "{title}" created. Share this invite code with users: {invite_code}',
        })

    @mcp.tool()
    async def join_session(invite_code: str, agent_name: str | None = None) -> str:
        """Join an existing session using an invite code."""
        data = await call(client.join_session(invite_code, agent_name or default_name))
        session_title = data["session"]["title"]
        return _dump({
            "success": True,
            "session_id": client.context.session_id,
            "participant_id": client.context.participant_id,
            "session_title": session_title,
            "message": f'Joined session "{session_title}"',
        })

    @mcp.tool()
    async def get_session_status() -> str:
        """Current session statistics, decisions and priority annotations."""
        return _dump(await call(client.get_session_status()))

    @mcp.tool()
    async def list_documents(parent_id: str | None = None) -> str:
        """List documents of the current session (root level unless parent_id is given)."""
        return _dump(await call(client.list_documents(parent_id)))

    @mcp.tool()
    async def read_document(document_id: str, include_annotations: bool = False) -> str:
        """Read a document's content by ID."""
        return _dump(await call(client.read_document(document_id, include_annotations)))

    @mcp.tool()
    async def create_document(
        title: str,
        content: str,
        type: DocumentType = "general",
        parent_id: str | None = None,
    ) -> str:
        """Create a new Markdown document in the session."""
        document = await call(client.create_document(title, content, type, parent_id))
        return _dump({
            "success": True,
            "document": document,
            "view_url": (
                f"{client.base_url}/session/{client.context.session_id}/document/{document['slug']}"
            ),
        })

    @mcp.tool()
    async def update_document(
        document_id: str,
        title: str | None = None,
        content: str | None = None,
        type: DocumentType | None = None,
    ) -> str:
        """Update an existing document; omitted fields are left unchanged."""
        fields = {"title": title, "content": content, "type": type}
        return _dump(await call(client.update_document(document_id, fields)))

    @mcp.tool()
    async def delete_document(document_id: str) -> str:
        """Delete a document and all its children. This cannot be undone."""
        await call(client.delete_document(document_id))
        return _dump({"success": True, "message": f"Document {document_id} has been deleted."})

    @mcp.tool()
    async def list_annotations(
        document_id: str | None = None,
        type: AnnotationType | None = None,
        status: AnnotationStatus | None = None,
    ) -> str:
        """List annotations for a document or the entire session."""
        return _dump(await call(client.list_annotations(document_id, type, status)))

    @mcp.tool()
    async def respond_to_annotation(annotation_id: str, content: str) -> str:
        """Respond to an annotation (question, objection, etc.)."""
        return _dump(await call(client.respond_to_annotation(annotation_id, content)))

    @mcp.tool()
    async def resolve_annotation(annotation_id: str) -> str:
        """Mark an annotation as resolved."""
        return _dump(await call(client.resolve_annotation(annotation_id)))

    @mcp.tool()
    async def create_decision(
        title: str,
        options: list[DecisionOptionArg],
        description: str | None = None,
        document_id: str | None = None,
    ) -> str:
        """Create a decision point with options for users to vote on.

        Use this when presenting technical choices that need team arbitration
        (2 to 4 options recommended).
        """
        decision = await call(client.create_decision(
            title,
            [option.model_dump(exclude_none=True) for option in options],
            description,
            document_id,
        ))
        return _dump({
            "success": True,
            "decision": decision,
            "message": (
                f'Decision point "{title}" created with {len(options)} options. '
                "Users can now vote on it."
            ),
        })

    @mcp.tool()
    async def list_decisions(
        document_id: str | None = None, status: DecisionStatus | None = None
    ) -> str:
        """List decisions of the session, optionally filtered by document or status."""
        return _dump(await call(client.list_decisions(document_id, status)))

    @mcp.tool()
    async def vote_on_decision(
        decision_id: str, option_id: str, comment: str | None = None
    ) -> str:
        """Vote for one option of a decision; a new vote replaces the previous one."""
        return _dump(await call(client.vote(decision_id, option_id, comment)))

    @mcp.tool()
    async def delete_decision(decision_id: str) -> str:
        """Delete a decision and all its votes. This cannot be undone."""
        await call(client.delete_decision(decision_id))
        return _dump({"success": True, "message": f"Decision {decision_id} has been deleted."})

    @mcp.tool()
    async def get_arbitrations() -> str:
        """Validated decisions with a Markdown summary of the technical choices made."""
        arbitrations = await call(client.get_arbitrations())
        return _dump({
            "arbitrations": arbitrations,
            "summary_markdown": arbitrations_summary(arbitrations),
        })

    return mcp
