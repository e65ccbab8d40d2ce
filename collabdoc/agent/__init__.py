"""
MCP tool adapter for AI agents.

Exposes the REST API as MCP tools over stdio.

Exports:
  - CollabDocClient, AgentContext, CollabDocAPIError: HTTP client
  - build_server(): FastMCP server factory
"""

from collabdoc.agent.client import AgentContext, CollabDocAPIError, CollabDocClient
from collabdoc.agent.mcp_server import build_server

__all__ = ["AgentContext", "CollabDocAPIError", "CollabDocClient", "build_server"]
