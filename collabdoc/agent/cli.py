"""
Command-line entry point for the MCP stdio server.

Usage: collabdoc-mcp --base-url=https://localhost

stdout carries the MCP protocol, so logs go to stderr.
"""

import asyncio
import logging
import sys

import click

from collabdoc import __version__
from collabdoc.agent.client import CollabDocClient
from collabdoc.agent.mcp_server import build_server
from collabdoc.configs import get_settings
from collabdoc.observability.logger import configure_logging

logger = logging.getLogger(__name__)

_settings = get_settings()


@click.command()
@click.version_option(version=__version__)
@click.option("--base-url", default=_settings.agent.base_url, show_default=True, help="CollabDoc server URL")
@click.option("--verify-ssl/--no-verify-ssl", default=_settings.agent.verify_ssl, show_default=True)
@click.option("--agent-name", default=_settings.agent.agent_name, show_default=True, help="Default agent pseudo")
@click.option("--timeout", default=_settings.agent.timeout, show_default=True, help="HTTP timeout in seconds")
@click.option("--log-level", default=_settings.log_level, show_default=True)
def main(base_url: str, verify_ssl: bool, agent_name: str, timeout: float, log_level: str) -> None:
    """Expose the CollabDoc API as MCP tools over stdio."""
    configure_logging(log_level, stream=sys.stderr)

    client = CollabDocClient(base_url=base_url, verify_ssl=verify_ssl, timeout_seconds=timeout)
    server = build_server(client, agent_name=agent_name)

    logger.info("CollabDoc MCP server running", extra={"base_url": base_url})
    try:
        server.run(transport="stdio")
    finally:
        asyncio.run(client.aclose())


if __name__ == "__main__":
    main()
