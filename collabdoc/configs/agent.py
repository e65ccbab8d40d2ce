"""
Agent adapter configuration settings.

Read by the MCP stdio server when no command-line override is given.

Dependencies: pydantic, pydantic_settings
System role: Agent tool adapter configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from collabdoc.configs.base import BaseSettings


class AgentSettings(BaseSettings):
    """MCP adapter configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COLLABDOC_AGENT_",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(default="https://localhost", description="Base URL of the REST API")
    agent_name: str = Field(default="Claude Assistant", description="Default agent pseudo")
    verify_ssl: bool = Field(default=False, description="Verify TLS certificates")
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
