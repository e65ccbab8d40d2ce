"""
HTTP API configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Server binding and CORS configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from collabdoc.configs.base import BaseSettings


class ApiSettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="API_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8000, description="Bind port")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")
    public_base_url: str = Field(
        default="",
        description="Public URL of the web UI, used to build invite links",
    )
