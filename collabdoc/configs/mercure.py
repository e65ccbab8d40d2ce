"""
Mercure hub configuration settings.

Controls where change notifications are published and how the
publisher JWT is obtained.

Dependencies: pydantic, pydantic_settings
System role: Notification relay configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from collabdoc.configs.base import BaseSettings


class MercureSettings(BaseSettings):
    """Mercure SSE hub configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MERCURE_",
        case_sensitive=False,
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Publish updates to the hub")
    hub_url: str = Field(
        default="http://localhost:3000/.well-known/mercure",
        description="Internal URL of the Mercure hub publish endpoint",
    )
    jwt_secret: str = Field(
        default="!ChangeThisMercureHubJWTSecretKey!",
        description="HS256 secret shared with the hub for publisher tokens",
    )
    jwt_algorithm: str = Field(default="HS256", description="Publisher JWT algorithm")
    topic_prefix: str = Field(
        default="",
        description="Prefix prepended to every topic (e.g. https://example.com)",
    )
    timeout: float = Field(default=5.0, description="Publish request timeout in seconds")
