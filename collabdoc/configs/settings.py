"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from collabdoc.configs.agent import AgentSettings
from collabdoc.configs.api import ApiSettings
from collabdoc.configs.base import BaseSettings
from collabdoc.configs.database import DatabaseSettings
from collabdoc.configs.mercure import MercureSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    mercure: MercureSettings = MercureSettings()
    api: ApiSettings = ApiSettings()
    agent: AgentSettings = AgentSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from collabdoc.configs import get_settings
        settings = get_settings()
    """
    return Settings()
