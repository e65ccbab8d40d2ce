"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management

Models and CRUD singletons live in the models/ and CRUD/ sub-packages.

Dependencies: sqlalchemy, collabdoc.configs
System role: Database adapter providing persistent storage for sessions,
documents, annotations and decisions.
"""

from collabdoc.boundary.db.base import Base, TimestampMixin, UUIDMixin
from collabdoc.boundary.db.connection import (
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
]
