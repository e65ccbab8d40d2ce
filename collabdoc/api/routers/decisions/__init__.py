"""
Decisions router package.

Exports the router for decision and voting endpoints.
"""

from .decisions_router import router

__all__ = ["router"]
