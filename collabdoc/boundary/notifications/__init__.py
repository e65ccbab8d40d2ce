"""Outbound change notifications (Mercure SSE hub)."""

from collabdoc.boundary.notifications.mercure_publisher import MercurePublisher

__all__ = ["MercurePublisher"]
