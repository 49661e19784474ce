"""Event publisher stub implementation.

In-memory stub for EventPublisherProtocol for development and testing.
Follows DEV_MODE_WATERMARK pattern for dev stubs.

WARNING: This is a development stub. Not for production use.
"""

from __future__ import annotations

from typing import Any

from structlog import get_logger

from badge_consensus.application.ports.event_publisher import EventPublisherProtocol

# DEV_MODE_WATERMARK per dev stub convention
DEV_MODE_WATERMARK: str = "DEV_STUB:EventPublisherStub:v1"

logger = get_logger(__name__)


class EventPublisherStub(EventPublisherProtocol):
    """In-memory event sink.

    Attributes:
        events: Published events in publication order.
    """

    def __init__(self) -> None:
        """Initialize with no events."""
        self.events: list[Any] = []

    async def publish(self, event: Any) -> None:
        """Append an event and log it.

        Args:
            event: The event payload to publish.
        """
        self.events.append(event)
        logger.info("event_published", event_type=event.event_type, **event.to_dict())

    def events_of_type(self, event_type: str) -> list[Any]:
        """Published events with the given event_type."""
        return [e for e in self.events if e.event_type == event_type]

    def clear(self) -> None:
        """Drop all recorded events."""
        self.events.clear()
