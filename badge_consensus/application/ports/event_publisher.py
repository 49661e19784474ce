"""Event publisher port interface.

Informational events (approvals recorded, badges issued or invalidated) are
handed to this port after the action producing them has committed.
"""

from __future__ import annotations

from typing import Any, Protocol


class EventPublisherProtocol(Protocol):
    """Protocol for publishing domain events.

    Events are expected to expose an ``event_type`` string and a
    ``to_dict()`` method.
    """

    async def publish(self, event: Any) -> None:
        """Publish a single event.

        Args:
            event: The event payload to publish.
        """
        ...
