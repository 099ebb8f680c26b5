"""Event system for forwarding in-memory changes to persistence.

The in-memory model is the source of truth. Changes are applied first and
then published; subscribers (typically a persistence backend) are invoked
fire-and-forget and their failures never reach the publisher.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Any

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events that can occur."""

    # Tag events
    TAG_CREATED = auto()
    TAG_UPDATED = auto()
    TAG_DELETED = auto()

    # Collection events
    COLLECTION_CREATED = auto()
    COLLECTION_UPDATED = auto()
    COLLECTION_DELETED = auto()

    # UI events
    SELECTION_CHANGED = auto()

    # File events
    COMMENT_UPDATED = auto()


@dataclass
class Event:
    """An event that occurred in the library."""

    type: EventType
    timestamp: datetime
    data: dict[str, Any]

    @property
    def tag_id(self) -> str | None:
        """Get tag id if this is a tag-related event."""
        return self.data.get("tag_id")

    @property
    def collection_id(self) -> str | None:
        """Get collection id if this is a collection-related event."""
        return self.data.get("collection_id")


class EventBus:
    """Simple event bus for publishing and subscribing to events."""

    def __init__(self, history_limit: int = 1000):
        self._subscribers: dict[EventType, list[Callable[[Event], None]]] = {}
        self._history: list[Event] = []
        self._history_limit = history_limit

    def subscribe(
        self, event_type: EventType, handler: Callable[[Event], None]
    ) -> None:
        """Subscribe to events of a specific type."""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(handler)

    def unsubscribe(
        self, event_type: EventType, handler: Callable[[Event], None]
    ) -> None:
        """Unsubscribe from events."""
        if event_type in self._subscribers:
            self._subscribers[event_type].remove(handler)

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribers."""
        self._history.append(event)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit :]

        for handler in self._subscribers.get(event.type, []):
            try:
                handler(event)
            except Exception:
                # Nothing is retried or rolled back
                logger.warning(
                    "Subscriber %r failed handling %s", handler, event.type.name,
                    exc_info=True,
                )

    def get_history(
        self, event_type: EventType | None = None, limit: int = 100
    ) -> list[Event]:
        """Get event history."""
        history = self._history

        if event_type:
            history = [e for e in history if e.type == event_type]

        return history[-limit:]

    def clear_history(self) -> None:
        """Clear event history."""
        self._history.clear()


class EventPublisher:
    """Mixin for classes that publish events."""

    def __init__(self, event_bus: EventBus | None = None):
        self.event_bus = event_bus or EventBus()

    def _publish_event(self, event_type: EventType, **data) -> None:
        """Publish an event."""
        event = Event(type=event_type, timestamp=datetime.now(), data=data)
        self.event_bus.publish(event)
