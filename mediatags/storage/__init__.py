"""In-memory change propagation and comment editing."""

from .comments import CommentStore
from .events import Event, EventBus, EventPublisher, EventType

__all__ = ["CommentStore", "Event", "EventBus", "EventPublisher", "EventType"]
