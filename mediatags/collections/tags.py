"""Tag directory: owns which tags exist and what they are called.

Where a tag sits in the hierarchy is owned by the tag collections, see
:mod:`mediatags.collections.manager`.
"""

from __future__ import annotations

import logging

from mediatags.core.models import Tag
from mediatags.storage.events import EventBus, EventPublisher, EventType

logger = logging.getLogger(__name__)

DEFAULT_TAG_NAME = "New tag"


class TagStore(EventPublisher):
    """In-memory registry of tags."""

    def __init__(self, event_bus: EventBus | None = None):
        super().__init__(event_bus)
        self._tags: dict[str, Tag] = {}

    def __contains__(self, tag_id: object) -> bool:
        return tag_id in self._tags

    def __len__(self) -> int:
        return len(self._tags)

    @property
    def tag_list(self) -> list[Tag]:
        """All tags in creation order."""
        return list(self._tags.values())

    def get(self, tag_id: str) -> Tag | None:
        """Get a tag by ID.

        Args:
            tag_id: Tag ID

        Returns:
            Tag or None if not found
        """
        return self._tags.get(tag_id)

    def add_tag(self, name: str = DEFAULT_TAG_NAME) -> Tag:
        """Create a new tag.

        Args:
            name: Display name

        Returns:
            Created tag
        """
        tag = Tag(name=name)
        self.put(tag)
        self._publish_event(EventType.TAG_CREATED, tag_id=tag.id, tag=tag)
        return tag

    def put(self, tag: Tag) -> None:
        """Register an existing tag, e.g. one restored by a persistence layer."""
        self._tags[tag.id] = tag

    def rename_tag(self, tag_id: str, name: str) -> Tag | None:
        """Rename a tag.

        Args:
            tag_id: Tag ID
            name: New name

        Returns:
            Updated tag or None if not found
        """
        tag = self._tags.get(tag_id)
        if tag is None:
            return None
        tag = tag.rename(name)
        self._tags[tag_id] = tag
        self._publish_event(EventType.TAG_UPDATED, tag_id=tag_id, tag=tag)
        return tag

    def remove_tag(self, tag: Tag | str) -> bool:
        """Forget a tag.

        Args:
            tag: Tag or tag ID

        Returns:
            True if the tag existed
        """
        tag_id = tag if isinstance(tag, str) else tag.id
        if self._tags.pop(tag_id, None) is None:
            return False
        logger.debug("Removed tag %s", tag_id)
        self._publish_event(EventType.TAG_DELETED, tag_id=tag_id)
        return True
