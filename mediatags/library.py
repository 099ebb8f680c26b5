"""Library: the stores of one session wired to a shared event bus.

The library is the in-memory tag directory. It coordinates the tag store,
the collection hierarchy and the selection so that removing a tag or a
collection leaves no dangling membership or selection behind.
"""

from __future__ import annotations

import logging
from typing import Protocol

from mediatags.collections.manager import TagCollectionStore
from mediatags.collections.selection import TagSelection
from mediatags.collections.tags import DEFAULT_TAG_NAME, TagStore
from mediatags.core.exceptions import CollectionNotFoundError
from mediatags.core.models import Tag, TagCollection
from mediatags.storage.comments import CommentStore
from mediatags.storage.events import EventBus

logger = logging.getLogger(__name__)


class TagDirectory(Protocol):
    """Service owning the existence of tags and collections."""

    def get(self, tag_id: str) -> Tag | None:
        """Get a tag by ID."""
        ...

    def add_tag(self, name: str) -> Tag:
        """Create a tag."""
        ...

    def remove_tag(self, tag: Tag | str) -> bool:
        """Delete a tag."""
        ...

    def add_collection(self, name: str, parent: TagCollection | str) -> TagCollection:
        """Create a collection below ``parent``."""
        ...

    def remove_collection(self, collection: TagCollection | str) -> list[str]:
        """Delete a collection with its content."""
        ...


class Library:
    """In-memory tag directory and UI state of one session."""

    def __init__(self, event_bus: EventBus | None = None):
        self.event_bus = event_bus or EventBus()
        self.tags = TagStore(self.event_bus)
        self.collections = TagCollectionStore(self.event_bus)
        self.selection = TagSelection(self.event_bus)
        self.comments = CommentStore(self.event_bus)

    def get(self, tag_id: str) -> Tag | None:
        """Get a tag by ID."""
        return self.tags.get(tag_id)

    def add_tag(
        self,
        name: str = DEFAULT_TAG_NAME,
        collection: TagCollection | str | None = None,
    ) -> Tag:
        """Create a tag as the last member of a collection (the root by default)."""
        target = collection or self.collections.get_root_collection()
        target_id = target if isinstance(target, str) else target.id
        if target_id not in self.collections:
            raise CollectionNotFoundError(target_id)
        tag = self.tags.add_tag(name)
        self.collections.attach_tag(tag.id, target_id)
        return tag

    def remove_tag(self, tag: Tag | str) -> bool:
        """Delete a tag from the directory, the hierarchy and the selection."""
        tag_id = tag if isinstance(tag, str) else tag.id
        self.collections.detach_tag(tag_id)
        self.selection.deselect(tag_id)
        return self.tags.remove_tag(tag_id)

    def add_collection(self, name: str, parent: TagCollection | str) -> TagCollection:
        """Create a collection below ``parent``."""
        return self.collections.add_tag_collection(name, parent)

    def remove_collection(self, collection: TagCollection | str) -> list[str]:
        """Delete a collection, its sub-collections and all tags inside them.

        Returns:
            IDs of the deleted tags
        """
        removed = self.collections.remove_tag_collection(collection)
        self.selection.deselect_all(removed)
        for tag_id in removed:
            self.tags.remove_tag(tag_id)
        logger.info("Removed collection with %d tags", len(removed))
        return removed
