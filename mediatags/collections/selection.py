"""Set of tags the user has marked active for filtering files."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from mediatags.core.models import TagCollection
from mediatags.storage.events import EventBus, EventPublisher, EventType


class TagSelection(EventPublisher):
    """Ordered, duplicate-free selection of tag ids.

    Every change publishes ``SELECTION_CHANGED`` with the new selection so
    the file list can be refetched.
    """

    def __init__(self, event_bus: EventBus | None = None):
        super().__init__(event_bus)
        self._ids: list[str] = []

    def __contains__(self, tag_id: object) -> bool:
        return tag_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def ids(self) -> list[str]:
        """Snapshot of the selected tag ids."""
        return list(self._ids)

    def select(self, tag_id: str) -> None:
        """Add a tag to the selection."""
        self.select_all([tag_id])

    def deselect(self, tag_id: str) -> None:
        """Remove a tag from the selection."""
        self.deselect_all([tag_id])

    def select_all(self, tag_ids: Iterable[str]) -> None:
        """Add every tag not selected yet, keeping the existing order."""
        added = False
        for tag_id in tag_ids:
            if tag_id not in self._ids:
                self._ids.append(tag_id)
                added = True
        if added:
            self._changed()

    def deselect_all(self, tag_ids: Iterable[str]) -> None:
        """Remove the given tags from the selection."""
        removed = set(tag_ids)
        remaining = [t for t in self._ids if t not in removed]
        if len(remaining) != len(self._ids):
            self._ids = remaining
            self._changed()

    def clear(self) -> None:
        """Deselect everything."""
        if self._ids:
            self._ids = []
            self._changed()

    def toggle_tag(self, tag_id: str) -> bool:
        """Flip the selection of a single tag.

        Returns:
            True if the tag is selected afterwards
        """
        if tag_id in self._ids:
            self.deselect(tag_id)
            return False
        self.select(tag_id)
        return True

    def toggle_collection(
        self, collection: TagCollection | str, store
    ) -> bool:
        """Select or deselect all tags below a collection.

        A fully selected collection has all its tags removed from the
        selection; otherwise the missing ones are added.

        Args:
            collection: Clicked collection
            store: TagCollectionStore owning the collection

        Returns:
            True if the collection is selected afterwards
        """
        tags = store.get_recursive_tags(collection)
        if store.is_selected(collection, self):
            self.deselect_all(tags)
            return False
        self.select_all(tags)
        return store.is_selected(collection, self)

    def _changed(self) -> None:
        self._publish_event(EventType.SELECTION_CHANGED, tag_ids=self.ids)
