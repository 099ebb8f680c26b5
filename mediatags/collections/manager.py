"""Tag collection hierarchy with structural mutation.

This module implements:
- An arena of tag collections keyed by id, rooted at ROOT_TAG_COLLECTION_ID
- A reverse index from member id to owning collection, kept in step with
  every mutation
- Recursive tag lookup and collection selection state
- Moving tags and collections while keeping the tree invariants:
  every id is a member of exactly one collection and there are no cycles
"""

from __future__ import annotations

import logging
from collections.abc import Collection as Container
from collections.abc import Iterable

from mediatags.core.exceptions import (
    CollectionNotFoundError,
    CycleError,
    HierarchyError,
    InvariantViolation,
    RootCollectionError,
    TagNotFoundError,
)
from mediatags.core.models import ROOT_TAG_COLLECTION_ID, TagCollection
from mediatags.storage.events import EventBus, EventPublisher, EventType

logger = logging.getLogger(__name__)

ROOT_COLLECTION_NAME = "Hierarchy"


class TagCollectionStore(EventPublisher):
    """Owns the tag collections and their membership lists.

    Collections are immutable; every mutation validates its preconditions
    first and then swaps the changed collections into the arena, so a
    rejected operation leaves the tree untouched.
    """

    def __init__(self, event_bus: EventBus | None = None):
        super().__init__(event_bus)
        self._collections: dict[str, TagCollection] = {}
        self._tag_owner: dict[str, str] = {}
        self._collection_owner: dict[str, str] = {}
        self.load([TagCollection(id=ROOT_TAG_COLLECTION_ID, name=ROOT_COLLECTION_NAME)])

    def __contains__(self, collection_id: object) -> bool:
        return collection_id in self._collections

    def __len__(self) -> int:
        return len(self._collections)

    @property
    def collection_list(self) -> list[TagCollection]:
        """All collections, root first."""
        return list(self._collections.values())

    def load(self, collections: Iterable[TagCollection]) -> None:
        """Replace the whole hierarchy, e.g. with a persisted snapshot.

        Raises:
            InvariantViolation: If the collections do not form a proper tree
        """
        arena = {c.id: c for c in collections}
        root = arena.pop(ROOT_TAG_COLLECTION_ID, None) or TagCollection(
            id=ROOT_TAG_COLLECTION_ID, name=ROOT_COLLECTION_NAME
        )
        arena = {root.id: root, **arena}
        previous = (self._collections, self._tag_owner, self._collection_owner)
        self._collections = arena
        self._reindex()
        try:
            self.check_invariants()
        except InvariantViolation:
            self._collections, self._tag_owner, self._collection_owner = previous
            raise

    def get(self, collection_id: str) -> TagCollection | None:
        """Get a collection by ID."""
        return self._collections.get(collection_id)

    def get_root_collection(self) -> TagCollection:
        """Get the root of the hierarchy."""
        return self._collections[ROOT_TAG_COLLECTION_ID]

    def children(self, collection: TagCollection | str) -> list[TagCollection]:
        """Get the sub-collections of a collection in display order."""
        col = self._resolve(collection)
        return [self._collections[c] for c in col.sub_collections]

    def owner_of_tag(self, tag_id: str) -> TagCollection | None:
        """Get the collection that currently contains a tag."""
        owner = self._tag_owner.get(tag_id)
        return self._collections[owner] if owner else None

    def owner_of_collection(self, collection_id: str) -> TagCollection | None:
        """Get the parent of a collection, None for the root."""
        owner = self._collection_owner.get(collection_id)
        return self._collections[owner] if owner else None

    # Creation and removal

    def add_tag_collection(
        self, name: str, parent: TagCollection | str
    ) -> TagCollection:
        """Create a collection as the last sub-collection of ``parent``.

        Raises:
            CollectionNotFoundError: If the parent does not exist
        """
        parent_col = self._resolve(parent)
        col = TagCollection(name=name)
        self._collections[col.id] = col
        self._collection_owner[col.id] = parent_col.id
        self._replace(parent_col.insert_collection(col.id))
        self._publish_event(
            EventType.COLLECTION_CREATED, collection_id=col.id, parent_id=parent_col.id
        )
        return col

    def rename_tag_collection(
        self, collection: TagCollection | str, name: str
    ) -> TagCollection:
        """Rename a collection."""
        col = self._resolve(collection).rename(name)
        self._replace(col)
        return col

    def remove_tag_collection(self, collection: TagCollection | str) -> list[str]:
        """Remove a collection together with its sub-collections.

        The tags inside are detached from the hierarchy; deleting them from
        the tag directory is up to the caller.

        Returns:
            IDs of the tags that were contained in the removed collections

        Raises:
            RootCollectionError: If asked to remove the root
        """
        col = self._resolve(collection)
        if col.is_root:
            raise RootCollectionError("remove")

        removed_tags = self.get_recursive_tags(col)
        removed_cols = self.subtree_ids(col)

        parent = self.owner_of_collection(col.id)
        for col_id in removed_cols:
            del self._collections[col_id]
            self._collection_owner.pop(col_id, None)
        for tag_id in removed_tags:
            self._tag_owner.pop(tag_id, None)
        if parent is not None:
            self._replace(parent.remove_collection(col.id))

        logger.debug(
            "Removed %d collections and detached %d tags",
            len(removed_cols),
            len(removed_tags),
        )
        self._publish_event(
            EventType.COLLECTION_DELETED,
            collection_id=col.id,
            removed_collections=removed_cols,
            removed_tags=removed_tags,
        )
        return removed_tags

    def attach_tag(
        self,
        tag_id: str,
        collection: TagCollection | str,
        index: int | None = None,
    ) -> TagCollection:
        """Make a tag that is not yet in the hierarchy a member of a collection.

        Raises:
            HierarchyError: If the tag already belongs to a collection
        """
        col = self._resolve(collection)
        if tag_id in self._tag_owner:
            raise HierarchyError(
                f"Tag {tag_id} already belongs to collection {self._tag_owner[tag_id]}"
            )
        col = col.insert_tag(tag_id, index)
        self._tag_owner[tag_id] = col.id
        self._replace(col)
        return col

    def detach_tag(self, tag_id: str) -> TagCollection | None:
        """Remove a tag from whichever collection contains it.

        Returns:
            The updated former owner, or None if the tag was not a member
        """
        owner = self.owner_of_tag(tag_id)
        if owner is None:
            return None
        owner = owner.remove_tag(tag_id)
        del self._tag_owner[tag_id]
        self._replace(owner)
        return owner

    # Traversal

    def get_recursive_tags(self, collection: TagCollection | str) -> list[str]:
        """Flatten all tag ids reachable from a collection.

        Own tags come first, followed by the tags of each sub-collection in
        ``sub_collections`` order, depth-first.
        """
        col = self._resolve(collection)
        tags = list(col.tags)
        for sub_id in col.sub_collections:
            tags.extend(self.get_recursive_tags(sub_id))
        return tags

    def is_selected(
        self, collection: TagCollection | str, selection: Container[str]
    ) -> bool:
        """Check whether every tag below a collection is selected.

        A collection without any tags below it is never selected.
        """
        tags = self.get_recursive_tags(collection)
        return bool(tags) and all(t in selection for t in tags)

    def is_descendant(self, collection_id: str, ancestor_id: str) -> bool:
        """Check if ``collection_id`` lies strictly below ``ancestor_id``."""
        current = self._collection_owner.get(collection_id)
        while current is not None:
            if current == ancestor_id:
                return True
            current = self._collection_owner.get(current)
        return False

    def subtree_ids(self, collection: TagCollection | str) -> list[str]:
        """Get the ids of a collection and every collection below it."""
        col = self._resolve(collection)
        ids = [col.id]
        for sub_id in col.sub_collections:
            ids.extend(self.subtree_ids(sub_id))
        return ids

    # Moving

    def move_tag(
        self,
        tag_id: str,
        target: TagCollection | str,
        insertion_index: int | None = None,
    ) -> TagCollection:
        """Move a tag into ``target`` at ``insertion_index``.

        The index refers to the target's tag list after the tag has been
        taken out of its current collection; None appends.

        Returns:
            The updated target collection

        Raises:
            TagNotFoundError: If the tag is not in any collection
            CollectionNotFoundError: If the target does not exist
        """
        target_col = self._resolve(target)
        origin = self.owner_of_tag(tag_id)
        if origin is None:
            logger.error("Could not find original collection when moving tag %s", tag_id)
            raise TagNotFoundError(tag_id)

        origin = origin.remove_tag(tag_id)
        if origin.id == target_col.id:
            target_col = origin
        target_col = target_col.insert_tag(tag_id, insertion_index)

        self._tag_owner[tag_id] = target_col.id
        self._replace(*_distinct(origin, target_col))
        return target_col

    def move_tag_before(self, tag_id: str, anchor_tag_id: str) -> TagCollection:
        """Move a tag to the position of another tag it was dropped on.

        The position is the anchor's index before the moved tag is taken out,
        as in a drag-and-drop onto the anchor.

        Raises:
            TagNotFoundError: If either tag is not in any collection
        """
        anchor_owner = self.owner_of_tag(anchor_tag_id)
        if anchor_owner is None:
            raise TagNotFoundError(anchor_tag_id)
        if self.owner_of_tag(tag_id) is None:
            raise TagNotFoundError(tag_id)
        index = anchor_owner.tags.index(anchor_tag_id)
        return self.move_tag(tag_id, anchor_owner, index)

    def move_collection(
        self,
        collection: TagCollection | str,
        target: TagCollection | str,
        insertion_index: int | None = None,
    ) -> TagCollection:
        """Move a collection under ``target`` at ``insertion_index``.

        Returns:
            The updated target collection

        Raises:
            RootCollectionError: If asked to move the root
            CycleError: If the target is the collection or one of its descendants
            CollectionNotFoundError: If either collection does not exist
        """
        col = self._resolve(collection)
        target_col = self._resolve(target)
        if col.is_root:
            raise RootCollectionError("move")
        if col.id == target_col.id or self.is_descendant(target_col.id, col.id):
            raise CycleError(col.id, target_col.id)

        origin = self.owner_of_collection(col.id)
        if origin is None:
            raise InvariantViolation([f"collection {col.id} has no parent"])

        origin = origin.remove_collection(col.id)
        if origin.id == target_col.id:
            target_col = origin
        target_col = target_col.insert_collection(col.id, insertion_index)

        self._collection_owner[col.id] = target_col.id
        self._replace(*_distinct(origin, target_col))
        return target_col

    # Consistency

    def check_invariants(self) -> None:
        """Verify that the collections form a single tree.

        Raises:
            InvariantViolation: Listing every problem found
        """
        problems: list[str] = []
        tag_seen: dict[str, str] = {}
        col_seen: dict[str, str] = {}

        for col in self._collections.values():
            for tag_id in col.tags:
                if tag_id in tag_seen:
                    problems.append(
                        f"tag {tag_id} is in both {tag_seen[tag_id]} and {col.id}"
                    )
                tag_seen[tag_id] = col.id
            for sub_id in col.sub_collections:
                if sub_id not in self._collections:
                    problems.append(f"{col.id} lists unknown collection {sub_id}")
                elif sub_id == ROOT_TAG_COLLECTION_ID:
                    problems.append(f"root collection is listed inside {col.id}")
                elif sub_id in col_seen:
                    problems.append(
                        f"collection {sub_id} is in both {col_seen[sub_id]} and {col.id}"
                    )
                col_seen[sub_id] = col.id

        # Anything not reachable from the root is orphaned or part of a cycle
        reachable: set[str] = set()
        pending = [ROOT_TAG_COLLECTION_ID]
        while pending:
            col_id = pending.pop()
            if col_id in reachable or col_id not in self._collections:
                continue
            reachable.add(col_id)
            pending.extend(self._collections[col_id].sub_collections)
        for col_id in self._collections.keys() - reachable:
            problems.append(f"collection {col_id} is not reachable from the root")

        if problems:
            raise InvariantViolation(problems)

    def _reindex(self) -> None:
        self._tag_owner = {}
        self._collection_owner = {}
        for col in self._collections.values():
            for tag_id in col.tags:
                self._tag_owner.setdefault(tag_id, col.id)
            for sub_id in col.sub_collections:
                self._collection_owner.setdefault(sub_id, col.id)

    def _resolve(self, collection: TagCollection | str) -> TagCollection:
        col_id = collection if isinstance(collection, str) else collection.id
        col = self._collections.get(col_id)
        if col is None:
            raise CollectionNotFoundError(col_id)
        return col

    def _replace(self, *collections: TagCollection) -> None:
        for col in collections:
            self._collections[col.id] = col
        for col in collections:
            self._publish_event(
                EventType.COLLECTION_UPDATED, collection_id=col.id, collection=col
            )


def _distinct(origin: TagCollection, target: TagCollection) -> tuple[TagCollection, ...]:
    return (target,) if origin.id == target.id else (origin, target)
