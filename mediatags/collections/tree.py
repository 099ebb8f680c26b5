"""Render tree for the tag panel.

The tree is recomputed from scratch by :func:`build_render_tree` whenever
one of its inputs changes: the collection hierarchy, the expand state or
the selection. Nothing is tracked implicitly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection as Container
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import TYPE_CHECKING, Any

from mediatags.core.models import ROOT_TAG_COLLECTION_ID, Tag, TagCollection

if TYPE_CHECKING:
    from mediatags.collections.manager import TagCollectionStore
    from mediatags.library import Library
    from mediatags.search.query import TagLookup

logger = logging.getLogger(__name__)

SYSTEM_TAGS_ID = "system-tags"
ALL_TAGS_ID = "all-tags"
UNTAGGED_ID = "untagged"

NEW_COLLECTION_NAME = "New collection"

ExpandState = dict[str, bool]


class Icon(str, Enum):
    """Icons shown in front of tree nodes."""

    TAG = "tag"
    TAG_BLANCO = "tag-blanco"
    TAG_GROUP = "tag-group"
    TAG_GROUP_OPEN = "tag-group-open"


class NodeKind(str, Enum):
    """What a tree node stands for."""

    COLLECTION = "collection"
    TAG = "tag"
    SYSTEM = "system"


@dataclass
class TreeNode:
    """A node of the rendered tag tree."""

    id: str
    label: str
    kind: NodeKind
    icon: Icon
    is_selected: bool = False
    has_caret: bool = False
    is_expanded: bool = False
    child_nodes: list[TreeNode] = field(default_factory=list)

    # Callbacks for the node's context menu and drop targets
    actions: dict[str, Callable[..., Any]] = field(
        default_factory=dict, repr=False, compare=False
    )

    def walk(self):
        """Yield this node and all nodes below it, depth-first."""
        yield self
        for child in self.child_nodes:
            yield from child.walk()


def default_expand_state() -> ExpandState:
    """Expand state at the start of a session: only the two top nodes open."""
    return {ROOT_TAG_COLLECTION_ID: True, SYSTEM_TAGS_ID: True}


def set_expand_state_recursively(
    collection: TagCollection | str,
    value: bool,
    expand_state: ExpandState,
    store: TagCollectionStore,
) -> ExpandState:
    """Set the expand flag of a collection and every collection below it.

    The state is updated in place and returned.
    """
    col_id = collection if isinstance(collection, str) else collection.id
    for sub in store.children(col_id):
        set_expand_state_recursively(sub, value, expand_state, store)
    expand_state[col_id] = value
    return expand_state


def build_render_tree(
    root: TagCollection,
    expand_state: ExpandState,
    store: TagCollectionStore,
    tags: TagLookup,
    selection: Container[str],
    controller: TagTreeController | None = None,
) -> TreeNode:
    """Build the render tree below ``root``.

    Each collection node lists its sub-collections first, in
    ``sub_collections`` order, followed by its tags in ``tags`` order. Tag
    ids unknown to ``tags`` are left out. When a controller is given the
    nodes carry its callbacks as actions. ``root`` is looked up in the
    store again, so an outdated copy renders the current members.
    """
    root = store.get(root.id) or root
    child_nodes = [
        build_render_tree(sub, expand_state, store, tags, selection, controller)
        for sub in store.children(root)
    ]
    for tag_id in root.tags:
        tag = tags.get(tag_id)
        if tag is not None:
            child_nodes.append(_tag_node(tag, selection, controller))

    expanded = expand_state.get(root.id, False)
    return TreeNode(
        id=root.id,
        label=root.name,
        kind=NodeKind.COLLECTION,
        icon=Icon.TAG_GROUP_OPEN if expanded else Icon.TAG_GROUP,
        is_selected=store.is_selected(root, selection),
        has_caret=True,
        is_expanded=expanded,
        child_nodes=child_nodes,
        actions=_collection_actions(root, controller),
    )


def _tag_node(
    tag: Tag, selection: Container[str], controller: TagTreeController | None
) -> TreeNode:
    actions = {}
    if controller is not None:
        actions = {
            "remove": partial(controller.remove_tag, tag.id),
            "rename": partial(controller.rename_tag, tag.id),
            "move_tag": partial(controller.drop_tag_on_tag, tag.id),
        }
    return TreeNode(
        id=tag.id,
        label=tag.name,
        kind=NodeKind.TAG,
        icon=Icon.TAG,
        is_selected=tag.id in selection,
        actions=actions,
    )


def _collection_actions(
    col: TagCollection, controller: TagTreeController | None
) -> dict[str, Callable[..., Any]]:
    if controller is None:
        return {}
    actions = {
        "add_tag": partial(controller.add_tag, col.id),
        "add_collection": partial(controller.add_collection, col.id),
        "expand": partial(controller.expand, col.id),
        "expand_all": partial(controller.expand_all, col.id),
        "collapse_all": partial(controller.collapse_all, col.id),
        "move_collection": partial(controller.drop_collection_on_collection, col.id),
        "move_tag": partial(controller.drop_tag_on_collection, col.id),
    }
    # The root hierarchy cannot be deleted
    if not col.is_root:
        actions["remove"] = partial(controller.remove_collection, col.id)
    return actions


class TagTreeController:
    """Event handlers of the tag panel.

    Owns the session's expand state and turns clicks, expand/collapse and
    drag-and-drop into library mutations. :meth:`contents` renders the
    current state.
    """

    def __init__(
        self,
        library: Library,
        count_untagged: Callable[[], int] | None = None,
        untagged_label: str = "Untagged",
    ):
        self.library = library
        self.expand_state: ExpandState = default_expand_state()
        self.count_untagged = count_untagged
        self.untagged_label = untagged_label

    # Rendering

    def contents(self) -> list[TreeNode]:
        """Render the hierarchy followed by the system tags node."""
        lib = self.library
        hierarchy = build_render_tree(
            lib.collections.get_root_collection(),
            self.expand_state,
            lib.collections,
            lib.tags,
            lib.selection,
            self,
        )
        return [hierarchy, self._system_tags()]

    def _system_tags(self) -> TreeNode:
        label = self.untagged_label
        if self.count_untagged is not None:
            label = f"{label} ({self.count_untagged()})"
        return TreeNode(
            id=SYSTEM_TAGS_ID,
            label="System tags",
            kind=NodeKind.SYSTEM,
            icon=Icon.TAG_GROUP_OPEN,
            has_caret=True,
            is_expanded=self.expand_state.get(SYSTEM_TAGS_ID, False),
            child_nodes=[
                TreeNode(
                    id=ALL_TAGS_ID,
                    label="All tags",
                    kind=NodeKind.SYSTEM,
                    icon=Icon.TAG,
                    is_selected=len(self.library.selection) == 0,
                ),
                TreeNode(
                    id=UNTAGGED_ID,
                    label=label,
                    kind=NodeKind.SYSTEM,
                    icon=Icon.TAG_BLANCO,
                ),
            ],
        )

    # Expand state

    def expand(self, node_id: str) -> None:
        """Expand a single node."""
        self.expand_state = {**self.expand_state, node_id: True}

    def collapse(self, node_id: str) -> None:
        """Collapse a single node."""
        self.expand_state = {**self.expand_state, node_id: False}

    def expand_all(self, collection_id: str) -> None:
        """Expand a collection and everything below it."""
        self.expand_state = set_expand_state_recursively(
            collection_id, True, dict(self.expand_state), self.library.collections
        )

    def collapse_all(self, collection_id: str) -> None:
        """Collapse a collection and everything below it."""
        self.expand_state = set_expand_state_recursively(
            collection_id, False, dict(self.expand_state), self.library.collections
        )

    # Selection

    def click(self, node_id: str) -> None:
        """Handle a click on a node.

        Clicking "All tags" clears the selection, a tag toggles itself and a
        collection toggles all tags below it.
        """
        lib = self.library
        if node_id == ALL_TAGS_ID:
            lib.selection.clear()
        elif node_id in lib.tags:
            lib.selection.toggle_tag(node_id)
        elif node_id in lib.collections:
            lib.selection.toggle_collection(node_id, lib.collections)
        else:
            logger.debug("Ignoring click on node %s", node_id)

    # Structure

    def add_tag(self, collection_id: str) -> Tag:
        """Create a tag with the default name in a collection."""
        return self.library.add_tag(collection=collection_id)

    def add_collection(self, collection_id: str) -> TagCollection:
        """Create a sub-collection and expand it straight away."""
        col = self.library.add_collection(NEW_COLLECTION_NAME, collection_id)
        self.expand(col.id)
        return col

    def remove_collection(self, collection_id: str) -> None:
        """Remove a collection with everything inside it."""
        removed = set(self.library.collections.subtree_ids(collection_id))
        self.library.remove_collection(collection_id)
        self.expand_state = {
            k: v for k, v in self.expand_state.items() if k not in removed
        }

    def remove_tag(self, tag_id: str) -> None:
        """Remove a tag."""
        self.library.remove_tag(tag_id)

    def rename_tag(self, tag_id: str, name: str) -> None:
        """Rename a tag."""
        self.library.tags.rename_tag(tag_id, name)

    def drop_tag_on_tag(self, anchor_tag_id: str, moved_tag_id: str) -> None:
        """Move a dragged tag to the position of the tag it was dropped on."""
        self.library.collections.move_tag_before(moved_tag_id, anchor_tag_id)

    def drop_tag_on_collection(self, collection_id: str, moved_tag_id: str) -> None:
        """Move a dragged tag to the end of a collection."""
        self.library.collections.move_tag(moved_tag_id, collection_id)

    def drop_collection_on_collection(
        self, collection_id: str, moved_collection_id: str
    ) -> None:
        """Move a dragged collection to the end of another collection."""
        self.library.collections.move_collection(moved_collection_id, collection_id)
