"""Tag collection hierarchy and the tag panel built on it.

This package provides:
- Tag directory and collection hierarchy stores
- Moving tags and collections without breaking the tree
- Recursive selection of the tags below a collection
- Render tree construction with session expand state
"""

from .manager import TagCollectionStore
from .selection import TagSelection
from .tags import TagStore
from .tree import (
    ALL_TAGS_ID,
    SYSTEM_TAGS_ID,
    ExpandState,
    TagTreeController,
    TreeNode,
    build_render_tree,
    default_expand_state,
    set_expand_state_recursively,
)

__all__ = [
    # Stores
    "TagStore",
    "TagCollectionStore",
    "TagSelection",
    # Tree
    "TreeNode",
    "ExpandState",
    "TagTreeController",
    "build_render_tree",
    "default_expand_state",
    "set_expand_state_recursively",
    "SYSTEM_TAGS_ID",
    "ALL_TAGS_ID",
]
