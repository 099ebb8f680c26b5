"""Build a library from a YAML outline of nested collections.

An outline looks like::

    tags: [Favorite]
    collections:
      - name: Animals
        tags: [Cat, Dog]
        collections:
          - name: Birds
            tags: [Owl]

The top level describes the root collection.
"""

from pathlib import Path
from typing import Any

import yaml

from mediatags.core.models import TagCollection
from mediatags.library import Library


def load_outline(path: Path) -> Library:
    """Read an outline file into a fresh library."""
    try:
        data = yaml.safe_load(Path(path).read_text()) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in outline: {e}")
    return build_library(data)


def build_library(outline: dict[str, Any]) -> Library:
    """Populate a fresh library from an outline mapping."""
    library = Library()
    _fill(library, library.collections.get_root_collection(), outline, "root")
    return library


def _fill(
    library: Library, collection: TagCollection, node: Any, where: str
) -> None:
    if not isinstance(node, dict):
        raise ValueError(f"Outline entry at {where} must be a mapping")

    tags = node.get("tags") or []
    if not isinstance(tags, list):
        raise ValueError(f"'tags' at {where} must be a list")
    for name in tags:
        library.add_tag(str(name), collection.id)

    children = node.get("collections") or []
    if not isinstance(children, list):
        raise ValueError(f"'collections' at {where} must be a list")
    for i, child in enumerate(children):
        child_where = f"{where}.collections[{i}]"
        if not isinstance(child, dict) or not child.get("name"):
            raise ValueError(f"Collection at {child_where} needs a name")
        sub = library.add_collection(str(child["name"]), collection.id)
        _fill(library, sub, child, child_where)


def find_tag_ids(library: Library, names: list[str]) -> list[str]:
    """Resolve tag names to ids.

    Raises:
        ValueError: If a name matches no tag
    """
    by_name: dict[str, str] = {}
    for tag in library.tags.tag_list:
        by_name.setdefault(tag.name, tag.id)
    missing = [n for n in names if n not in by_name]
    if missing:
        raise ValueError(f"Unknown tag(s): {', '.join(missing)}")
    return [by_name[n] for n in names]
