"""Core data models for tags, tag collections and media files.

Key components:
- Tag: Immutable user-defined label attachable to files
- TagCollection: Immutable node of the tag hierarchy with ordered members
- MediaFile: In-memory file entity whose comment is edited in place
"""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

import msgspec

ROOT_TAG_COLLECTION_ID = "hierarchy"


def generate_id() -> str:
    """Create a new random identifier."""
    return str(uuid4())


class Tag(msgspec.Struct, frozen=True, kw_only=True):
    """A user-defined label. Identity is the id, the name may change."""

    id: str = msgspec.field(default_factory=generate_id)
    name: str
    date_added: datetime = msgspec.field(default_factory=datetime.now)

    def rename(self, name: str) -> Tag:
        """Return a copy of this tag with a new name."""
        return msgspec.structs.replace(self, name=name)

    def __str__(self) -> str:
        return self.name


class TagCollection(msgspec.Struct, frozen=True, kw_only=True):
    """A named group of tags and nested collections.

    The parent of a collection is not stored. It is implied by the single
    collection whose ``sub_collections`` lists this collection's id. Member
    order is significant: it is the render order and the reference for
    drop positions when moving.
    """

    id: str = msgspec.field(default_factory=generate_id)
    name: str
    tags: tuple[str, ...] = ()
    sub_collections: tuple[str, ...] = ()
    date_added: datetime = msgspec.field(default_factory=datetime.now)

    @property
    def is_root(self) -> bool:
        """Check if this is the root of the hierarchy."""
        return self.id == ROOT_TAG_COLLECTION_ID

    def insert_tag(self, tag_id: str, index: int | None = None) -> TagCollection:
        """Return a copy with ``tag_id`` inserted at ``index`` (appended if None)."""
        return msgspec.structs.replace(
            self, tags=_insert(self.tags, tag_id, index)
        )

    def remove_tag(self, tag_id: str) -> TagCollection:
        """Return a copy without ``tag_id``."""
        return msgspec.structs.replace(
            self, tags=tuple(t for t in self.tags if t != tag_id)
        )

    def insert_collection(
        self, collection_id: str, index: int | None = None
    ) -> TagCollection:
        """Return a copy with ``collection_id`` inserted as a sub-collection."""
        return msgspec.structs.replace(
            self, sub_collections=_insert(self.sub_collections, collection_id, index)
        )

    def remove_collection(self, collection_id: str) -> TagCollection:
        """Return a copy without the sub-collection ``collection_id``."""
        return msgspec.structs.replace(
            self,
            sub_collections=tuple(
                c for c in self.sub_collections if c != collection_id
            ),
        )

    def rename(self, name: str) -> TagCollection:
        """Return a copy of this collection with a new name."""
        return msgspec.structs.replace(self, name=name)


def _insert(items: tuple[str, ...], item: str, index: int | None) -> tuple[str, ...]:
    members = list(items)
    if index is None:
        members.append(item)
    else:
        members.insert(index, item)
    return tuple(members)


class MediaFile(msgspec.Struct, kw_only=True):
    """A media file known to the library.

    Only the comment is edited through this model; everything else is
    supplied by the file metadata provider.
    """

    id: str = msgspec.field(default_factory=generate_id)
    name: str
    absolute_path: str
    extension: str
    size: int = 0
    width: int = 0
    height: int = 0
    date_added: datetime = msgspec.field(default_factory=datetime.now)
    comments: str = ""
    tags: list[str] = msgspec.field(default_factory=list)

    def set_comment(self, text: str) -> str:
        """Replace the free-text comment of this file."""
        self.comments = text
        return text
