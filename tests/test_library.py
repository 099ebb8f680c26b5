"""Tests for the library coordinating tags, collections and selection."""

import inspect

import pytest

from mediatags.collections.tags import DEFAULT_TAG_NAME
from mediatags.core.exceptions import CollectionNotFoundError
from mediatags.core.models import ROOT_TAG_COLLECTION_ID
from mediatags.library import Library, TagDirectory


class TestLibrary:
    """Test tag directory operations."""

    def test_add_tag_defaults_to_root(self, library) -> None:
        tag = library.add_tag()

        assert tag.name == DEFAULT_TAG_NAME
        assert library.get(tag.id) == tag
        assert library.collections.owner_of_tag(tag.id).id == ROOT_TAG_COLLECTION_ID

    def test_add_tag_to_unknown_collection(self, library) -> None:
        with pytest.raises(CollectionNotFoundError):
            library.add_tag("Cat", "missing")

        assert len(library.tags) == 0

    def test_remove_tag_cleans_up(self, library) -> None:
        tag = library.add_tag("Cat")
        library.selection.select(tag.id)

        assert library.remove_tag(tag) is True

        assert library.get(tag.id) is None
        assert library.collections.get_root_collection().tags == ()
        assert tag.id not in library.selection

    def test_remove_unknown_tag(self, library) -> None:
        assert library.remove_tag("missing") is False

    def test_remove_collection_deletes_content(self, library) -> None:
        animals = library.add_collection("Animals", ROOT_TAG_COLLECTION_ID)
        birds = library.add_collection("Birds", animals)
        cat = library.add_tag("Cat", animals)
        owl = library.add_tag("Owl", birds)
        keep = library.add_tag("Keep")
        library.selection.select_all([cat.id, keep.id])

        removed = library.remove_collection(animals)

        assert removed == [cat.id, owl.id]
        assert [t.id for t in library.tags.tag_list] == [keep.id]
        assert library.selection.ids == [keep.id]
        library.collections.check_invariants()

    def test_shared_event_bus(self, library) -> None:
        assert library.tags.event_bus is library.event_bus
        assert library.collections.event_bus is library.event_bus
        assert library.selection.event_bus is library.event_bus
        assert library.comments.event_bus is library.event_bus


def _exercise_directory(directory: TagDirectory, root_id: str) -> None:
    animals = directory.add_collection("Animals", root_id)
    cat = directory.add_tag("Cat")

    assert directory.get(cat.id) == cat
    assert directory.remove_tag(cat) is True
    assert directory.get(cat.id) is None
    assert directory.remove_collection(animals) == []


class TestTagDirectoryProtocol:
    """Test the library through the tag directory interface only."""

    def test_library_is_a_directory(self, library) -> None:
        _exercise_directory(library, ROOT_TAG_COLLECTION_ID)

        assert len(library.collections) == 1
        assert len(library.tags) == 0

    def test_protocol_methods(self) -> None:
        members = {
            name for name in vars(TagDirectory) if not name.startswith("_")
        }

        assert members == {
            "get",
            "add_tag",
            "remove_tag",
            "add_collection",
            "remove_collection",
        }
        for name in members:
            params = list(inspect.signature(getattr(TagDirectory, name)).parameters)
            assert params == list(inspect.signature(getattr(Library, name)).parameters)[
                : len(params)
            ]
