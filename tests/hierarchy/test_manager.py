"""Tests for the tag collection hierarchy."""

import pytest

from mediatags.collections.manager import TagCollectionStore
from mediatags.core.exceptions import (
    CollectionNotFoundError,
    CycleError,
    HierarchyError,
    InvariantViolation,
    RootCollectionError,
    TagNotFoundError,
)
from mediatags.core.models import ROOT_TAG_COLLECTION_ID, TagCollection


def snapshot(store):
    return {c.id: c for c in store.collection_list}


class TestStructure:
    """Test building the hierarchy."""

    def test_starts_with_root(self) -> None:
        store = TagCollectionStore()

        root = store.get_root_collection()
        assert root.id == ROOT_TAG_COLLECTION_ID
        assert root.is_root
        assert len(store) == 1

    def test_add_collection_appends(self, nested) -> None:
        root = nested.store.get_root_collection()

        assert root.sub_collections == (nested.sub1.id, nested.sub3.id)
        assert nested.store.owner_of_collection(nested.sub2.id).id == nested.sub1.id

    def test_add_collection_unknown_parent(self) -> None:
        store = TagCollectionStore()

        with pytest.raises(CollectionNotFoundError):
            store.add_tag_collection("orphan", "missing")

    def test_attach_tag_twice(self, nested) -> None:
        with pytest.raises(HierarchyError):
            nested.store.attach_tag(nested.tag_x.id, nested.sub3)

    def test_detach_tag(self, nested) -> None:
        owner = nested.store.detach_tag(nested.tag_y.id)

        assert owner.id == nested.sub1.id
        assert nested.tag_y.id not in nested.store.get(nested.sub1.id).tags
        assert nested.store.owner_of_tag(nested.tag_y.id) is None
        assert nested.store.detach_tag(nested.tag_y.id) is None

    def test_rename_collection(self, nested) -> None:
        nested.store.rename_tag_collection(nested.sub3, "Later")

        assert nested.store.get(nested.sub3.id).name == "Later"

    def test_subtree_ids(self, nested) -> None:
        assert nested.store.subtree_ids(nested.sub1) == [
            nested.sub1.id,
            nested.sub2.id,
        ]
        assert nested.store.subtree_ids(nested.sub3.id) == [nested.sub3.id]

    def test_remove_collection_returns_tags(self, nested) -> None:
        removed = nested.store.remove_tag_collection(nested.sub1)

        assert removed == [nested.tag_y.id, nested.tag_z.id]
        assert nested.sub1.id not in nested.store
        assert nested.sub2.id not in nested.store
        assert nested.store.get_root_collection().sub_collections == (nested.sub3.id,)
        nested.store.check_invariants()

    def test_remove_root_rejected(self, nested) -> None:
        with pytest.raises(RootCollectionError):
            nested.store.remove_tag_collection(ROOT_TAG_COLLECTION_ID)


class TestRecursiveTags:
    """Test flattening tags below a collection."""

    def test_three_levels(self, nested) -> None:
        """Test sub1 yields its own tag then its sub-collection's tag."""
        assert nested.store.get_recursive_tags(nested.sub1) == [
            nested.tag_y.id,
            nested.tag_z.id,
        ]

    def test_from_root(self, nested) -> None:
        assert nested.store.get_recursive_tags(ROOT_TAG_COLLECTION_ID) == [
            nested.tag_x.id,
            nested.tag_y.id,
            nested.tag_z.id,
        ]

    def test_empty_collection(self, nested) -> None:
        assert nested.store.get_recursive_tags(nested.sub3) == []

    def test_each_tag_once(self, nested) -> None:
        tags = nested.store.get_recursive_tags(ROOT_TAG_COLLECTION_ID)
        assert len(tags) == len(set(tags))


class TestIsSelected:
    """Test derived selection state of collections."""

    def test_all_tags_selected(self, nested) -> None:
        selection = {nested.tag_y.id, nested.tag_z.id}

        assert nested.store.is_selected(nested.sub1, selection)
        assert nested.store.is_selected(nested.sub2, selection)
        assert not nested.store.is_selected(ROOT_TAG_COLLECTION_ID, selection)

    def test_partial_selection(self, nested) -> None:
        assert not nested.store.is_selected(nested.sub1, {nested.tag_y.id})

    def test_empty_collection_never_selected(self, nested) -> None:
        assert not nested.store.is_selected(nested.sub3, set())


class TestMoveTag:
    """Test moving tags between collections."""

    def test_move_to_other_collection(self, nested) -> None:
        target = nested.store.move_tag(nested.tag_x.id, nested.sub2, 0)

        assert target.tags == (nested.tag_x.id, nested.tag_z.id)
        assert nested.store.get_root_collection().tags == ()
        assert nested.store.owner_of_tag(nested.tag_x.id).id == nested.sub2.id
        nested.store.check_invariants()

    def test_append_by_default(self, nested) -> None:
        target = nested.store.move_tag(nested.tag_x.id, nested.sub2)

        assert target.tags == (nested.tag_z.id, nested.tag_x.id)

    def test_reorder_within_collection(self, library) -> None:
        a, b, c = (library.add_tag(n) for n in "abc")

        library.collections.move_tag(c.id, ROOT_TAG_COLLECTION_ID, 0)

        assert library.collections.get_root_collection().tags == (c.id, a.id, b.id)

    def test_drop_on_tag_takes_its_position(self, library) -> None:
        """Test the drop index is the anchor's position before removal."""
        a, b, c = (library.add_tag(n) for n in "abc")

        library.collections.move_tag_before(a.id, c.id)

        assert library.collections.get_root_collection().tags == (b.id, c.id, a.id)

    def test_drop_on_tag_in_other_collection(self, nested) -> None:
        nested.store.move_tag_before(nested.tag_x.id, nested.tag_z.id)

        assert nested.store.get(nested.sub2.id).tags == (
            nested.tag_x.id,
            nested.tag_z.id,
        )

    def test_unknown_tag_rejected(self, nested) -> None:
        before = snapshot(nested.store)

        with pytest.raises(TagNotFoundError):
            nested.store.move_tag("missing", nested.sub1)

        assert snapshot(nested.store) == before

    def test_unknown_target_rejected(self, nested) -> None:
        before = snapshot(nested.store)

        with pytest.raises(CollectionNotFoundError):
            nested.store.move_tag(nested.tag_x.id, "missing")

        assert snapshot(nested.store) == before


class TestMoveCollection:
    """Test moving collections without breaking the tree."""

    def test_move_under_sibling(self, nested) -> None:
        nested.store.move_collection(nested.sub3, nested.sub1, 0)

        assert nested.store.get(nested.sub1.id).sub_collections == (
            nested.sub3.id,
            nested.sub2.id,
        )
        assert nested.store.get_root_collection().sub_collections == (nested.sub1.id,)
        assert nested.store.owner_of_collection(nested.sub3.id).id == nested.sub1.id
        nested.store.check_invariants()

    def test_move_into_descendant_rejected(self, chain) -> None:
        """Test A > B > C: moving A under C fails and leaves the tree intact."""
        before = snapshot(chain.store)

        with pytest.raises(CycleError):
            chain.store.move_collection(chain.a, chain.c)

        assert snapshot(chain.store) == before
        assert chain.store.get(chain.a.id).sub_collections == (chain.b.id,)
        assert chain.store.get(chain.b.id).sub_collections == (chain.c.id,)
        chain.store.check_invariants()

    def test_move_into_itself_rejected(self, chain) -> None:
        with pytest.raises(CycleError):
            chain.store.move_collection(chain.b, chain.b)

    def test_move_root_rejected(self, chain) -> None:
        with pytest.raises(RootCollectionError):
            chain.store.move_collection(ROOT_TAG_COLLECTION_ID, chain.c)

    def test_move_up(self, chain) -> None:
        chain.store.move_collection(chain.c, ROOT_TAG_COLLECTION_ID)

        assert chain.store.get_root_collection().sub_collections == (
            chain.a.id,
            chain.c.id,
        )
        assert chain.store.get(chain.b.id).sub_collections == ()
        assert not chain.store.is_descendant(chain.c.id, chain.a.id)

    def test_is_descendant(self, chain) -> None:
        assert chain.store.is_descendant(chain.c.id, chain.a.id)
        assert not chain.store.is_descendant(chain.a.id, chain.c.id)
        assert not chain.store.is_descendant(chain.a.id, chain.a.id)


class TestLoad:
    """Test replacing the hierarchy with a snapshot."""

    def test_load_valid_tree(self) -> None:
        store = TagCollectionStore()
        child = TagCollection(id="child", name="Child", tags=("t1",))
        root = TagCollection(
            id=ROOT_TAG_COLLECTION_ID, name="Root", sub_collections=("child",)
        )

        store.load([root, child])

        assert store.owner_of_tag("t1").id == "child"
        assert store.get_recursive_tags(root) == ["t1"]

    def test_load_rejects_duplicate_membership(self) -> None:
        store = TagCollectionStore()
        collections = [
            TagCollection(
                id=ROOT_TAG_COLLECTION_ID,
                name="Root",
                tags=("t1",),
                sub_collections=("child",),
            ),
            TagCollection(id="child", name="Child", tags=("t1",)),
        ]

        with pytest.raises(InvariantViolation) as exc_info:
            store.load(collections)

        assert "t1" in str(exc_info.value)
        assert len(store) == 1

    def test_load_rejects_cycle(self) -> None:
        store = TagCollectionStore()
        collections = [
            TagCollection(id=ROOT_TAG_COLLECTION_ID, name="Root"),
            TagCollection(id="a", name="A", sub_collections=("b",)),
            TagCollection(id="b", name="B", sub_collections=("a",)),
        ]

        with pytest.raises(InvariantViolation) as exc_info:
            store.load(collections)

        assert any("not reachable" in p for p in exc_info.value.problems)
        store.check_invariants()
