"""Randomized checks that moves keep the hierarchy a proper tree."""

import random
from collections import Counter

import pytest

from mediatags.core.exceptions import CycleError
from mediatags.core.models import ROOT_TAG_COLLECTION_ID
from mediatags.library import Library


def build_random_library(rng: random.Random) -> Library:
    lib = Library()
    collection_ids = [ROOT_TAG_COLLECTION_ID]
    for i in range(rng.randint(3, 8)):
        parent = rng.choice(collection_ids)
        collection_ids.append(lib.add_collection(f"col{i}", parent).id)
    for i in range(rng.randint(5, 20)):
        lib.add_tag(f"tag{i}", rng.choice(collection_ids))
    return lib


def subtree(lib: Library, collection_id: str) -> set[str]:
    ids = {collection_id}
    for sub in lib.collections.children(collection_id):
        ids |= subtree(lib, sub.id)
    return ids


def assert_unique_membership(lib: Library) -> None:
    collections = lib.collections.collection_list
    tag_counts = Counter(t for c in collections for t in c.tags)
    col_counts = Counter(s for c in collections for s in c.sub_collections)

    assert set(tag_counts) == {t.id for t in lib.tags.tag_list}
    assert all(n == 1 for n in tag_counts.values())
    assert set(col_counts) == {c.id for c in collections} - {ROOT_TAG_COLLECTION_ID}
    assert all(n == 1 for n in col_counts.values())
    lib.collections.check_invariants()


@pytest.mark.parametrize("seed", range(25))
def test_random_moves_keep_tree(seed) -> None:
    """Test every id stays a member of exactly one collection."""
    rng = random.Random(seed)
    lib = build_random_library(rng)
    store = lib.collections

    for _ in range(60):
        collection_ids = [c.id for c in store.collection_list]
        index = rng.choice([None, 0, 1, 3, -1])

        if rng.random() < 0.6:
            tag = rng.choice(lib.tags.tag_list)
            store.move_tag(tag.id, rng.choice(collection_ids), index)
            assert store.owner_of_tag(tag.id) is not None
        else:
            movable = [c for c in collection_ids if c != ROOT_TAG_COLLECTION_ID]
            moved = rng.choice(movable)
            target = rng.choice(collection_ids)
            before = {c.id: c for c in store.collection_list}

            if target in subtree(lib, moved):
                with pytest.raises(CycleError):
                    store.move_collection(moved, target, index)
                assert {c.id: c for c in store.collection_list} == before
            else:
                store.move_collection(moved, target, index)
                assert store.owner_of_collection(moved).id == target

        assert_unique_membership(lib)


@pytest.mark.parametrize("seed", range(10))
def test_recursive_tags_cover_whole_tree(seed) -> None:
    """Test the root reaches every tag exactly once."""
    rng = random.Random(seed)
    lib = build_random_library(rng)

    tags = lib.collections.get_recursive_tags(ROOT_TAG_COLLECTION_ID)

    assert sorted(tags) == sorted(t.id for t in lib.tags.tag_list)
