"""Fixtures for tag hierarchy tests."""

from types import SimpleNamespace

import pytest

from mediatags.core.models import ROOT_TAG_COLLECTION_ID
from mediatags.library import Library


@pytest.fixture
def nested():
    """Three-level hierarchy.

    root: tag_x, sub1
    sub1: tag_y, sub2
    sub2: tag_z
    root also holds sub3 (empty) after sub1.
    """
    lib = Library()
    tag_x = lib.add_tag("X")
    sub1 = lib.add_collection("sub1", ROOT_TAG_COLLECTION_ID)
    tag_y = lib.add_tag("Y", sub1)
    sub2 = lib.add_collection("sub2", sub1)
    tag_z = lib.add_tag("Z", sub2)
    sub3 = lib.add_collection("sub3", ROOT_TAG_COLLECTION_ID)
    return SimpleNamespace(
        lib=lib,
        store=lib.collections,
        tag_x=tag_x,
        tag_y=tag_y,
        tag_z=tag_z,
        sub1=sub1,
        sub2=sub2,
        sub3=sub3,
    )


@pytest.fixture
def chain():
    """Collections A > B > C below the root."""
    lib = Library()
    a = lib.add_collection("A", ROOT_TAG_COLLECTION_ID)
    b = lib.add_collection("B", a)
    c = lib.add_collection("C", b)
    return SimpleNamespace(lib=lib, store=lib.collections, a=a, b=b, c=c)
