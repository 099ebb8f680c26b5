"""Core models, field definitions and exceptions."""

from .exceptions import (
    CollectionNotFoundError,
    CriteriaTypeError,
    CycleError,
    HierarchyError,
    InvariantViolation,
    RootCollectionError,
    TagNotFoundError,
)
from .fields import (
    BYTES_IN_MB,
    IMG_EXTENSIONS,
    BinaryOperator,
    FieldKey,
    FieldType,
    NumberOperator,
    StringOperator,
    TagOperator,
)
from .models import ROOT_TAG_COLLECTION_ID, MediaFile, Tag, TagCollection

__all__ = [
    "BYTES_IN_MB",
    "IMG_EXTENSIONS",
    "ROOT_TAG_COLLECTION_ID",
    "BinaryOperator",
    "FieldKey",
    "FieldType",
    "NumberOperator",
    "StringOperator",
    "TagOperator",
    "MediaFile",
    "Tag",
    "TagCollection",
    "CriteriaTypeError",
    "HierarchyError",
    "TagNotFoundError",
    "CollectionNotFoundError",
    "CycleError",
    "RootCollectionError",
    "InvariantViolation",
]
