"""Editable search queries and their mapping to domain criteria.

A query is the form-level counterpart of a criteria: the value the user
edits in the advanced search panel. Each query variant covers one family
of fields and only accepts the operators and values legal for it, so an
ill-typed query cannot be constructed at all.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Protocol, assert_never
from uuid import uuid4

import msgspec

from mediatags.core.exceptions import CriteriaTypeError
from mediatags.core.fields import (
    BYTES_IN_MB,
    IMG_EXTENSIONS,
    BinaryOperator,
    FieldKey,
    FieldType,
    NumberOperator,
    StringOperator,
    TagOperator,
    keys_of_type,
)
from mediatags.core.models import Tag
from mediatags.search.criteria import (
    DateCriteria,
    FileSearchCriteria,
    NumberCriteria,
    StringCriteria,
    TagCriteria,
)

logger = logging.getLogger(__name__)


class TagLookup(Protocol):
    """Anything that can resolve a tag id."""

    def get(self, tag_id: str) -> Tag | None:
        """Get a tag by ID."""
        ...


def generate_criteria_id() -> str:
    """Create an ephemeral id identifying a query row in the editor."""
    return f"__criteria-{uuid4().hex}"


class _QueryBase(msgspec.Struct, frozen=True):
    """Shared validation for query variants.

    Subclasses set ``keys``, ``operators`` and ``value_types`` as plain
    class attributes.
    """

    def __post_init__(self):
        if not isinstance(self.key, FieldKey) or self.key not in self.keys:
            raise CriteriaTypeError(
                str(self.key), f"not a key of {type(self).__name__}"
            )
        if not isinstance(self.operator, self.operators):
            raise CriteriaTypeError(
                self.key.value,
                f"operator {self.operator!r} is not a {self.operators.__name__}",
            )
        if isinstance(self.value, bool) or not isinstance(
            self.value, self.value_types
        ):
            raise CriteriaTypeError(
                self.key.value, f"value {self.value!r} has the wrong type"
            )

    def with_operator(self, operator):
        """Return a copy with a different operator, revalidated."""
        return type(self)(self.key, operator, self.value)

    def with_value(self, value):
        """Return a copy with a different value, revalidated."""
        return type(self)(self.key, self.operator, value)


class StringQuery(_QueryBase, frozen=True):
    """Query over a free-text field."""

    key: FieldKey
    operator: StringOperator
    value: str

    keys = keys_of_type(FieldType.STRING)
    operators = StringOperator
    value_types = (str,)


class ExtensionQuery(_QueryBase, frozen=True):
    """Query over the file extension."""

    key: FieldKey
    operator: BinaryOperator
    value: str

    keys = keys_of_type(FieldType.EXTENSION)
    operators = BinaryOperator
    value_types = (str,)


class NumberQuery(_QueryBase, frozen=True):
    """Query over a numeric field. Sizes are expressed in megabytes."""

    key: FieldKey
    operator: NumberOperator
    value: int | float

    keys = keys_of_type(FieldType.NUMBER)
    operators = NumberOperator
    value_types = (int, float)


class DateQuery(_QueryBase, frozen=True):
    """Query over the date a file was added."""

    key: FieldKey
    operator: NumberOperator
    value: datetime

    keys = keys_of_type(FieldType.DATE)
    operators = NumberOperator
    value_types = (datetime,)


class TagQuery(_QueryBase, frozen=True):
    """Query over the tags of a file; ``None`` means no tag picked yet."""

    key: FieldKey
    operator: TagOperator
    value: str | None

    keys = keys_of_type(FieldType.TAG)
    operators = TagOperator
    value_types = (str, type(None))


Query = StringQuery | ExtensionQuery | NumberQuery | DateQuery | TagQuery


def default_query(key: FieldKey | str) -> Query:
    """Create a valid zero-value query for a field.

    The result depends only on ``key``, except for ``dateAdded`` whose
    value is the current time.

    Raises:
        CriteriaTypeError: If ``key`` is not a known field
    """
    field = FieldKey.parse(key)
    if field is None:
        raise CriteriaTypeError(str(key), "unknown field")

    match field.field_type:
        case FieldType.STRING:
            return StringQuery(field, StringOperator.CONTAINS, "")
        case FieldType.TAG:
            return TagQuery(field, TagOperator.CONTAINS, None)
        case FieldType.EXTENSION:
            return ExtensionQuery(field, BinaryOperator.EQUALS, IMG_EXTENSIONS[0])
        case FieldType.DATE:
            return DateQuery(field, NumberOperator.EQUALS, datetime.now())
        case FieldType.NUMBER:
            return NumberQuery(field, NumberOperator.GREATER_THAN_OR_EQUALS, 0)
        case _:
            assert_never(field.field_type)


def _coerce_operator(key: str, operator: Enum, operators: type[Enum]) -> Enum:
    """Map an operator onto the operator enum of a query variant by value.

    Text criteria may carry either string or binary operators, and
    ``equals``/``notEqual`` exist in both.
    """
    try:
        return operators(operator.value)
    except ValueError:
        raise CriteriaTypeError(
            key, f"operator {operator.value!r} is not a {operators.__name__}"
        ) from None


def _project(field: FieldKey | None, criteria: FileSearchCriteria) -> Query:
    field_type = field.field_type if field is not None else None

    match criteria, field_type:
        case StringCriteria(), FieldType.STRING:
            operator = _coerce_operator(criteria.key, criteria.operator, StringOperator)
            return StringQuery(field, operator, criteria.value)
        case StringCriteria(), FieldType.EXTENSION:
            operator = _coerce_operator(criteria.key, criteria.operator, BinaryOperator)
            return ExtensionQuery(field, operator, criteria.value)
        case NumberCriteria(), FieldType.NUMBER:
            value = criteria.value
            if field is FieldKey.SIZE:
                value = value / BYTES_IN_MB
            return NumberQuery(field, criteria.operator, value)
        case DateCriteria(), FieldType.DATE:
            return DateQuery(field, criteria.operator, criteria.value)
        case TagCriteria(), FieldType.TAG:
            return TagQuery(field, criteria.operator, criteria.value)
        case _:
            raise CriteriaTypeError(
                str(criteria.key),
                f"{type(criteria).__name__} does not match the field type",
            )


def from_criteria(criteria: FileSearchCriteria) -> tuple[str, Query]:
    """Turn a domain criteria into an editable query.

    The value is kept only when the criteria type matches the type of its
    field. Otherwise the field's default query is used, or the default tag
    query when the key is not a known field at all. File sizes are
    converted from bytes to megabytes.

    Returns:
        A fresh ephemeral id and the query
    """
    field = FieldKey.parse(criteria.key)
    try:
        query = _project(field, criteria)
    except CriteriaTypeError as e:
        logger.warning("Replacing mismatched criteria with a default query: %s", e)
        query = default_query(field if field is not None else FieldKey.TAGS)
    return generate_criteria_id(), query


def into_criteria(query: Query, tag_lookup: TagLookup) -> FileSearchCriteria:
    """Turn an edited query back into a domain criteria.

    Sizes are converted from megabytes back to bytes, as an int when the
    byte count is whole. A tag id that does
    not resolve produces a tag criteria without a tag.
    """
    match query:
        case StringQuery() | ExtensionQuery():
            return StringCriteria(query.key.value, query.value, query.operator)
        case NumberQuery(key=FieldKey.SIZE):
            size = query.value * BYTES_IN_MB
            if isinstance(size, float) and size.is_integer():
                size = int(size)
            return NumberCriteria(query.key.value, size, query.operator)
        case NumberQuery():
            return NumberCriteria(query.key.value, query.value, query.operator)
        case DateQuery():
            return DateCriteria(query.key.value, query.value, query.operator)
        case TagQuery():
            tag = tag_lookup.get(query.value) if query.value is not None else None
            if tag is None and query.value is not None:
                logger.debug("Tag %s in query no longer exists", query.value)
            return TagCriteria(
                FieldKey.TAGS.value, tag.id if tag else None, query.operator
            )
        case _:
            assert_never(query)
