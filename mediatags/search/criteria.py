"""Domain search criteria consumed by the search execution layer.

Each criteria class validates its operator and value types when it is
constructed. The key is kept as a plain string: the search layer may hand
over criteria for keys this package does not describe, and the query
mapping decides how to treat a key that does not match the criteria type.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import msgspec

from mediatags.core.exceptions import CriteriaTypeError
from mediatags.core.fields import (
    BinaryOperator,
    NumberOperator,
    StringOperator,
    TagOperator,
)


def _check_operator(key: str, operator: Any, allowed: tuple[type, ...]) -> None:
    if not isinstance(operator, allowed):
        names = ", ".join(t.__name__ for t in allowed)
        raise CriteriaTypeError(key, f"operator {operator!r} is not a {names}")


class StringCriteria(msgspec.Struct, frozen=True):
    """Criteria over a text field."""

    key: str
    value: str = ""
    operator: StringOperator | BinaryOperator = StringOperator.CONTAINS

    def __post_init__(self):
        _check_operator(self.key, self.operator, (StringOperator, BinaryOperator))
        if not isinstance(self.value, str):
            raise CriteriaTypeError(self.key, f"expected text, got {self.value!r}")


class NumberCriteria(msgspec.Struct, frozen=True):
    """Criteria over a numeric field."""

    key: str
    value: int | float = 0
    operator: NumberOperator = NumberOperator.GREATER_THAN_OR_EQUALS

    def __post_init__(self):
        _check_operator(self.key, self.operator, (NumberOperator,))
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise CriteriaTypeError(self.key, f"expected number, got {self.value!r}")


class DateCriteria(msgspec.Struct, frozen=True):
    """Criteria over a date field."""

    key: str
    value: datetime = msgspec.field(default_factory=datetime.now)
    operator: NumberOperator = NumberOperator.EQUALS

    def __post_init__(self):
        _check_operator(self.key, self.operator, (NumberOperator,))
        if not isinstance(self.value, datetime):
            raise CriteriaTypeError(self.key, f"expected date, got {self.value!r}")


class TagCriteria(msgspec.Struct, frozen=True):
    """Criteria over the tags of a file.

    A ``value`` of None is a legitimate criteria referring to no tag.
    """

    key: str = "tags"
    value: str | None = None
    operator: TagOperator = TagOperator.CONTAINS

    def __post_init__(self):
        _check_operator(self.key, self.operator, (TagOperator,))
        if self.value is not None and not isinstance(self.value, str):
            raise CriteriaTypeError(self.key, f"expected tag id, got {self.value!r}")


FileSearchCriteria = StringCriteria | NumberCriteria | DateCriteria | TagCriteria
