"""Form model behind the advanced search panel.

Keeps the list of queries being edited, keyed by their ephemeral ids.
The order of the rows only matters for display.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from mediatags.core.fields import FieldKey
from mediatags.search.criteria import FileSearchCriteria
from mediatags.search.query import (
    Query,
    TagLookup,
    default_query,
    from_criteria,
    generate_criteria_id,
    into_criteria,
)


class QueryEditor:
    """Editable, ordered collection of search queries."""

    def __init__(self, criteria: Iterable[FileSearchCriteria] = ()):
        self._queries: dict[str, Query] = {}
        self.load(criteria)

    def __len__(self) -> int:
        return len(self._queries)

    def __iter__(self) -> Iterator[tuple[str, Query]]:
        return iter(list(self._queries.items()))

    def __getitem__(self, query_id: str) -> Query:
        return self._queries[query_id]

    def load(self, criteria: Iterable[FileSearchCriteria]) -> None:
        """Replace the edited queries with the given criteria."""
        self._queries = dict(from_criteria(c) for c in criteria)

    def reset(self) -> None:
        """Discard all queries."""
        self._queries.clear()

    def add(self, key: FieldKey | str = FieldKey.TAGS) -> str:
        """Append a default query for ``key`` and return its id."""
        query_id = generate_criteria_id()
        self._queries[query_id] = default_query(key)
        return query_id

    def remove(self, query_id: str) -> None:
        """Remove a query. Unknown ids are ignored."""
        self._queries.pop(query_id, None)

    def change_key(self, query_id: str, key: FieldKey | str) -> Query:
        """Switch a query to another field, resetting its operator and value."""
        self._ensure(query_id)
        query = default_query(key)
        self._queries[query_id] = query
        return query

    def set_operator(self, query_id: str, operator: Any) -> Query:
        """Change the operator of a query.

        Raises:
            CriteriaTypeError: If the operator is not legal for the field
        """
        query = self._ensure(query_id).with_operator(operator)
        self._queries[query_id] = query
        return query

    def set_value(self, query_id: str, value: Any) -> Query:
        """Change the value of a query.

        Raises:
            CriteriaTypeError: If the value has the wrong type for the field
        """
        query = self._ensure(query_id).with_value(value)
        self._queries[query_id] = query
        return query

    def to_criteria(self, tag_lookup: TagLookup) -> list[FileSearchCriteria]:
        """Convert every query into domain criteria, in display order."""
        return [into_criteria(q, tag_lookup) for q in self._queries.values()]

    def _ensure(self, query_id: str) -> Query:
        try:
            return self._queries[query_id]
        except KeyError:
            raise KeyError(f"No query with id {query_id}") from None
