"""Search criteria and the editable queries that produce them."""

from .criteria import (
    DateCriteria,
    FileSearchCriteria,
    NumberCriteria,
    StringCriteria,
    TagCriteria,
)
from .editor import QueryEditor
from .query import (
    DateQuery,
    ExtensionQuery,
    NumberQuery,
    Query,
    StringQuery,
    TagLookup,
    TagQuery,
    default_query,
    from_criteria,
    generate_criteria_id,
    into_criteria,
)

__all__ = [
    # Criteria
    "FileSearchCriteria",
    "StringCriteria",
    "NumberCriteria",
    "DateCriteria",
    "TagCriteria",
    # Queries
    "Query",
    "StringQuery",
    "ExtensionQuery",
    "NumberQuery",
    "DateQuery",
    "TagQuery",
    "TagLookup",
    "default_query",
    "from_criteria",
    "into_criteria",
    "generate_criteria_id",
    "QueryEditor",
]
