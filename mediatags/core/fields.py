"""Searchable file fields and the operator sets legal for each field type."""

from enum import Enum, unique

BYTES_IN_MB = 1024 * 1024

# Image extensions the file scanner recognises, in display order
IMG_EXTENSIONS = (
    "gif",
    "png",
    "apng",
    "bmp",
    "svg",
    "jpg",
    "jpeg",
    "jfif",
    "webp",
    "tif",
    "tiff",
    "ico",
)


@unique
class FieldKey(str, Enum):
    """Identifiers of the fields a search criteria can target."""

    NAME = "name"
    ABSOLUTE_PATH = "absolutePath"
    TAGS = "tags"
    EXTENSION = "extension"
    SIZE = "size"
    WIDTH = "width"
    HEIGHT = "height"
    DATE_ADDED = "dateAdded"
    COMMENTS = "comments"
    # Sourced from embedded file metadata rather than the library itself
    CREATOR = "Creator"

    @property
    def field_type(self) -> "FieldType":
        """Get the value type family of this field."""
        return FIELD_TYPES[self]

    @classmethod
    def parse(cls, key: "str | FieldKey") -> "FieldKey | None":
        """Look up a key by its value, returning None for unknown keys."""
        try:
            return cls(key)
        except ValueError:
            return None


@unique
class FieldType(Enum):
    """Value type family of a field."""

    STRING = "string"
    EXTENSION = "extension"
    NUMBER = "number"
    DATE = "date"
    TAG = "tag"


@unique
class StringOperator(str, Enum):
    """Operators for free-text fields."""

    EQUALS = "equals"
    EQUALS_IGNORE_CASE = "equalsIgnoreCase"
    NOT_EQUAL = "notEqual"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    STARTS_WITH = "startsWith"
    STARTS_WITH_IGNORE_CASE = "startsWithIgnoreCase"
    NOT_STARTS_WITH = "notStartsWith"


@unique
class NumberOperator(str, Enum):
    """Operators for numeric and date fields."""

    EQUALS = "equals"
    NOT_EQUAL = "notEqual"
    SMALLER_THAN = "smallerThan"
    SMALLER_THAN_OR_EQUALS = "smallerThanOrEquals"
    GREATER_THAN = "greaterThan"
    GREATER_THAN_OR_EQUALS = "greaterThanOrEquals"


@unique
class BinaryOperator(str, Enum):
    """Operators for fields that only support (in)equality."""

    EQUALS = "equals"
    NOT_EQUAL = "notEqual"


@unique
class TagOperator(str, Enum):
    """Operators for the tags field."""

    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    CONTAINS_RECURSIVELY = "containsRecursively"
    NOT_CONTAINS_RECURSIVELY = "notContainsRecursively"


FIELD_TYPES = {
    FieldKey.NAME: FieldType.STRING,
    FieldKey.ABSOLUTE_PATH: FieldType.STRING,
    FieldKey.COMMENTS: FieldType.STRING,
    FieldKey.CREATOR: FieldType.STRING,
    FieldKey.EXTENSION: FieldType.EXTENSION,
    FieldKey.SIZE: FieldType.NUMBER,
    FieldKey.WIDTH: FieldType.NUMBER,
    FieldKey.HEIGHT: FieldType.NUMBER,
    FieldKey.DATE_ADDED: FieldType.DATE,
    FieldKey.TAGS: FieldType.TAG,
}

OPERATORS = {
    FieldType.STRING: StringOperator,
    FieldType.EXTENSION: BinaryOperator,
    FieldType.NUMBER: NumberOperator,
    FieldType.DATE: NumberOperator,
    FieldType.TAG: TagOperator,
}


def keys_of_type(field_type: FieldType) -> frozenset[FieldKey]:
    """Get all field keys of a given type."""
    return frozenset(k for k, t in FIELD_TYPES.items() if t is field_type)
