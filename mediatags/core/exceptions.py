"""Exception classes for criteria and tag hierarchy errors."""


class CriteriaTypeError(TypeError):
    """Raised when a key, operator and value do not belong together."""

    def __init__(self, key: str, message: str):
        """Initialize with field key and message."""
        self.key = key
        super().__init__(f"Invalid criteria for {key}: {message}")


class HierarchyError(Exception):
    """Base exception for tag hierarchy errors."""

    pass


class TagNotFoundError(HierarchyError):
    """Raised when a tag is not a member of any collection."""

    def __init__(self, tag_id: str):
        """Initialize with tag ID."""
        self.tag_id = tag_id
        super().__init__(f"Tag not found in hierarchy: {tag_id}")


class CollectionNotFoundError(HierarchyError):
    """Raised when a tag collection does not exist."""

    def __init__(self, collection_id: str):
        """Initialize with collection ID."""
        self.collection_id = collection_id
        super().__init__(f"Tag collection not found: {collection_id}")


class CycleError(HierarchyError):
    """Raised when a move would place a collection inside itself."""

    def __init__(self, collection_id: str, target_id: str):
        """Initialize with moved collection and target IDs."""
        self.collection_id = collection_id
        self.target_id = target_id
        super().__init__(
            f"Cannot move collection {collection_id} into {target_id}: "
            "target is the collection itself or one of its descendants"
        )


class RootCollectionError(HierarchyError):
    """Raised when an operation would move or remove the root collection."""

    def __init__(self, operation: str):
        """Initialize with the rejected operation name."""
        self.operation = operation
        super().__init__(f"Cannot {operation} the root tag collection")


class InvariantViolation(HierarchyError):
    """Raised when the hierarchy no longer forms a proper tree."""

    def __init__(self, problems: list[str]):
        """Initialize with the detected problems."""
        self.problems = problems
        super().__init__("Tag hierarchy is inconsistent: " + "; ".join(problems))
