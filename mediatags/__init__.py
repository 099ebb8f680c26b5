"""Tag-collection hierarchies and structured search queries for media files."""

__version__ = "0.1.0"
