"""Command-line interface for inspecting tag hierarchies and queries.

Built with Click and Rich.
"""

from mediatags.cli.main import cli

__all__ = ["cli"]
