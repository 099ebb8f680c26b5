"""Main CLI entry point and application setup."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import click
from click.exceptions import Exit
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from mediatags import __version__
from mediatags.cli.config import load_config
from mediatags.cli.outline import find_tag_ids, load_outline
from mediatags.collections.tree import TagTreeController, TreeNode
from mediatags.core.exceptions import CriteriaTypeError
from mediatags.core.fields import FieldKey, FieldType
from mediatags.core.models import ROOT_TAG_COLLECTION_ID
from mediatags.library import Library
from mediatags.search.query import Query, default_query, into_criteria


@dataclass
class Context:
    """CLI context that holds shared resources."""

    console: Console
    config: dict[str, Any]
    debug: bool = False


def setup_logging(
    verbose: bool = False, quiet: bool = False, debug: bool = False
) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.WARNING
    elif verbose or debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s"
        if not debug
        else "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_console(no_color: bool = False, width: int | None = None) -> Console:
    """Create Rich console with appropriate settings."""
    return Console(
        no_color=no_color,
        width=width or 120,
        highlight=not no_color,
        color_system=None if no_color else "auto",
    )


class MediaTagsGroup(click.Group):
    """Custom group that handles KeyboardInterrupt and unexpected errors."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except KeyboardInterrupt:
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print("[yellow]Interrupted[/yellow]")
            ctx.exit(130)
        except (click.ClickException, click.Abort, Exit, SystemExit):
            raise
        except Exception as e:
            debug = getattr(ctx.obj, "debug", False) if ctx.obj else False
            if debug:
                raise
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print(f"[red]Error:[/red] {e}")
            else:
                click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


@click.group(cls=MediaTagsGroup)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug mode with full tracebacks")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.version_option(
    version=__version__, prog_name="mediatags", message="mediatags version %(version)s"
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    config: Path | None,
) -> None:
    """Organize media files with tag hierarchies and structured search."""
    setup_logging(verbose=verbose, quiet=quiet, debug=debug)

    try:
        config_data = load_config(config)
    except ValueError as e:
        if debug:
            raise
        click.echo(f"Error loading config file: {e}", err=True)
        ctx.exit(1)

    console = create_console(
        no_color=no_color or bool(config_data.get("no_color")),
        width=config_data.get("width"),
    )
    ctx.obj = Context(console=console, config=config_data, debug=debug)


# Command: fields
@cli.command()
@click.pass_context
def fields(ctx: click.Context) -> None:
    """List searchable fields with their default query."""
    console = ctx.obj.console

    table = Table(title="Searchable fields")
    table.add_column("Key", style="cyan")
    table.add_column("Type")
    table.add_column("Default operator")
    table.add_column("Default value")
    table.add_column("Operators", style="dim")

    for key in FieldKey:
        query = default_query(key)
        table.add_row(
            key.value,
            key.field_type.value,
            query.operator.value,
            _format_value(query.value),
            ", ".join(op.value for op in query.operators),
        )

    console.print(table)


# Command: tree
@cli.command()
@click.argument("outline", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--expand-all", "-e", is_flag=True, help="Expand every collection")
@click.option(
    "--select", "-s", "selected", multiple=True, help="Select a tag by name"
)
@click.option(
    "--select-collection",
    "selected_collections",
    multiple=True,
    help="Toggle all tags of a collection by name",
)
@click.pass_context
def tree(
    ctx: click.Context,
    outline: Path,
    expand_all: bool,
    selected: tuple[str, ...],
    selected_collections: tuple[str, ...],
) -> None:
    """Render the tag hierarchy described by an OUTLINE file."""
    console = ctx.obj.console
    config = ctx.obj.config

    library = _load(outline)
    controller = TagTreeController(
        library, untagged_label=config.get("untagged_label", "Untagged")
    )

    if expand_all or config.get("expand_all"):
        controller.expand_all(ROOT_TAG_COLLECTION_ID)

    try:
        for tag_id in find_tag_ids(library, list(selected)):
            controller.click(tag_id)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--select")

    for name in selected_collections:
        matches = [c for c in library.collections.collection_list if c.name == name]
        if not matches:
            raise click.BadParameter(
                f"Unknown collection: {name}", param_hint="--select-collection"
            )
        controller.click(matches[0].id)

    root = Tree("🏷  [bold]Tags[/bold]")
    for node in controller.contents():
        _add_node(root, node)
    console.print(root)


# Command: query
@cli.command()
@click.argument("outline", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("key")
@click.option("--operator", "-o", help="Operator (defaults to the field's default)")
@click.option("--value", "-V", help="Value (defaults to the field's default)")
@click.pass_context
def query(
    ctx: click.Context,
    outline: Path,
    key: str,
    operator: str | None,
    value: str | None,
) -> None:
    """Build a search criteria for KEY against the tags of OUTLINE."""
    console = ctx.obj.console

    field = FieldKey.parse(key)
    if field is None:
        choices = ", ".join(k.value for k in FieldKey)
        raise click.BadParameter(f"Unknown field {key!r}, choose from: {choices}")

    library = _load(outline)
    built: Query = default_query(field)

    try:
        if operator is not None:
            try:
                built = built.with_operator(built.operators(operator))
            except ValueError:
                raise click.BadParameter(
                    f"{operator!r} is not an operator for {field.value}",
                    param_hint="--operator",
                )
        if value is not None:
            built = built.with_value(_parse_value(field, value, library))
    except CriteriaTypeError as e:
        raise click.BadParameter(str(e))

    criteria = into_criteria(built, library)

    table = Table(title=f"Criteria for {field.value}", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Type", type(criteria).__name__)
    table.add_row("Key", criteria.key)
    table.add_row("Operator", criteria.operator.value)
    table.add_row("Value", _format_value(criteria.value))
    console.print(table)


def _load(outline: Path) -> Library:
    try:
        return load_outline(outline)
    except ValueError as e:
        raise click.ClickException(str(e))


def _parse_value(field: FieldKey, raw: str, library: Library) -> Any:
    match field.field_type:
        case FieldType.NUMBER:
            try:
                number = float(raw)
            except ValueError:
                raise click.BadParameter(f"{raw!r} is not a number", param_hint="--value")
            return int(number) if number.is_integer() else number
        case FieldType.DATE:
            try:
                return datetime.fromisoformat(raw)
            except ValueError:
                raise click.BadParameter(
                    f"{raw!r} is not an ISO date", param_hint="--value"
                )
        case FieldType.TAG:
            # Unknown names are kept as ids and resolve to an empty criteria
            try:
                return find_tag_ids(library, [raw])[0]
            except ValueError:
                return raw
        case _:
            return raw


def _format_value(value: Any) -> str:
    if value is None:
        return "[dim]none[/dim]"
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if value == "":
        return '[dim]""[/dim]'
    return str(value)


def _add_node(parent: Tree, node: TreeNode) -> None:
    label = escape(node.label)
    if node.is_selected:
        label = f"[green]✓ {label}[/green]"
    if node.has_caret:
        label = f"[bold]{label}[/bold]"
        if not node.is_expanded and node.child_nodes:
            label += f" [dim]({len(node.child_nodes)} hidden)[/dim]"

    branch = parent.add(label)
    if node.is_expanded:
        for child in node.child_nodes:
            _add_node(branch, child)
