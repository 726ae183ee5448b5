"""Rich output helpers for the pgstack CLI.

Human-oriented output goes to stderr so stdout stays reserved for
machine-readable results (``export`` lines, JSON) that callers ``eval``
or parse.

Selection Color Mapping:
    OVERRIDE = magenta, LATEST/STABLE = green, ALIAS = yellow, DEFAULT = bold red
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from pgstack.build.orchestrator import ImageState
from pgstack.core.engine import BASE_FIELD, EXTENSION_A_FIELD, EXTENSION_B_FIELD
from pgstack.core.models import SelectionSource

_SOURCE_STYLES: dict[SelectionSource, str] = {
    SelectionSource.OVERRIDE: "magenta",
    SelectionSource.LATEST: "green",
    SelectionSource.STABLE: "green",
    SelectionSource.ALIAS: "yellow",
    SelectionSource.DEFAULT: "bold red",
}

_FIELD_TITLES: dict[str, str] = {
    BASE_FIELD: "Bitnami PostgreSQL",
    EXTENSION_A_FIELD: "pgvector",
    EXTENSION_B_FIELD: "pg_search",
}

console = Console(stderr=True)


def source_style(source: SelectionSource) -> str:
    """Return the Rich style string for a selection source."""
    return _SOURCE_STYLES.get(source, "white")


def setup_logging(verbose: bool = False) -> None:
    """Route pgstack log records to stderr through Rich."""
    logger = logging.getLogger("pgstack")
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=console, show_path=False, show_time=False))
    logger.setLevel(logging.INFO if verbose else logging.WARNING)


def print_resolution_table(state: ImageState) -> None:
    """Print resolved components, labels and the existence verdict."""
    versions = state.resolution.versions
    table = Table(
        title=f"PostgreSQL {versions.major_line} image",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Component", style="bold")
    table.add_column("Value")
    table.add_column("Source", justify="center")

    for name, selection in state.resolution.selections.items():
        table.add_row(
            _FIELD_TITLES.get(name, name),
            selection.value,
            Text(selection.source.value.upper(), style=source_style(selection.source)),
        )
    console.print(table)

    labels = Table(show_header=False, box=None)
    labels.add_column("Kind", style="dim")
    labels.add_column("Label")
    labels.add_row("short", state.labels.short)
    labels.add_row("postgres", state.labels.postgres_line)
    labels.add_row("full", state.labels.full)
    labels.add_row("alias", state.labels.alias)
    labels.add_row("hash", state.labels.hash)
    console.print(labels)

    if state.image_exists:
        console.print("[green]Image already published.[/green]")
    else:
        console.print("[yellow]Image not published; a build is required.[/yellow]")
