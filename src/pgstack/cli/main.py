"""pgstack CLI — Version resolution and rebuild gating for pgvector images.

Entry point for the ``pgstack`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve      — Resolve versions, labels and the existence check.
    build        — Build the image unless it is already published.
    fingerprint  — Compute the content hash for a version triple.

Usage::

    pgstack resolve 17
    pgstack --verbose resolve 16 --format table
    pgstack build --pg 17 --push
    pgstack fingerprint --pg 17 --pgvector 0.8.0 --pg-search 0.15.18-pg17
"""

from __future__ import annotations

import click

from pgstack import __version__
from pgstack.cli.build_cmd import build_command
from pgstack.cli.fingerprint_cmd import fingerprint_command
from pgstack.cli.output import setup_logging
from pgstack.cli.resolve_cmd import resolve_command


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log resolution progress to stderr.")
def cli(verbose: bool) -> None:
    """pgstack: resolve Bitnami PostgreSQL, pgvector and pg_search versions.

    Derives deterministic image labels for a PostgreSQL major version and
    skips rebuilds when an identical image is already published.
    """
    setup_logging(verbose)


# Register all subcommands
cli.add_command(resolve_command)
cli.add_command(build_command)
cli.add_command(fingerprint_command)
