"""``pgstack fingerprint`` — Compute the content hash for a version triple offline.

Usage::

    pgstack fingerprint --pg 17 --pgvector 0.8.0 --pg-search 0.15.18-pg17
"""

from __future__ import annotations

import sys

import click

from pgstack.core.fingerprint import canonical_triple, hash_canonical


@click.command("fingerprint")
@click.option("--pg", "pg_major", required=True, help="PostgreSQL major version.")
@click.option("--pgvector", "pgvector_version", required=True, help="Bare pgvector version (e.g. 0.8.0).")
@click.option("--pg-search", "pg_search_tag", required=True, help="Full pg_search tag (e.g. 0.15.18-pg17).")
@click.option("--show-canonical", is_flag=True, help="Also print the hashed canonical string.")
def fingerprint_command(
    pg_major: str,
    pgvector_version: str,
    pg_search_tag: str,
    show_canonical: bool,
) -> None:
    """Print the SHA-256 fingerprint used for the sha- image label."""
    try:
        canonical = canonical_triple(pg_major, pgvector_version, pg_search_tag)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if show_canonical:
        click.echo(canonical)
    click.echo(hash_canonical(canonical))
