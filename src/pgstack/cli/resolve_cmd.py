"""``pgstack resolve`` — Resolve component versions and image labels.

Writes the resolved variables to ``$GITHUB_OUTPUT`` when running in
GitHub Actions; otherwise prints them in the requested format.

Usage::

    pgstack resolve 17
    eval "$(pgstack resolve 17)"
    PG_MAJOR_VERSION=16 pgstack resolve --format json
    pgstack resolve 17 --no-check --format table

Exit Codes:
    0 — Variables resolved (defaults may have been substituted).
    1 — No major version supplied, or invalid configuration.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from pgstack.build.orchestrator import inspect_image
from pgstack.build.outputs import build_variables, format_exports, write_github_output
from pgstack.core.config import ResolutionConfig
from pgstack.exceptions import ConfigError, OutputError


@click.command("resolve")
@click.argument("pg_major", required=False)
@click.option(
    "--format", "output_format",
    type=click.Choice(["exports", "json", "table"]),
    default="exports",
    help="Local output format (default: exports). Ignored when GITHUB_OUTPUT is set.",
)
@click.option(
    "--check/--no-check",
    default=True,
    help="Query the registry for the content-hash label (default: check).",
)
def resolve_command(pg_major: str | None, output_format: str, check: bool) -> None:
    """Resolve image versions and labels for PG_MAJOR.

    PG_MAJOR falls back to the PG_MAJOR_VERSION environment variable.
    """
    try:
        config = ResolutionConfig.from_env(major_line=pg_major)
        state = inspect_image(config, check_existence=check)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    variables = build_variables(state.resolution, state.labels, state.image_exists, config)

    github_output = os.environ.get("GITHUB_OUTPUT")
    if github_output:
        try:
            write_github_output(Path(github_output), variables)
        except OutputError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)
        click.echo("Variables written to GITHUB_OUTPUT.", err=True)
    elif output_format == "json":
        payload = {
            "variables": variables,
            "labels": state.labels.as_list(),
            "selections": {
                name: {"value": s.value, "source": s.source.value, "warning": s.warning}
                for name, s in state.resolution.selections.items()
            },
        }
        click.echo(json.dumps(payload, indent=2))
    elif output_format == "table":
        from pgstack.cli.output import print_resolution_table
        print_resolution_table(state)
    else:
        click.echo(format_exports(variables))
