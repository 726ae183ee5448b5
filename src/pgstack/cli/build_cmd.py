"""``pgstack build`` — Build the image unless an identical one is published.

Resolves versions, checks the content-hash label, and runs
``docker buildx build`` with every resolved label.

Usage::

    pgstack build --pg 17
    pgstack build --pg 16 --push --platform linux/amd64,linux/arm64
    pgstack build --pg 17 --dry-run

Exit Codes:
    0 — Image built, or skipped because it is already published.
    1 — Invalid major version, invalid configuration, or build failure.
"""

from __future__ import annotations

import sys

import click

from pgstack.build.orchestrator import inspect_image, plan_build, run_build, should_build
from pgstack.core.config import ResolutionConfig
from pgstack.exceptions import BuildError, ConfigError


@click.command("build")
@click.option("--pg", "pg_major", required=True, help="PostgreSQL major version (e.g. 16).")
@click.option("--push", is_flag=True, help="Push the image to the registry after building.")
@click.option(
    "--platform", default=None,
    help="Target platforms (e.g. linux/amd64,linux/arm64). Defaults to the current architecture.",
)
@click.option("--force", is_flag=True, help="Build even if the image is already published.")
@click.option("--dry-run", is_flag=True, help="Print the build command without running it.")
def build_command(
    pg_major: str,
    push: bool,
    platform: str | None,
    force: bool,
    dry_run: bool,
) -> None:
    """Build the pgvector + pg_search image for a PostgreSQL major version."""
    if not pg_major.strip().isdigit():
        click.echo(
            f"Error: Invalid PostgreSQL version provided: '{pg_major}'. Must be a number.",
            err=True,
        )
        sys.exit(1)

    try:
        config = ResolutionConfig.from_env(major_line=pg_major)
        state = inspect_image(config)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if not should_build(state.image_exists, push=push, force=force):
        click.echo("Image already exists in registry. Skipping build and push.")
        sys.exit(0)
    if state.image_exists and not force:
        click.echo("Image already exists in registry, continuing with local build as --push was not specified.")

    plan = plan_build(state.resolution, state.labels, platform=platform, push=push)
    if dry_run:
        click.echo(" ".join(plan.command()))
        sys.exit(0)

    try:
        run_build(plan)
    except BuildError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    verb = "tagged and pushed" if push else "tagged locally"
    for tag in plan.tags:
        click.echo(f"Image {verb} as: {tag}")
