"""Output sinks for resolved build variables.

Two sinks exist:

- CI: ``KEY=VALUE`` lines appended to the file named by ``GITHUB_OUTPUT``.
- Local: ``export KEY='VALUE'`` lines on stdout, suitable for ``eval``.

Both render the same ordered mapping from ``build_variables``.
"""

from __future__ import annotations

import shlex
from pathlib import Path

from pgstack.core.config import ResolutionConfig
from pgstack.core.fingerprint import fingerprint
from pgstack.core.models import LabelSet, Resolution
from pgstack.exceptions import OutputError


def build_variables(
    resolution: Resolution,
    labels: LabelSet,
    image_exists: bool,
    config: ResolutionConfig,
) -> dict[str, str]:
    """Flatten a resolution into the variables consumed by CI jobs."""
    versions = resolution.versions
    return {
        "BITNAMI_NAME": versions.base_tag,
        "PGVECTOR_BASE_VERSION": versions.extension_a,
        "PG_SEARCH_NAME": versions.extension_b,
        "PGVECTOR_BUILDER_TAG": versions.extension_a_tag,
        "FULL_IMAGE_TAG": labels.full,
        "TAG_SHORT": labels.short,
        "TAG_WITH_FULL_POSTGRES_VERSION": labels.postgres_line,
        "TAG_LATEST_PG": labels.alias,
        "IMAGE_EXISTS": "true" if image_exists else "false",
        "VERSION_HASH": fingerprint(versions),
        "VERSIONS_HASH_TAG": labels.hash,
        "REPO_NAME": config.repo_name,
    }


def write_github_output(path: Path, variables: dict[str, str]) -> None:
    """Append ``KEY=VALUE`` lines to a GitHub Actions output file.

    Raises:
        OutputError: If the file cannot be written.
    """
    lines = "".join(f"{key}={value}\n" for key, value in variables.items())
    try:
        with path.open("a", encoding="utf-8") as fh:
            fh.write(lines)
    except OSError as exc:
        raise OutputError(f"Cannot write outputs to {path}: {exc}") from exc


def format_exports(variables: dict[str, str]) -> str:
    """Render shell ``export`` statements, one per variable."""
    return "\n".join(f"export {key}={shlex.quote(value)}" for key, value in variables.items())
