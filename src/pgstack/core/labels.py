"""Image label composition.

Pure string composition, no I/O. For namespace ``ghcr.io/org/repo`` and
versions (17, 17.2.0-debian-12-r1, 0.8.0, 0.15.18-pg17)::

    short          ghcr.io/org/repo:0.8.0-pg17
    postgres_line  ghcr.io/org/repo:0.8.0-pg17-postgres17
    full           ghcr.io/org/repo:0.8.0-pg17-17.2.0-debian-12-r1
    alias          ghcr.io/org/repo:latest-pg17
    hash           ghcr.io/org/repo:sha-<fingerprint>
"""

from __future__ import annotations

from pgstack.core.fingerprint import fingerprint
from pgstack.core.models import LabelSet, ResolvedVersionSet


def compose(versions: ResolvedVersionSet, namespace: str) -> LabelSet:
    """Derive every image label for ``versions`` under ``namespace``."""
    short = f"{namespace}:{versions.extension_a_tag}"
    return LabelSet(
        short=short,
        postgres_line=f"{short}-postgres{versions.major_line}",
        full=f"{short}-{versions.base_tag}",
        alias=f"{namespace}:latest-{versions.suffix}",
        hash=f"{namespace}:sha-{fingerprint(versions)}",
    )
