"""Build fingerprint: a content hash over the semantic version triple.

The canonical string has a fixed field order and fixed delimiters::

    pg:{major_line}-pgvector:{extension_a}-pgsearch:{extension_b}

Only semantic versions participate. The Bitnami base tag is excluded so
that base image patch releases reuse the published ``sha-`` label, and
timestamps never reach this module at all.
"""

from __future__ import annotations

import hashlib

from pgstack.core.models import ResolvedVersionSet

FINGERPRINT_ALGORITHM: str = "sha256"


def canonical_triple(major_line: str, extension_a: str, extension_b: str) -> str:
    """Return the delimited string for a bare version triple.

    Raises:
        ValueError: If any field is empty.
    """
    for name, value in (
        ("major_line", major_line),
        ("extension_a", extension_a),
        ("extension_b", extension_b),
    ):
        if not value:
            raise ValueError(f"{name} must be non-empty")
    return f"pg:{major_line}-pgvector:{extension_a}-pgsearch:{extension_b}"


def hash_canonical(canonical: str) -> str:
    """Compute the SHA-256 hex digest (64 lowercase characters)."""
    digest = hashlib.new(FINGERPRINT_ALGORITHM)
    digest.update(canonical.encode("utf-8"))
    return digest.hexdigest()


def canonical_string(versions: ResolvedVersionSet) -> str:
    """Return the delimited string the fingerprint is computed over."""
    return canonical_triple(versions.major_line, versions.extension_a, versions.extension_b)


def fingerprint(versions: ResolvedVersionSet) -> str:
    return hash_canonical(canonical_string(versions))
