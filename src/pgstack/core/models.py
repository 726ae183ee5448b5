"""Resolution data models.

Pure value objects shared by the selector, engine, label composer and
fingerprint. None of them carry behaviour beyond validation and simple
derived properties, so they are safe to import from anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


# ---------------------------------------------------------------------------
# Selection bookkeeping
# ---------------------------------------------------------------------------


class SelectionSource(Enum):
    """How a resolved field obtained its value."""

    OVERRIDE = "override"  # supplied by configuration, no network access
    LATEST = "latest"  # most recent matching base tag
    STABLE = "stable"  # most recent fully numeric extension tag
    ALIAS = "alias"  # latest-pgN alias tag
    DEFAULT = "default"  # hard default literal


@dataclass(frozen=True)
class Selection:
    """A chosen value plus the path that produced it.

    Attributes:
        value: The selected tag or version string.
        source: Which tier of the fallback chain produced ``value``.
        warning: Operator-facing message when a default was substituted.
    """

    value: str
    source: SelectionSource
    warning: str | None = None

    @property
    def used_default(self) -> bool:
        return self.source is SelectionSource.DEFAULT


# ---------------------------------------------------------------------------
# Resolved versions and labels
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResolvedVersionSet:
    """The version triple for one PostgreSQL major line.

    Attributes:
        major_line: PostgreSQL major version (e.g. "17").
        base_tag: Bitnami PostgreSQL tag (e.g. "17.2.0-debian-12-r1").
        extension_a: Bare pgvector version (e.g. "0.8.0").
        extension_b: Full pg_search tag (e.g. "0.15.18-pg17").
    """

    major_line: str
    base_tag: str
    extension_a: str
    extension_b: str

    def __post_init__(self) -> None:
        for name in ("major_line", "base_tag", "extension_a", "extension_b"):
            if not getattr(self, name):
                raise ValueError(f"ResolvedVersionSet.{name} must be non-empty")

    @property
    def suffix(self) -> str:
        """Tag suffix shared by extension images, e.g. "pg17"."""
        return line_suffix(self.major_line)

    @property
    def extension_a_tag(self) -> str:
        """pgvector image tag used as the build stage, e.g. "0.8.0-pg17"."""
        return f"{self.extension_a}-{self.suffix}"


@dataclass(frozen=True)
class LabelSet:
    """Every label applied to one built image, namespace included."""

    short: str
    postgres_line: str
    full: str
    alias: str
    hash: str

    def as_list(self) -> list[str]:
        """Labels in fixed order. A label equal to an earlier one is dropped."""
        return list(dict.fromkeys(
            [self.short, self.postgres_line, self.full, self.alias, self.hash]
        ))


@dataclass(frozen=True)
class Resolution:
    """Engine output: resolved versions plus the per-field audit trail."""

    versions: ResolvedVersionSet
    selections: dict[str, Selection] = field(default_factory=dict)

    @property
    def warnings(self) -> list[str]:
        return [s.warning for s in self.selections.values() if s.warning]


def line_suffix(major_line: str) -> str:
    return f"pg{major_line}"
