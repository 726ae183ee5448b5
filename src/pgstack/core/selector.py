"""Version selection policies.

Turns a ``TagFetch`` into one ``Selection`` using a source-specific policy
with a deterministic fallback chain.

Base policy (Bitnami PostgreSQL):
    most recent tag starting with ``{line}.`` and containing the platform
    marker, else the default tag.

Extension policy (pgvector, pg_search):
    most recent fully numeric ``X.Y.Z-pg{line}`` tag, else the
    ``latest-pg{line}`` alias, else ``{default}-pg{line}``.

Recency is the only ordering signal. Tag names are never compared
lexically because upstream naming is not monotonic. Candidates with equal
timestamps keep the order the registry returned them in.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Protocol, Sequence

from pgstack.core.models import Selection, SelectionSource, line_suffix
from pgstack.registry.base import FetchStatus, TagFetch, TagRecord

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)

RecencyKey = Callable[[TagRecord], datetime]


def by_recency(record: TagRecord) -> datetime:
    """Sort key placing records without a timestamp last."""
    return record.last_updated or _OLDEST


def newest_first(records: Sequence[TagRecord], key: RecencyKey = by_recency) -> list[TagRecord]:
    # sorted() with reverse=True is stable, so ties keep registry order.
    return sorted(records, key=key, reverse=True)


class SelectionPolicy(Protocol):
    def select(self, fetch: TagFetch) -> Selection: ...


def select_version(fetch: TagFetch, policy: SelectionPolicy) -> Selection:
    """Apply ``policy`` to a fetch result."""
    return policy.select(fetch)


def _describe_miss(fetch: TagFetch) -> str:
    if fetch.status is FetchStatus.UNREACHABLE:
        return f"registry unavailable ({fetch.detail})" if fetch.detail else "registry unavailable"
    if fetch.status is FetchStatus.EMPTY:
        return "registry returned no tags"
    return "no tag matched"


# ---------------------------------------------------------------------------
# Base component
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BasePolicy:
    """Selects the newest Bitnami PostgreSQL tag for a major line."""

    major_line: str
    default: str
    marker: str = "-debian-"
    component: str = "Bitnami PostgreSQL"
    key: RecencyKey = field(default=by_recency, compare=False)

    @property
    def prefix(self) -> str:
        return f"{self.major_line}."

    def matches(self, record: TagRecord) -> bool:
        return record.name.startswith(self.prefix) and self.marker in record.name

    def select(self, fetch: TagFetch) -> Selection:
        survivors = [t for t in fetch.tags if self.matches(t)]
        if survivors:
            chosen = newest_first(survivors, self.key)[0]
            logger.info("Latest %s tag found: %s", self.component, chosen.name)
            return Selection(chosen.name, SelectionSource.LATEST)

        warning = (
            f"Could not determine the latest {self.component} tag for PG "
            f"{self.major_line} ({_describe_miss(fetch)}). Using default: {self.default}"
        )
        logger.warning("%s", warning)
        return Selection(self.default, SelectionSource.DEFAULT, warning)


# ---------------------------------------------------------------------------
# Extension components
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExtensionPolicy:
    """Selects a stable, alias or default extension tag for a major line."""

    major_line: str
    default_version: str
    component: str = "extension"
    key: RecencyKey = field(default=by_recency, compare=False)

    @property
    def suffix(self) -> str:
        return line_suffix(self.major_line)

    @property
    def alias(self) -> str:
        return f"latest-{self.suffix}"

    @property
    def default(self) -> str:
        return f"{self.default_version}-{self.suffix}"

    @property
    def stable_pattern(self) -> re.Pattern[str]:
        return re.compile(rf"^\d+\.\d+\.\d+-{re.escape(self.suffix)}$")

    def select(self, fetch: TagFetch) -> Selection:
        relevant = [t for t in fetch.tags if t.name.endswith(f"-{self.suffix}")]

        pattern = self.stable_pattern
        stable = [t for t in relevant if pattern.match(t.name)]
        if stable:
            chosen = newest_first(stable, self.key)[0]
            logger.info("Latest stable %s tag found: %s", self.component, chosen.name)
            return Selection(chosen.name, SelectionSource.STABLE)

        if any(t.name == self.alias for t in relevant):
            logger.info(
                "No stable %s tag ending with -%s, using alias %s",
                self.component, self.suffix, self.alias,
            )
            return Selection(self.alias, SelectionSource.ALIAS)

        warning = (
            f"Could not determine a stable or alias {self.component} tag for PG "
            f"{self.major_line} ({_describe_miss(fetch)}). Using default: {self.default}"
        )
        logger.warning("%s", warning)
        return Selection(self.default, SelectionSource.DEFAULT, warning)
