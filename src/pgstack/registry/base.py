"""Base classes and data models for upstream tag sources.

Defines the ``TagSource`` abstract base class that concrete sources
(Docker Hub) implement, along with the ``TagRecord`` model and the
three-variant ``TagFetch`` result that keeps "reachable but empty"
distinct from "unreachable".
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable

logger = logging.getLogger(__name__)

# Fractional seconds of any width; fromisoformat before 3.11 wants 3 or 6 digits.
_FRACTION = re.compile(r"(?<=:\d\d)\.(\d+)")


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TagRecord:
    """A single tag listed by an upstream registry.

    Attributes:
        name: Tag name as published (e.g. "17.2.0-debian-12-r1").
        last_updated: Last-modified time reported by the registry, or
            None when the registry omitted it or sent an unparseable value.
    """

    name: str
    last_updated: datetime | None = None

    @classmethod
    def from_payload(cls, item: dict[str, Any]) -> TagRecord | None:
        """Build a record from one Docker Hub ``results`` item.

        Returns None when the item has no usable name.
        """
        name = item.get("name")
        if not isinstance(name, str) or not name:
            return None
        return cls(name=name, last_updated=parse_timestamp(item.get("last_updated")))


class FetchStatus(Enum):
    """Outcome class of a single tag listing query."""

    FOUND = "found"
    EMPTY = "empty"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class TagFetch:
    """Result of one tag listing query.

    Attributes:
        status: Whether tags were found, the query succeeded with no
            matches, or the registry could not be queried.
        tags: Records returned by the registry (empty unless FOUND).
        detail: Human-readable reason for an UNREACHABLE result.
    """

    status: FetchStatus
    tags: tuple[TagRecord, ...] = ()
    detail: str = ""

    @classmethod
    def found(cls, tags: Iterable[TagRecord]) -> TagFetch:
        records = tuple(tags)
        if not records:
            return cls.empty()
        return cls(status=FetchStatus.FOUND, tags=records)

    @classmethod
    def empty(cls) -> TagFetch:
        return cls(status=FetchStatus.EMPTY)

    @classmethod
    def unreachable(cls, detail: str) -> TagFetch:
        return cls(status=FetchStatus.UNREACHABLE, detail=detail)

    @property
    def is_available(self) -> bool:
        """True when the registry answered, whether or not tags matched."""
        return self.status is not FetchStatus.UNREACHABLE


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 registry timestamp into an aware datetime.

    Docker Hub uses a trailing ``Z`` and a variable number of fractional
    digits; naive values are assumed to be UTC.
    """
    if not isinstance(value, str) or not value:
        return None
    normalized = _FRACTION.sub(
        lambda m: "." + m.group(1)[:6].ljust(6, "0"), value.replace("Z", "+00:00"), count=1,
    )
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        logger.debug("Ignoring unparseable timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------------------------------------------------------------------------
# Abstract tag source
# ---------------------------------------------------------------------------


class TagSource(ABC):
    """Abstract base class for upstream tag listing endpoints.

    Implementations perform exactly one outbound request per call and
    never raise for network or payload problems; those are reported as
    ``FetchStatus.UNREACHABLE``.
    """

    @property
    @abstractmethod
    def component(self) -> str:
        """Identifier of the upstream component (e.g. "bitnami/postgresql")."""

    @abstractmethod
    async def fetch_tags(self, filter_hint: str = "") -> TagFetch:
        """Fetch candidate tags from the registry.

        Args:
            filter_hint: Server-side name filter used to bound the
                response size (a prefix or substring).

        Returns:
            A ``TagFetch`` describing the outcome.
        """
