"""Docker Hub tag source.

Lists tags of a Docker Hub repository through the v2 tag listing API,
narrowed server-side with the ``name`` filter.

Usage::

    source = DockerHubTagSource(PARADEDB_REPOSITORY)
    fetch = await source.fetch_tags("-pg17")
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from pgstack.registry.base import TagFetch, TagRecord, TagSource
from pgstack.registry.http_client import DEFAULT_TIMEOUT, fetch_json

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DOCKER_HUB_TAGS_API: str = "https://hub.docker.com/v2/repositories/{repository}/tags/"

BITNAMI_REPOSITORY: str = "bitnami/postgresql"
PGVECTOR_REPOSITORY: str = "pgvector/pgvector"
PARADEDB_REPOSITORY: str = "paradedb/paradedb"

DEFAULT_PAGE_SIZE: int = 100
DEFAULT_ORDERING: str = "last_updated"


# ---------------------------------------------------------------------------
# Docker Hub source
# ---------------------------------------------------------------------------


class DockerHubTagSource(TagSource):
    """Tag source backed by the Docker Hub v2 API."""

    def __init__(
        self,
        repository: str,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        ordering: str = DEFAULT_ORDERING,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._repository = repository
        self._page_size = page_size
        self._ordering = ordering
        self._timeout = timeout
        self._transport = transport

    @property
    def component(self) -> str:
        """Return the Docker Hub repository name."""
        return self._repository

    @property
    def url(self) -> str:
        return DOCKER_HUB_TAGS_API.format(repository=self._repository)

    async def fetch_tags(self, filter_hint: str = "") -> TagFetch:
        """Query one page of tags matching ``filter_hint``.

        Args:
            filter_hint: Substring passed as the ``name`` query parameter.

        Returns:
            ``TagFetch`` with status FOUND, EMPTY or UNREACHABLE.
        """
        params = {"page_size": str(self._page_size), "ordering": self._ordering}
        if filter_hint:
            params["name"] = filter_hint

        logger.info("Fetching %s tags (name=%s)", self._repository, filter_hint or "*")
        data = await fetch_json(
            self.url, params=params, timeout=self._timeout, transport=self._transport,
        )
        if data is None:
            return TagFetch.unreachable(f"request to {self.url} failed")
        return _payload_to_fetch(self._repository, data)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _payload_to_fetch(repository: str, data: Any) -> TagFetch:
    """Convert a tag listing payload into a ``TagFetch``."""
    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        logger.warning("Malformed tag listing payload for %s", repository)
        return TagFetch.unreachable(f"malformed payload from {repository}")

    records = []
    for item in data["results"]:
        if not isinstance(item, dict):
            continue
        record = TagRecord.from_payload(item)
        if record is not None:
            records.append(record)
    return TagFetch.found(records)
