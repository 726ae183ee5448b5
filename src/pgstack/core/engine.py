"""Resolution engine: one selector per upstream component.

Usage::

    config = ResolutionConfig.from_env(major_line="17")
    resolution = ResolutionEngine().resolve_sync(config)
    print(resolution.versions.base_tag)

Fields resolve independently and concurrently. A field with an override
skips its network query altogether. The only fatal condition is a missing
major line; everything else degrades to the configured default with a
warning.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from pgstack.core.config import ResolutionConfig
from pgstack.core.models import Resolution, ResolvedVersionSet, Selection, SelectionSource, line_suffix
from pgstack.core.selector import BasePolicy, ExtensionPolicy, SelectionPolicy, select_version
from pgstack.registry.base import TagFetch, TagSource
from pgstack.registry.docker_hub import (
    BITNAMI_REPOSITORY,
    PARADEDB_REPOSITORY,
    PGVECTOR_REPOSITORY,
    DockerHubTagSource,
)

logger = logging.getLogger(__name__)

BASE_FIELD = "base_tag"
EXTENSION_A_FIELD = "extension_a"
EXTENSION_B_FIELD = "extension_b"


@dataclass(frozen=True)
class ComponentSources:
    """Tag sources for the three upstream components."""

    base: TagSource
    extension_a: TagSource
    extension_b: TagSource

    @classmethod
    def docker_hub(cls, timeout: float) -> ComponentSources:
        return cls(
            base=DockerHubTagSource(BITNAMI_REPOSITORY, timeout=timeout),
            extension_a=DockerHubTagSource(PGVECTOR_REPOSITORY, timeout=timeout),
            extension_b=DockerHubTagSource(PARADEDB_REPOSITORY, timeout=timeout),
        )


class ResolutionEngine:
    """Resolves a ``ResolvedVersionSet`` for one major line.

    Args:
        sources: Tag sources to query. Docker Hub sources using the
            configured timeout are created per run when omitted.
    """

    def __init__(self, sources: ComponentSources | None = None) -> None:
        self._sources = sources

    async def resolve(self, config: ResolutionConfig) -> Resolution:
        """Resolve every field for ``config.major_line``.

        Raises:
            MissingMajorVersionError: If no major line is configured.
        """
        line = config.require_major_line()
        sources = self._sources or ComponentSources.docker_hub(config.timeout)
        defaults = config.defaults
        overrides = config.overrides
        suffix = line_suffix(line)

        base, ext_a, ext_b = await asyncio.gather(
            self._resolve_field(
                BASE_FIELD, overrides.base_tag, sources.base, f"{line}.",
                BasePolicy(line, default=defaults.base_tag), config.timeout,
            ),
            self._resolve_field(
                EXTENSION_A_FIELD, overrides.extension_a, sources.extension_a, f"-{suffix}",
                ExtensionPolicy(line, defaults.pgvector_version, component="pgvector"),
                config.timeout,
            ),
            self._resolve_field(
                EXTENSION_B_FIELD, overrides.extension_b, sources.extension_b, f"-{suffix}",
                ExtensionPolicy(line, defaults.pg_search_version, component="pg_search"),
                config.timeout,
            ),
        )

        # pgvector is tracked by bare version; its image tag is rebuilt from
        # the line suffix when labels and build args are derived.
        if ext_a.source is not SelectionSource.OVERRIDE:
            ext_a = Selection(_strip_suffix(ext_a.value, suffix), ext_a.source, ext_a.warning)

        versions = ResolvedVersionSet(
            major_line=line,
            base_tag=base.value,
            extension_a=ext_a.value,
            extension_b=ext_b.value,
        )
        logger.info(
            "Resolved PG %s: base=%s pgvector=%s pg_search=%s",
            line, versions.base_tag, versions.extension_a, versions.extension_b,
        )
        return Resolution(
            versions=versions,
            selections={BASE_FIELD: base, EXTENSION_A_FIELD: ext_a, EXTENSION_B_FIELD: ext_b},
        )

    def resolve_sync(self, config: ResolutionConfig) -> Resolution:
        """Run ``resolve`` in a fresh event loop."""
        return asyncio.run(self.resolve(config))

    async def _resolve_field(
        self,
        name: str,
        override: str | None,
        source: TagSource,
        filter_hint: str,
        policy: SelectionPolicy,
        timeout: float,
    ) -> Selection:
        if override:
            logger.info("Using override for %s: %s", name, override)
            return Selection(override, SelectionSource.OVERRIDE)
        fetch = await _fetch_with_timeout(source, filter_hint, timeout)
        return select_version(fetch, policy)


async def _fetch_with_timeout(source: TagSource, filter_hint: str, timeout: float) -> TagFetch:
    try:
        return await asyncio.wait_for(source.fetch_tags(filter_hint), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Timed out after %ss fetching %s tags", timeout, source.component)
        return TagFetch.unreachable(f"timed out after {timeout}s")


def _strip_suffix(tag: str, suffix: str) -> str:
    tail = f"-{suffix}"
    if tag.endswith(tail) and len(tag) > len(tail):
        return tag[: -len(tail)]
    return tag
