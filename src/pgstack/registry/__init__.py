"""Upstream tag sources and the registry existence gate.

Public API::

    from pgstack.registry import TagRecord, TagFetch, FetchStatus, TagSource
    from pgstack.registry.docker_hub import DockerHubTagSource
    from pgstack.registry.manifest import ExistenceGate
"""

from __future__ import annotations

from pgstack.registry.base import FetchStatus, TagFetch, TagRecord, TagSource

__all__ = [
    "FetchStatus",
    "TagFetch",
    "TagRecord",
    "TagSource",
]
