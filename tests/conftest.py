"""Shared fixtures for pgstack tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import pytest

from pgstack.core.models import ResolvedVersionSet
from pgstack.registry.base import TagFetch, TagRecord, TagSource


class StaticTagSource(TagSource):
    """In-memory tag source returning a fixed fetch result."""

    def __init__(self, fetch: TagFetch, component: str = "static/repo") -> None:
        self._fetch = fetch
        self._component = component
        self.calls: list[str] = []

    @property
    def component(self) -> str:
        return self._component

    async def fetch_tags(self, filter_hint: str = "") -> TagFetch:
        self.calls.append(filter_hint)
        return self._fetch


@pytest.fixture
def tag() -> Callable[..., TagRecord]:
    """Factory for TagRecords with a day-of-month timestamp."""

    def _make(name: str, day: int | None = 1) -> TagRecord:
        stamp = datetime(2024, 2, day, 12, 0, tzinfo=timezone.utc) if day else None
        return TagRecord(name=name, last_updated=stamp)

    return _make


@pytest.fixture
def static_source() -> Callable[..., StaticTagSource]:
    """Factory for StaticTagSource instances."""
    return StaticTagSource


@pytest.fixture
def pg17_versions() -> ResolvedVersionSet:
    """The reference version set for PostgreSQL 17."""
    return ResolvedVersionSet(
        major_line="17",
        base_tag="17.2.0-debian-12-r1",
        extension_a="0.8.0",
        extension_b="0.15.18-pg17",
    )
