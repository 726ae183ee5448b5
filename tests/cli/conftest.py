"""Shared fixtures for CLI tests.

Every invocation runs with a scrubbed environment so variables from the
surrounding shell or CI job cannot leak into resolution.
"""

from __future__ import annotations

from typing import Any

import pytest
from click.testing import CliRunner

from pgstack.build.orchestrator import ImageState
from pgstack.core.labels import compose
from pgstack.core.models import Resolution, ResolvedVersionSet, Selection, SelectionSource

_ENV_KEYS = (
    "PG_MAJOR_VERSION",
    "BITNAMI_TAG",
    "PGVECTOR_VERSION",
    "PG_SEARCH_TAG",
    "REGISTRY",
    "REPO_NAME",
    "PGSTACK_TIMEOUT",
    "PGSTACK_DEFAULTS",
    "GITHUB_OUTPUT",
)


@pytest.fixture
def runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def clean_env() -> dict[str, Any]:
    """Environment mapping that unsets every pgstack variable."""
    return {key: None for key in _ENV_KEYS}


@pytest.fixture
def offline_env(clean_env: dict[str, Any]) -> dict[str, Any]:
    """Environment that resolves every field from overrides."""
    return {
        **clean_env,
        "BITNAMI_TAG": "17.2.0-debian-12-r1",
        "PGVECTOR_VERSION": "0.8.0",
        "PG_SEARCH_TAG": "0.15.18-pg17",
        "REGISTRY": "registry",
        "REPO_NAME": "repo",
    }


def make_state(versions: ResolvedVersionSet, exists: bool) -> ImageState:
    """Build an ImageState as inspect_image would return it."""
    return ImageState(
        resolution=Resolution(
            versions=versions,
            selections={
                "base_tag": Selection(versions.base_tag, SelectionSource.LATEST),
                "extension_a": Selection(versions.extension_a, SelectionSource.STABLE),
                "extension_b": Selection(
                    versions.extension_b, SelectionSource.DEFAULT, "Could not determine pg_search",
                ),
            },
        ),
        labels=compose(versions, "registry/repo"),
        image_exists=exists,
    )


@pytest.fixture
def state_factory(pg17_versions: ResolvedVersionSet):
    """Factory producing ImageState for the PG 17 reference versions."""
    return lambda exists=False: make_state(pg17_versions, exists)
