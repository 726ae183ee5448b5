"""Tests for CI and shell output sinks."""

from __future__ import annotations

from pathlib import Path

import pytest

from pgstack.build.outputs import build_variables, format_exports, write_github_output
from pgstack.core.config import ResolutionConfig
from pgstack.core.fingerprint import fingerprint
from pgstack.core.labels import compose
from pgstack.core.models import Resolution, ResolvedVersionSet
from pgstack.exceptions import OutputError


@pytest.fixture
def variables(pg17_versions: ResolvedVersionSet) -> dict[str, str]:
    config = ResolutionConfig("17", registry="ghcr.io", repo_name="org/repo")
    labels = compose(pg17_versions, config.namespace)
    return build_variables(Resolution(versions=pg17_versions), labels, False, config)


class TestBuildVariables:
    """Tests for build_variables."""

    def test_keys_in_order(self, variables: dict[str, str]) -> None:
        assert list(variables) == [
            "BITNAMI_NAME",
            "PGVECTOR_BASE_VERSION",
            "PG_SEARCH_NAME",
            "PGVECTOR_BUILDER_TAG",
            "FULL_IMAGE_TAG",
            "TAG_SHORT",
            "TAG_WITH_FULL_POSTGRES_VERSION",
            "TAG_LATEST_PG",
            "IMAGE_EXISTS",
            "VERSION_HASH",
            "VERSIONS_HASH_TAG",
            "REPO_NAME",
        ]

    def test_values(self, variables: dict[str, str], pg17_versions: ResolvedVersionSet) -> None:
        assert variables["BITNAMI_NAME"] == "17.2.0-debian-12-r1"
        assert variables["PGVECTOR_BASE_VERSION"] == "0.8.0"
        assert variables["PGVECTOR_BUILDER_TAG"] == "0.8.0-pg17"
        assert variables["TAG_SHORT"] == "ghcr.io/org/repo:0.8.0-pg17"
        assert variables["TAG_WITH_FULL_POSTGRES_VERSION"] == "ghcr.io/org/repo:0.8.0-pg17-postgres17"
        assert variables["TAG_LATEST_PG"] == "ghcr.io/org/repo:latest-pg17"
        assert variables["IMAGE_EXISTS"] == "false"
        assert variables["VERSION_HASH"] == fingerprint(pg17_versions)
        assert variables["VERSIONS_HASH_TAG"].endswith(variables["VERSION_HASH"])
        assert variables["REPO_NAME"] == "org/repo"


class TestWriteGithubOutput:
    """Tests for write_github_output."""

    def test_appends(self, tmp_path: Path) -> None:
        path = tmp_path / "output"
        path.write_text("EXISTING=1\n")
        write_github_output(path, {"A": "1", "B": "two"})
        assert path.read_text() == "EXISTING=1\nA=1\nB=two\n"

    def test_unwritable(self, tmp_path: Path) -> None:
        with pytest.raises(OutputError):
            write_github_output(tmp_path / "missing-dir" / "output", {"A": "1"})


class TestFormatExports:
    """Tests for format_exports."""

    def test_lines(self) -> None:
        assert format_exports({"A": "1", "B": "x:y/z"}) == "export A=1\nexport B=x:y/z"

    def test_quotes_unsafe_values(self) -> None:
        assert format_exports({"A": "a b"}) == "export A='a b'"
