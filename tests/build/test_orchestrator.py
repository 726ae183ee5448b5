"""Tests for build orchestration — docker is never invoked."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock

import pytest

from pgstack.build.orchestrator import (
    BUILDER_NAME,
    BuildPlan,
    inspect_image,
    plan_build,
    run_build,
    should_build,
)
from pgstack.core.config import FieldOverrides, ResolutionConfig
from pgstack.core.engine import ResolutionEngine
from pgstack.core.labels import compose
from pgstack.core.models import Resolution, ResolvedVersionSet
from pgstack.exceptions import BuildError, MissingMajorVersionError


def _completed(code: int = 0) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=code)


@pytest.fixture
def plan(pg17_versions: ResolvedVersionSet) -> BuildPlan:
    return plan_build(
        Resolution(versions=pg17_versions),
        compose(pg17_versions, "ghcr.io/org/repo"),
        platform="linux/amd64,linux/arm64",
        push=True,
    )


class TestShouldBuild:
    """Tests for should_build."""

    def test_missing_image_builds(self) -> None:
        assert should_build(False, push=True)
        assert should_build(False, push=False)

    def test_published_image_skipped_when_pushing(self) -> None:
        assert not should_build(True, push=True)

    def test_published_image_still_built_locally(self) -> None:
        assert should_build(True, push=False)

    def test_force(self) -> None:
        assert should_build(True, push=True, force=True)


class TestPlanBuild:
    """Tests for plan_build and BuildPlan.command."""

    def test_build_args(self, plan: BuildPlan) -> None:
        assert plan.build_args == {
            "BITNAMI_TAG": "17.2.0-debian-12-r1",
            "PGVECTOR_BUILDER_TAG": "0.8.0-pg17",
            "PG_MAJOR_VERSION": "17",
            "PG_SEARCH_TAG": "0.15.18-pg17",
        }

    def test_every_label_is_a_tag(self, plan: BuildPlan) -> None:
        assert plan.tags[:4] == [
            "ghcr.io/org/repo:0.8.0-pg17",
            "ghcr.io/org/repo:0.8.0-pg17-postgres17",
            "ghcr.io/org/repo:0.8.0-pg17-17.2.0-debian-12-r1",
            "ghcr.io/org/repo:latest-pg17",
        ]
        assert plan.tags[4].startswith("ghcr.io/org/repo:sha-")

    def test_alias_fallback_tags_are_unique(self) -> None:
        versions = ResolvedVersionSet("17", "17.2.0-debian-12-r1", "latest", "0.15.18-pg17")
        plan = plan_build(
            Resolution(versions=versions), compose(versions, "ns"), platform=None, push=False,
        )
        assert len(plan.tags) == len(set(plan.tags))
        assert plan.command().count("ns:latest-pg17") == 1

    def test_command(self, plan: BuildPlan) -> None:
        cmd = plan.command()
        assert cmd[:3] == ["docker", "buildx", "build"]
        assert cmd[3:5] == ["--platform", "linux/amd64,linux/arm64"]
        assert "--build-arg" in cmd
        assert "PG_SEARCH_TAG=0.15.18-pg17" in cmd
        assert cmd.count("--tag") == 5
        assert "--push" in cmd
        assert cmd[-3:] == ["-f", "Dockerfile", "."]

    def test_command_without_platform_or_push(self, pg17_versions: ResolvedVersionSet) -> None:
        plan = plan_build(Resolution(versions=pg17_versions), compose(pg17_versions, "r/x"))
        cmd = plan.command()
        assert "--platform" not in cmd
        assert "--push" not in cmd


class TestRunBuild:
    """Tests for run_build."""

    def test_creates_builder_then_builds(self, plan: BuildPlan) -> None:
        runner = MagicMock(return_value=_completed(0))
        run_build(plan, runner=runner)
        assert runner.call_count == 2
        create_cmd = runner.call_args_list[0].args[0]
        assert create_cmd == ["docker", "buildx", "create", "--name", BUILDER_NAME, "--use"]
        assert runner.call_args_list[1].args[0] == plan.command()
        assert runner.call_args_list[1].kwargs["env"]["DOCKER_BUILDKIT"] == "1"

    def test_existing_builder_ignored(self, plan: BuildPlan) -> None:
        runner = MagicMock(side_effect=[_completed(1), _completed(0)])
        run_build(plan, runner=runner)

    def test_failed_build_raises(self, plan: BuildPlan) -> None:
        runner = MagicMock(side_effect=[_completed(0), _completed(1)])
        with pytest.raises(BuildError, match="status 1"):
            run_build(plan, runner=runner)

    def test_missing_docker_raises(self, plan: BuildPlan) -> None:
        runner = MagicMock(side_effect=FileNotFoundError("docker"))
        with pytest.raises(BuildError, match="Cannot run"):
            run_build(plan, runner=runner)


class TestInspectImage:
    """Tests for inspect_image."""

    @pytest.fixture
    def config(self) -> ResolutionConfig:
        return ResolutionConfig(
            "17",
            registry="registry",
            repo_name="repo",
            overrides=FieldOverrides("17.2.0-debian-12-r1", "0.8.0", "0.15.18-pg17"),
        )

    def test_checks_hash_label(self, config: ResolutionConfig) -> None:
        gate = MagicMock()
        gate.exists.return_value = True
        state = inspect_image(config, engine=ResolutionEngine(), gate=gate)
        assert state.image_exists is True
        gate.exists.assert_called_once_with(state.labels.hash)
        assert state.labels.short == "registry/repo:0.8.0-pg17"

    def test_skip_check(self, config: ResolutionConfig) -> None:
        gate = MagicMock()
        state = inspect_image(config, gate=gate, check_existence=False)
        assert state.image_exists is False
        gate.exists.assert_not_called()

    def test_missing_line(self) -> None:
        with pytest.raises(MissingMajorVersionError):
            inspect_image(ResolutionConfig(None), gate=MagicMock())
