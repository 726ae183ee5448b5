"""Build orchestration: turn a resolution into a ``docker buildx`` invocation.

The multi-stage image build itself is delegated to Docker Buildx. This
module decides whether a build is needed and assembles the arguments it
receives: the base and extension identifiers as build args and every
label of the ``LabelSet`` as a ``--tag``.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Callable

from pgstack.core.config import ResolutionConfig
from pgstack.core.engine import ResolutionEngine
from pgstack.core.labels import compose
from pgstack.core.models import LabelSet, Resolution
from pgstack.exceptions import BuildError
from pgstack.registry.manifest import ExistenceGate

logger = logging.getLogger(__name__)

BUILDER_NAME: str = "multiarch-builder"

Runner = Callable[..., "subprocess.CompletedProcess[bytes]"]


@dataclass(frozen=True)
class BuildPlan:
    """Everything passed to the external build executor.

    Attributes:
        build_args: ``--build-arg`` values keyed by argument name.
        tags: Labels applied to the produced image.
        platform: Target platforms (e.g. "linux/amd64,linux/arm64"), or
            None for the current architecture.
        push: Whether the image is pushed after building.
        dockerfile: Dockerfile path relative to ``context``.
        context: Build context directory.
    """

    build_args: dict[str, str]
    tags: list[str]
    platform: str | None = None
    push: bool = False
    dockerfile: str = "Dockerfile"
    context: str = "."
    env: dict[str, str] = field(default_factory=lambda: {"DOCKER_BUILDKIT": "1"})

    def command(self, docker: str = "docker") -> list[str]:
        """Return the ``docker buildx build`` argument vector."""
        cmd = [docker, "buildx", "build"]
        if self.platform:
            cmd += ["--platform", self.platform]
        for name, value in self.build_args.items():
            cmd += ["--build-arg", f"{name}={value}"]
        for tag in self.tags:
            cmd += ["--tag", tag]
        if self.push:
            cmd.append("--push")
        cmd += ["-f", self.dockerfile, self.context]
        return cmd


def plan_build(
    resolution: Resolution,
    labels: LabelSet,
    *,
    platform: str | None = None,
    push: bool = False,
) -> BuildPlan:
    """Assemble the build plan for a resolved version set."""
    versions = resolution.versions
    return BuildPlan(
        build_args={
            "BITNAMI_TAG": versions.base_tag,
            "PGVECTOR_BUILDER_TAG": versions.extension_a_tag,
            "PG_MAJOR_VERSION": versions.major_line,
            "PG_SEARCH_TAG": versions.extension_b,
        },
        tags=labels.as_list(),
        platform=platform,
        push=push,
    )


def should_build(image_exists: bool, *, push: bool, force: bool = False) -> bool:
    """Decide whether the executor has to run.

    A published image is only skipped when pushing; a local build still
    runs so the image is available on this machine.
    """
    if force:
        return True
    return not (image_exists and push)


def run_build(plan: BuildPlan, runner: Runner = subprocess.run, docker: str = "docker") -> None:
    """Execute ``plan`` with Docker Buildx.

    Raises:
        BuildError: If the build command cannot be started or exits
            non-zero.
    """
    env = {**os.environ, **plan.env}

    try:
        runner(
            [docker, "buildx", "create", "--name", BUILDER_NAME, "--use"],
            env=env, check=False, capture_output=True,
        )
    except OSError as exc:
        raise BuildError(f"Cannot run {docker}: {exc}") from exc

    cmd = plan.command(docker)
    logger.info("Running command: %s", " ".join(cmd))
    try:
        result = runner(cmd, env=env, check=False)
    except OSError as exc:
        raise BuildError(f"Cannot run {docker}: {exc}") from exc
    if result.returncode != 0:
        raise BuildError(f"docker buildx build exited with status {result.returncode}")
    logger.info("Build completed: %s", ", ".join(plan.tags))


# ---------------------------------------------------------------------------
# Resolution run
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ImageState:
    """Resolved versions, their labels and whether the hash label is published."""

    resolution: Resolution
    labels: LabelSet
    image_exists: bool


def inspect_image(
    config: ResolutionConfig,
    *,
    engine: ResolutionEngine | None = None,
    gate: ExistenceGate | None = None,
    check_existence: bool = True,
) -> ImageState:
    """Resolve, compose labels, and query the existence gate once.

    Raises:
        MissingMajorVersionError: If ``config`` has no major line.
    """
    resolution = (engine or ResolutionEngine()).resolve_sync(config)
    labels = compose(resolution.versions, config.namespace)
    exists = False
    if check_existence:
        exists = (gate or ExistenceGate()).exists(labels.hash)
    return ImageState(resolution=resolution, labels=labels, image_exists=exists)
