"""Build orchestration and CI output sinks built on top of a resolution."""

from pgstack.build.orchestrator import (
    BuildPlan,
    ImageState,
    inspect_image,
    plan_build,
    run_build,
    should_build,
)
from pgstack.build.outputs import build_variables, format_exports, write_github_output

__all__ = [
    "BuildPlan",
    "ImageState",
    "build_variables",
    "format_exports",
    "inspect_image",
    "plan_build",
    "run_build",
    "should_build",
    "write_github_output",
]
