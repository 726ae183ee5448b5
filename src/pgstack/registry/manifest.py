"""Registry existence gate backed by ``docker manifest inspect``.

A manifest lookup that fails for any reason (missing image, registry
unreachable, docker not installed, timeout) is reported as "does not
exist": every one of those outcomes means reuse cannot be confirmed and
the image has to be built.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Callable

logger = logging.getLogger(__name__)

# Upper bound for a single manifest lookup (seconds).
DEFAULT_INSPECT_TIMEOUT: float = 60.0

Runner = Callable[..., "subprocess.CompletedProcess[bytes]"]


class ExistenceGate:
    """Checks whether an image label is already published.

    Args:
        runner: ``subprocess.run``-compatible callable, injectable for tests.
        timeout: Seconds to wait for the inspect command.
        docker: Docker CLI executable.
    """

    def __init__(
        self,
        runner: Runner = subprocess.run,
        *,
        timeout: float = DEFAULT_INSPECT_TIMEOUT,
        docker: str = "docker",
    ) -> None:
        self._runner = runner
        self._timeout = timeout
        self._docker = docker

    def command(self, label: str) -> list[str]:
        return [self._docker, "manifest", "inspect", label]

    def exists(self, label: str) -> bool:
        """Return True only when the manifest lookup exits with status 0."""
        logger.info("Checking if image %s exists in registry", label)
        try:
            result = self._runner(
                self.command(label),
                capture_output=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("Manifest inspect timed out for %s", label)
            return False
        except OSError as exc:
            logger.warning("Could not run manifest inspect for %s: %s", label, exc)
            return False

        if result.returncode == 0:
            logger.info("Image %s found in registry", label)
            return True
        logger.info("Image %s not found in registry (exit code: %d)", label, result.returncode)
        return False
