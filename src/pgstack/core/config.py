"""Resolution configuration.

The environment is read in exactly one place, ``ResolutionConfig.from_env``.
Everything downstream receives an explicit, frozen ``ResolutionConfig``.

Environment variables:
    PG_MAJOR_VERSION   target PostgreSQL major line (required unless given
                       on the command line)
    BITNAMI_TAG        override for the Bitnami PostgreSQL tag
    PGVECTOR_VERSION   override for the bare pgvector version
    PG_SEARCH_TAG      override for the full pg_search tag
    REGISTRY           image registry host (default ``ghcr.io``)
    REPO_NAME          image repository (default ``beshkenadze/bitnami-pgvector``)
    PGSTACK_TIMEOUT    per-request timeout in seconds
    PGSTACK_DEFAULTS   path to a YAML file with fallback defaults
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from pgstack.exceptions import ConfigError, MissingMajorVersionError
from pgstack.registry.http_client import DEFAULT_TIMEOUT

DEFAULT_REGISTRY: str = "ghcr.io"
DEFAULT_REPO_NAME: str = "beshkenadze/bitnami-pgvector"


@dataclass(frozen=True)
class ComponentDefaults:
    """Fallback literals used when upstream resolution fails.

    These drift relative to upstream releases; treat them as configuration
    and refresh them through a defaults file rather than code changes.
    """

    base_tag: str = "17.2.0-debian-12-r1"
    pgvector_version: str = "0.8.0"
    pg_search_version: str = "latest"


@dataclass(frozen=True)
class FieldOverrides:
    """Per-field values that bypass network resolution entirely."""

    base_tag: str | None = None
    extension_a: str | None = None
    extension_b: str | None = None


@dataclass(frozen=True)
class ResolutionConfig:
    """Inputs of one resolution run.

    Attributes:
        major_line: Target PostgreSQL major version, or None when absent.
        overrides: Per-field verbatim values.
        registry: Registry host the image is published to.
        repo_name: Repository path within the registry.
        timeout: Per-request timeout in seconds for upstream queries.
        defaults: Fallback literals.
    """

    major_line: str | None
    overrides: FieldOverrides = field(default_factory=FieldOverrides)
    registry: str = DEFAULT_REGISTRY
    repo_name: str = DEFAULT_REPO_NAME
    timeout: float = DEFAULT_TIMEOUT
    defaults: ComponentDefaults = field(default_factory=ComponentDefaults)

    @property
    def namespace(self) -> str:
        """Label prefix shared by every image label, e.g. ``ghcr.io/org/repo``."""
        return f"{self.registry}/{self.repo_name}"

    def require_major_line(self) -> str:
        if not self.major_line:
            raise MissingMajorVersionError(
                "PG_MAJOR_VERSION environment variable is not set and no argument provided."
            )
        return self.major_line

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        major_line: str | None = None,
    ) -> ResolutionConfig:
        """Build a configuration from environment variables.

        Args:
            env: Mapping to read from (defaults to ``os.environ``).
            major_line: Explicit major line, taking precedence over
                ``PG_MAJOR_VERSION``.

        Raises:
            ConfigError: If the timeout is not a positive number or the
                defaults file is invalid.
        """
        env = os.environ if env is None else env

        def get(name: str) -> str | None:
            value = env.get(name, "").strip()
            return value or None

        timeout = DEFAULT_TIMEOUT
        raw_timeout = get("PGSTACK_TIMEOUT")
        if raw_timeout is not None:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ConfigError(f"PGSTACK_TIMEOUT must be a number, got {raw_timeout!r}") from None
            if timeout <= 0:
                raise ConfigError(f"PGSTACK_TIMEOUT must be positive, got {raw_timeout!r}")

        defaults_path = get("PGSTACK_DEFAULTS")
        defaults = load_defaults(Path(defaults_path)) if defaults_path else ComponentDefaults()

        return cls(
            major_line=(major_line or "").strip() or get("PG_MAJOR_VERSION"),
            overrides=FieldOverrides(
                base_tag=get("BITNAMI_TAG"),
                extension_a=get("PGVECTOR_VERSION"),
                extension_b=get("PG_SEARCH_TAG"),
            ),
            registry=get("REGISTRY") or DEFAULT_REGISTRY,
            repo_name=get("REPO_NAME") or DEFAULT_REPO_NAME,
            timeout=timeout,
            defaults=defaults,
        )


def load_defaults(path: Path) -> ComponentDefaults:
    """Read fallback literals from a YAML mapping.

    Example file::

        base_tag: 17.4.0-debian-12-r2
        pgvector_version: 0.8.0
        pg_search_version: latest

    Missing keys keep their built-in values.

    Raises:
        ConfigError: If the file is unreadable, not a mapping, contains
            unknown keys, or has non-string values.
    """
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read defaults file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in defaults file {path}: {exc}") from exc

    if data is None:
        return ComponentDefaults()
    if not isinstance(data, dict):
        raise ConfigError(f"Defaults file {path} must contain a mapping")

    known = {f.name for f in fields(ComponentDefaults)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown keys in defaults file {path}: {', '.join(map(str, unknown))}")

    values: dict[str, str] = {}
    for key, value in data.items():
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str) or not value:
            raise ConfigError(f"Default {key!r} in {path} must be a non-empty string")
        values[key] = value
    return ComponentDefaults(**values)
