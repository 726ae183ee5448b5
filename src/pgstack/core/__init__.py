"""Version resolution core: models, selection policies, engine, labels and fingerprint.

The package is split into focused submodules:

- ``models``: value objects (``ResolvedVersionSet``, ``LabelSet``,
  ``Selection``, ``Resolution``).
- ``config``: ``ResolutionConfig`` and fallback defaults.
- ``selector``: base and extension selection policies.
- ``engine``: ``ResolutionEngine`` orchestrating the selectors.
- ``labels`` / ``fingerprint``: pure derivations of a resolved set.
"""

from pgstack.core.config import ComponentDefaults, FieldOverrides, ResolutionConfig
from pgstack.core.engine import ComponentSources, ResolutionEngine
from pgstack.core.fingerprint import canonical_string, fingerprint
from pgstack.core.labels import compose
from pgstack.core.models import (
    LabelSet,
    Resolution,
    ResolvedVersionSet,
    Selection,
    SelectionSource,
)
from pgstack.core.selector import BasePolicy, ExtensionPolicy, by_recency, select_version

__all__ = [
    "BasePolicy",
    "ComponentDefaults",
    "ComponentSources",
    "ExtensionPolicy",
    "FieldOverrides",
    "LabelSet",
    "Resolution",
    "ResolutionConfig",
    "ResolutionEngine",
    "ResolvedVersionSet",
    "Selection",
    "SelectionSource",
    "by_recency",
    "canonical_string",
    "compose",
    "fingerprint",
    "select_version",
]
