"""pgstack exception hierarchy.

All public exceptions inherit from PgStackError, giving callers a single
base class to catch when they want to handle any pgstack-specific failure
without swallowing unrelated errors.

Upstream registry problems are deliberately absent from this hierarchy:
they degrade to documented defaults and are reported as warnings.
"""


class PgStackError(Exception):
    """Base exception for all pgstack errors."""


class ConfigError(PgStackError):
    """Raised when resolution configuration is invalid.

    Covers malformed defaults files, unknown configuration keys and
    non-numeric timeouts.
    """


class MissingMajorVersionError(ConfigError):
    """Raised when no PostgreSQL major version was supplied.

    This is the only fatal resolution failure: without a target line
    there is nothing to resolve.
    """


class BuildError(PgStackError):
    """Raised when the external image build executor fails."""


class OutputError(PgStackError):
    """Raised when resolved variables cannot be written to the CI output file."""
