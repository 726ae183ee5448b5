"""pgstack: version resolution and rebuild gating for Bitnami PostgreSQL images with pgvector and pg_search."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
