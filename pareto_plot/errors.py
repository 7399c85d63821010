from __future__ import annotations


class ParetoDataError(ValueError):
    """Raised when chart inputs or surface writes are structurally invalid."""
