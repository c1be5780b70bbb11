from __future__ import annotations


class TimelineError(ValueError):
    """Base class for timeline generation failures."""


class TimelineValidationError(TimelineError):
    """Raised for invalid generator input (event type, date, guests, budget)."""


class CatalogError(TimelineError):
    """Raised when rule catalog data is invalid."""
