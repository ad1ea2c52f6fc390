"""Comparison subsystem exceptions."""


class DiffError(Exception):
    """Base class for comparison errors."""


class InvalidComparisonError(DiffError):
    """Left and right values have different runtime types."""


class InvalidSelectorError(DiffError, ValueError):
    """An ignore selector could not be resolved to a member name."""


class DiffConfigError(DiffError, ValueError):
    """Comparison config payload is malformed."""
