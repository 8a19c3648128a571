"""Errors raised by the cycle analyzer.

All of them are caller-correctable input errors.  ``code`` is stable and is
what the HTTP layer returns to clients.
"""

from __future__ import annotations


class CycleAnalysisError(ValueError):
    """Base class for invalid cycle analyzer input."""

    code = "invalid_input"


class InsufficientDataError(CycleAnalysisError):
    """Fewer than two usable period start dates."""

    code = "insufficient_data"


class InvalidOrderError(CycleAnalysisError):
    """Period start dates are not strictly increasing (or contain duplicates)."""

    code = "invalid_order"


class InvalidReferenceDateError(CycleAnalysisError):
    """Reference date lies more than one predicted cycle before the last start."""

    code = "invalid_reference_date"


class InvalidDateError(CycleAnalysisError):
    """A value could not be read as a calendar date."""

    code = "invalid_date"
