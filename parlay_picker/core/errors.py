from __future__ import annotations


class ParlayPickerError(Exception):
    """Base class for errors raised by the parlay builder."""


class StatsUnavailableError(ParlayPickerError, RuntimeError):
    """Player stats could not be loaded from the configured source."""


class SelectionError(ParlayPickerError, ValueError):
    pass


class SelectionLimitError(SelectionError):
    pass


class IncompleteParlayError(SelectionError):
    pass


class PropUnavailableError(SelectionError):
    """The requested side has no line or no usable probability."""
