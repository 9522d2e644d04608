from __future__ import annotations


class WorkplanError(Exception):
    """Base class for errors raised by workplan."""


class InvalidInputError(WorkplanError, ValueError):
    """Rejected request: malformed dates, inverted ranges, non-positive capacity."""


class SourceUnavailableError(WorkplanError, RuntimeError):
    """The holiday source could not be reached or returned an error payload."""
