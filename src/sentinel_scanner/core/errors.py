"""Exception hierarchy shared by the crawler, probes and CLI."""

from __future__ import annotations

from typing import Iterable


class ScannerError(RuntimeError):
    """Base class for every error raised by the scanner."""


class ValidationError(ScannerError):
    """Raised when configuration values are out of bounds."""

    def __init__(self, violations: Iterable[str]) -> None:
        self.violations = tuple(violations)
        super().__init__("Invalid configuration: " + "; ".join(self.violations))


class TransientNetworkError(ScannerError):
    """A single fetch or probe failed in a way that may succeed on retry."""


class MalformedInputError(ScannerError):
    """A URL or input document could not be interpreted."""


class FatalIOError(ScannerError):
    """Input could not be read or output could not be written."""
