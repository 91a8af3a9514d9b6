"""Exception types raised by ganalyzer."""

from __future__ import annotations


class GanalyzerError(Exception):
    """Base class for all ganalyzer errors."""


class ScanError(GanalyzerError):
    """The scan root cannot be resolved or walked."""


class AnalysisError(GanalyzerError):
    """Git data could not be collected for a repository."""


class UnsupportedFormatError(GanalyzerError):
    """An output format that the formatter does not know."""
