"""Custom exception hierarchy for SplitFrame."""

from __future__ import annotations


class SplitFrameError(Exception):
    """Base exception for all SplitFrame errors."""


class ParseError(SplitFrameError):
    """Raised when an input file cannot be read."""


class UnsupportedFormatError(ParseError):
    """Raised when input file format is not supported."""


class CompositionError(SplitFrameError):
    """Raised when a composition cannot be started or used."""


class ValidationError(SplitFrameError):
    """Raised when input validation fails."""
