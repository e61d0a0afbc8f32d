"""
Exception hierarchy for NHI validation.

Parsing has exactly one failure mode: the candidate is not a valid NHI.
Wrong shape and wrong check character are deliberately indistinguishable
at this level, matching the binary treatment of validity in HISO 10046.
"""

from __future__ import annotations


class NHIValidationError(Exception):
    """Base exception for all NHI validator failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class NHIParseError(NHIValidationError, ValueError):
    """The candidate string is not a valid NHI number under either format."""

    def __init__(self, candidate: object):
        super().__init__("NHI_INVALID", f"{candidate!r} is not a valid NHI number")


class ConfigurationError(NHIValidationError):
    """An environment setting could not be interpreted."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("CONFIG_INVALID", message, details)


class BatchTooLargeError(NHIValidationError, ValueError):
    """A batch holds more candidates than the configured maximum."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("BATCH_TOO_LARGE", message, details)
