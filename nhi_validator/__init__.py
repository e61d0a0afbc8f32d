"""
NHI Validator — checks strings against the New Zealand NHI Validation Routine.

Supports the old (AAANNNN) and new (AAANNAA) formats of HISO 10046:2023.
Checks are case-insensitive. A valid NHI is only well-formed; whether it
has been assigned to a person is a registry question this package does
not answer.
"""

from .exceptions import NHIParseError, NHIValidationError
from .formats import NHIFormat
from .nhi import NHI, is_nhi, parse

__version__ = "1.0.0"

__all__ = [
    "NHI",
    "NHIFormat",
    "NHIParseError",
    "NHIValidationError",
    "is_nhi",
    "parse",
]
