"""
Check-character arithmetic of the HISO 10046 NHI validation routine.

The first six characters are weighted 7, 6, 5, 4, 3, 2 and summed over
their character codes. The seventh character is then checked against:

  Old format (mod 11):
      r = sum % 11
      r == 0            → no valid check digit exists; always reject
      otherwise         → check digit = (11 - r) % 10

  New format (mod 23):
      r = sum % 23
      check letter code = 23 - r      (always 1–23, a permitted letter)

An old-format prefix whose sum is divisible by 11 has no check digit, so
every NHI starting with that prefix is invalid.
"""

from __future__ import annotations

from .char_codes import char_code, letter_for_code
from .formats import NHIFormat

_WEIGHTED_PREFIX = 6


def checksum(value: str) -> int:
    """Weighted positional sum of the first six characters of ``value``."""
    return sum(
        char_code(char) * (7 - position)
        for position, char in enumerate(value[:_WEIGHTED_PREFIX])
    )


def expected_check_character(value: str, fmt: NHIFormat) -> str | None:
    """Return the check character that completes ``value`` for ``fmt``.

    Only the first six characters of ``value`` are read. Returns ``None``
    when an old-format prefix has a checksum divisible by 11.
    """
    total = checksum(value)

    if fmt is NHIFormat.OLD:
        remainder = total % 11
        if remainder == 0:
            return None
        return str((11 - remainder) % 10)

    return letter_for_code(23 - total % 23)


def check_character_matches(value: str, fmt: NHIFormat) -> bool:
    """True iff the 7th character of a format-matched ``value`` is correct."""
    expected = expected_check_character(value, fmt)
    return expected is not None and value[-1] == expected
