"""
NHI layouts. HISO 10046 defines two seven-character shapes:

    Old format:  L L L D D D D     (checksum modulo 11)
    New format:  L L L D D L L     (checksum modulo 23)

where ``L`` is an uppercase letter other than I/O and ``D`` is 0–9.
``match_format`` checks the character class at each position in turn.
"""

from __future__ import annotations

from enum import Enum

from .char_codes import ALLOWED_LETTERS, DIGITS

NHI_LENGTH = 7


class NHIFormat(str, Enum):
    """The two NHI layouts defined by HISO 10046:2023."""

    OLD = "OLD"  # AAANNNN
    NEW = "NEW"  # AAANNAA


# One character class per position.
_OLD_LAYOUT: tuple[frozenset[str], ...] = (
    ALLOWED_LETTERS, ALLOWED_LETTERS, ALLOWED_LETTERS,
    DIGITS, DIGITS, DIGITS, DIGITS,
)
_NEW_LAYOUT: tuple[frozenset[str], ...] = (
    ALLOWED_LETTERS, ALLOWED_LETTERS, ALLOWED_LETTERS,
    DIGITS, DIGITS,
    ALLOWED_LETTERS, ALLOWED_LETTERS,
)


def _fits(value: str, layout: tuple[frozenset[str], ...]) -> bool:
    return all(char in allowed for char, allowed in zip(value, layout))


def match_format(value: str) -> NHIFormat | None:
    """Return the format ``value`` matches, or ``None``.

    ``value`` is expected to be uppercase already; lowercase letters do not
    match either layout.
    """
    if len(value) != NHI_LENGTH:
        return None
    if _fits(value, _OLD_LAYOUT):
        return NHIFormat.OLD
    if _fits(value, _NEW_LAYOUT):
        return NHIFormat.NEW
    return None
