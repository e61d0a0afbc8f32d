"""
Character → numeric code mapping used by the NHI checksum.

HISO 10046 numbers letters in alphabetical order with ``I`` and ``O``
removed, so the 24 permitted letters map onto 1–24:

    A=1  B=2  C=3  D=4  E=5  F=6  G=7  H=8
    J=9  K=10 L=11 M=12 N=13
    P=14 Q=15 R=16 S=17 T=18 U=19 V=20 W=21 X=22 Y=23 Z=24

Digits map to their own value.
"""

from __future__ import annotations

# ─── Alphabets ───────────────────────────────────────────────────────

DIGITS: frozenset[str] = frozenset("0123456789")

# Uppercase ASCII without I and O (visually ambiguous with 1 and 0).
LETTERS: str = "ABCDEFGHJKLMNPQRSTUVWXYZ"
ALLOWED_LETTERS: frozenset[str] = frozenset(LETTERS)

# ─── Lookup Table ────────────────────────────────────────────────────

_CODES: dict[str, int] = {
    **{digit: int(digit) for digit in DIGITS},
    **{letter: position for position, letter in enumerate(LETTERS, start=1)},
}


def char_code(char: str) -> int:
    """Return the checksum code of a single NHI character.

    Raises:
        ValueError: if ``char`` is not a digit or a permitted uppercase letter.
    """
    try:
        return _CODES[char]
    except KeyError:
        raise ValueError(f"{char!r} has no NHI character code") from None


def letter_for_code(code: int) -> str:
    """Inverse of :func:`char_code` for letters (1–24)."""
    if not 1 <= code <= len(LETTERS):
        raise ValueError(f"No NHI letter has code {code}")
    return LETTERS[code - 1]
