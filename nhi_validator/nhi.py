"""
The validated NHI value type and the public parse / is_nhi entry points.

    parse("zbn77vl")        → NHI('ZBN77VL')
    parse("ZZZ0044")        → raises NHIParseError
    is_nhi("ZAC5361")       → True

An ``NHI`` instance can only exist if its value passed the full HISO
10046:2023 validation routine: constructing one directly runs the same
pipeline as ``parse``.

Note: a valid NHI is only *well-formed*. Whether it has been assigned to a
person requires a lookup against the NHI registry, which is out of scope.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from .checksum import check_character_matches
from .exceptions import NHIParseError
from .formats import NHIFormat, match_format

# ASCII-only case fold; str.upper() would rewrite characters such as "ß".
_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)

TEST_PREFIX = "Z"


def normalise(candidate: str) -> str:
    """Uppercase ASCII letters without changing length or other characters."""
    return candidate.translate(_ASCII_UPPER)


@dataclass(frozen=True, order=True, slots=True, repr=False)
class NHI:
    """A New Zealand NHI number that satisfies HISO 10046:2023.

    Equality, ordering and hashing use the normalised uppercase value.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise NHIParseError(self.value)

        normalised = normalise(self.value)
        fmt = match_format(normalised)
        if fmt is None or not check_character_matches(normalised, fmt):
            raise NHIParseError(self.value)

        object.__setattr__(self, "value", normalised)

    @classmethod
    def parse(cls, candidate: str) -> NHI:
        """Parse ``candidate`` case-insensitively.

        Raises:
            NHIParseError: if ``candidate`` is not a valid NHI under either format.
        """
        return cls(candidate)

    # ─── Accessors ──────────────────────────────────────────────────

    def as_str(self) -> str:
        return self.value

    @property
    def format(self) -> NHIFormat:
        """Which layout this NHI uses (derived from the stored value)."""
        return NHIFormat.NEW if self.value[-1].isalpha() else NHIFormat.OLD

    def is_test(self) -> bool:
        """True if this NHI is in the Z-prefixed range reserved for testing."""
        return self.value.startswith(TEST_PREFIX)

    def is_not_test(self) -> bool:
        return not self.is_test()

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"NHI({self.value!r})"

    def __format__(self, format_spec: str) -> str:
        return format(self.value, format_spec)

    # ─── Pydantic integration ──────────────────────────────────────

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Serialise as the plain string; re-run ``parse`` on every decode."""
        from_str = core_schema.no_info_after_validator_function(
            cls.parse, core_schema.str_schema()
        )
        return core_schema.json_or_python_schema(
            json_schema=from_str,
            python_schema=core_schema.union_schema(
                [core_schema.is_instance_schema(cls), from_str]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


# ─── Public API ──────────────────────────────────────────────────────


def parse(candidate: str) -> NHI:
    """Parse a candidate string into an :class:`NHI`.

    Raises:
        NHIParseError: if the candidate is not a valid NHI.
    """
    return NHI.parse(candidate)


def is_nhi(candidate: str) -> bool:
    """Check a string against the NHI Validation Routine (case-insensitive).

    >>> is_nhi("ZAC5361"), is_nhi("ZBN77VL"), is_nhi("ZZZ0044"), is_nhi("ZZZ00AA")
    (True, True, False, False)
    """
    try:
        NHI.parse(candidate)
    except NHIParseError:
        return False
    return True
