"""
Test suite for the NHI validation routine.

Covers the character codes, the format matcher, the checksum engine and
the NHI value type, including its pydantic integration.

Run: pytest tests/ -v
"""

from __future__ import annotations

import dataclasses

import pytest
from pydantic import BaseModel, TypeAdapter, ValidationError

from nhi_validator import NHI, NHIFormat, NHIParseError, NHIValidationError, is_nhi, parse
from nhi_validator.char_codes import LETTERS, char_code, letter_for_code
from nhi_validator.checksum import check_character_matches, checksum, expected_check_character
from nhi_validator.formats import match_format
from nhi_validator.nhi import normalise


# ─── Test Data ───────────────────────────────────────────────────────

VALID_OLD = [
    "JBX3656", "ZZZ0016", "ZZZ0024", "ZAA0067", "ZAA0075", "ZAA0083", "ZAA0091",
    "ZAA0105", "ZAA0113", "ZAA0121", "ZAA0130", "ZAA0148", "ZAA0156", "ZAC5361",
    "ABC1235",
]
VALID_NEW = [
    "ZBN77VL", "ZZZ00AC", "ZDR69YX", "ZSC21TN", "ZZB30NH", "ZYZ81ZV", "ZVB97XQ",
    "ZRA29VA", "ZYX61YS", "ABC12AY", "XYZ12AN",
]
INVALID_OLD = ["ZZZ0044", "ZZZ0017", "DAB8233"]
INVALID_NEW = ["ZZZ00AA", "ZZZ00AY", "ZVU27KY", "ZVU27KA"]
RANDOM_STRINGS = ["not an NHI", "!@#$%&*", "AAANNNC", "AAANNAC", "ZVU27K", "JBX365", ""]

VALID = VALID_OLD + VALID_NEW
INVALID = INVALID_OLD + INVALID_NEW + RANDOM_STRINGS


# ═══════════════════════════════════════════════════════════════════════
# CHARACTER CODES
# ═══════════════════════════════════════════════════════════════════════


class TestCharCodes:
    """Letters skip I and O; digits are their own value."""

    def test_digits(self):
        for digit in "0123456789":
            assert char_code(digit) == int(digit)

    def test_a_to_h(self):
        for i, letter in enumerate("ABCDEFGH"):
            assert char_code(letter) == i + 1

    def test_j_to_n(self):
        for i, letter in enumerate("JKLMN"):
            assert char_code(letter) == i + 9

    def test_p_to_z(self):
        for i, letter in enumerate("PQRSTUVWXYZ"):
            assert char_code(letter) == i + 14

    def test_matches_ascii_arithmetic(self):
        for letter in LETTERS:
            expected = ord(letter) - ord("A") + 1 - (letter > "I") - (letter > "O")
            assert char_code(letter) == expected

    @pytest.mark.parametrize("char", ["I", "O", "a", "z", "-", " ", "", "AB"])
    def test_rejects_characters_outside_alphabet(self, char):
        with pytest.raises(ValueError):
            char_code(char)

    def test_letter_for_code_inverts_char_code(self):
        for letter in LETTERS:
            assert letter_for_code(char_code(letter)) == letter

    @pytest.mark.parametrize("code", [0, 25, -1])
    def test_letter_for_code_out_of_range(self, code):
        with pytest.raises(ValueError):
            letter_for_code(code)


# ═══════════════════════════════════════════════════════════════════════
# FORMAT MATCHER
# ═══════════════════════════════════════════════════════════════════════


class TestMatchFormat:
    def test_old_format(self):
        for value in VALID_OLD + INVALID_OLD:
            assert match_format(value) is NHIFormat.OLD

    def test_new_format(self):
        for value in VALID_NEW + INVALID_NEW:
            assert match_format(value) is NHIFormat.NEW

    def test_shape_only_no_checksum(self):
        # Wrong check digit, right shape
        assert match_format("JBX3650") is NHIFormat.OLD

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "ZAC536",  # too short
            "ZAC53611",  # too long
            "zac5361",  # not normalised
            "ZIC5361",  # I is excluded
            "OAC5361",  # O is excluded
            "ZZZ00IA",
            "ZZZ00AO",
            "ZAC53A1",  # letter in old digit position
            "ZA15361",  # digit in letter position
            "ZAC-361",
            "ZÄC5361",  # non-ASCII letter
            "ZAC٥361",  # Arabic-Indic digit five
            "AAANNAC",
        ],
    )
    def test_matches_neither(self, value):
        assert match_format(value) is None


# ═══════════════════════════════════════════════════════════════════════
# CHECKSUM ENGINE
# ═══════════════════════════════════════════════════════════════════════


class TestChecksum:
    def test_weighted_sum(self):
        # J=9*7 + B=2*6 + X=22*5 + 3*4 + 6*3 + 5*2
        assert checksum("JBX3656") == 225

    def test_only_first_six_characters_count(self):
        assert checksum("JBX3656") == checksum("JBX3650") == checksum("JBX365")

    def test_new_format_sum(self):
        assert checksum("ZHW58CV") == 371

    def test_old_expected_digit(self):
        assert expected_check_character("JBX365", NHIFormat.OLD) == "6"
        assert expected_check_character("ZAC536", NHIFormat.OLD) == "1"

    def test_old_zero_remainder_has_no_check_digit(self):
        assert checksum("ZZZ004") % 11 == 0
        assert expected_check_character("ZZZ004", NHIFormat.OLD) is None

    def test_old_remainder_one_maps_to_zero(self):
        # (11 - 1) % 10 == 0
        assert checksum("ZAA013") % 11 == 1
        assert expected_check_character("ZAA013", NHIFormat.OLD) == "0"

    def test_new_expected_letter(self):
        assert expected_check_character("ZHW58C", NHIFormat.NEW) == "V"
        assert expected_check_character("ZBN77V", NHIFormat.NEW) == "L"

    def test_check_character_matches(self):
        assert check_character_matches("JBX3656", NHIFormat.OLD)
        assert not check_character_matches("JBX3657", NHIFormat.OLD)
        assert check_character_matches("ZBN77VL", NHIFormat.NEW)
        assert not check_character_matches("ZBN77VK", NHIFormat.NEW)

    def test_zero_remainder_never_matches(self):
        for digit in "0123456789":
            assert not check_character_matches(f"ZZZ004{digit}", NHIFormat.OLD)


# ═══════════════════════════════════════════════════════════════════════
# is_nhi
# ═══════════════════════════════════════════════════════════════════════


class TestIsNhi:
    def test_documented_examples(self):
        assert is_nhi("ZAC5361") is True
        assert is_nhi("ZBN77VL") is True
        assert is_nhi("ZZZ0044") is False
        assert is_nhi("ZZZ00AA") is False

    def test_recognises_valid_old_format(self):
        for value in VALID_OLD:
            assert is_nhi(value), value

    def test_rejects_invalid_old_format(self):
        for value in INVALID_OLD:
            assert not is_nhi(value), value

    def test_old_format_needs_check_digit_six(self):
        for digit in "0123456789":
            if digit != "6":
                assert not is_nhi(f"JBX365{digit}")
        assert is_nhi("JBX3656")

    def test_no_digit_completes_zero_checksum(self):
        for digit in "0123456789":
            assert not is_nhi(f"ZZZ004{digit}")

    def test_recognises_valid_new_format(self):
        for value in VALID_NEW:
            assert is_nhi(value), value

    def test_rejects_invalid_new_format(self):
        for value in INVALID_NEW:
            assert not is_nhi(value), value

    def test_new_format_needs_check_letter_v(self):
        valid = [letter for letter in LETTERS if is_nhi(f"ZHW58C{letter}")]
        assert valid == ["V"]

    def test_rejects_random_strings(self):
        for value in RANDOM_STRINGS:
            assert not is_nhi(value), value

    def test_rejects_excluded_letters(self):
        assert not is_nhi("IBX3656")
        assert not is_nhi("OBX3656")

    def test_is_case_insensitive(self):
        for value in VALID:
            assert is_nhi(value.lower())
        for value in INVALID:
            assert not is_nhi(value.lower())

    def test_does_not_strip_whitespace(self):
        assert not is_nhi(" ZAC5361")
        assert not is_nhi("ZAC5361\n")

    @pytest.mark.parametrize("value", [None, 1234567, b"ZAC5361", ["ZAC5361"]])
    def test_non_strings_are_not_nhis(self, value):
        assert is_nhi(value) is False


# ═══════════════════════════════════════════════════════════════════════
# PARSE / NHI VALUE TYPE
# ═══════════════════════════════════════════════════════════════════════


class TestParse:
    def test_parse_normalises_case(self):
        nhi = parse("zbn77vl")
        assert nhi.as_str() == "ZBN77VL"
        assert nhi.value == "ZBN77VL"

    def test_parse_valid_values(self):
        for value in VALID:
            assert parse(value).as_str() == value

    def test_parse_invalid_values_raise(self):
        for value in INVALID:
            with pytest.raises(NHIParseError):
                parse(value)

    def test_classmethod_and_constructor_agree(self):
        assert NHI.parse("zac5361") == parse("ZAC5361") == NHI("Zac5361")

    def test_constructor_validates(self):
        with pytest.raises(NHIParseError):
            NHI("ZZZ0044")

    def test_error_does_not_distinguish_shape_from_checksum(self):
        with pytest.raises(NHIParseError) as bad_shape:
            parse("not an NHI")
        with pytest.raises(NHIParseError) as bad_checksum:
            parse("JBX3650")
        assert bad_shape.value.code == bad_checksum.value.code == "NHI_INVALID"
        assert bad_shape.value.details == bad_checksum.value.details == {}

    def test_error_hierarchy(self):
        with pytest.raises(ValueError):
            parse("ZZZ0044")
        with pytest.raises(NHIValidationError):
            parse("ZZZ0044")

    def test_error_message_quotes_candidate(self):
        with pytest.raises(NHIParseError, match="'ZZZ0044' is not a valid NHI"):
            parse("ZZZ0044")

    def test_non_string_raises_parse_error(self):
        with pytest.raises(NHIParseError):
            parse(1234567)

    def test_ascii_only_case_fold(self):
        # str.upper() would turn "ß" into "SS" and change the length
        assert normalise("straße") == "STRAßE"
        assert normalise("ıbx3656") == "ıBX3656"
        assert not is_nhi("ıbx3656")


class TestNHIValue:
    def test_to_string(self):
        for value in VALID:
            nhi = parse(value.lower())
            assert str(nhi) == value
            assert f"{nhi}" == value

    def test_format_spec_applies_to_value(self):
        assert f"{parse('ZAC5361'):>9}" == "  ZAC5361"

    def test_repr(self):
        assert repr(parse("zac5361")) == "NHI('ZAC5361')"

    def test_format_property(self):
        assert parse("ZAC5361").format is NHIFormat.OLD
        assert parse("ZBN77VL").format is NHIFormat.NEW

    def test_equality_and_hash_use_normalised_value(self):
        a, b = parse("zbn77vl"), parse("ZBN77VL")
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_not_equal_to_plain_string(self):
        assert parse("ZAC5361") != "ZAC5361"

    def test_ordering(self):
        values = [parse(v) for v in ["ZBN77VL", "ABC1235", "JBX3656"]]
        assert [str(v) for v in sorted(values)] == ["ABC1235", "JBX3656", "ZBN77VL"]
        assert parse("ABC1235") < parse("JBX3656")

    def test_immutable(self):
        nhi = parse("ZAC5361")
        with pytest.raises(dataclasses.FrozenInstanceError):
            nhi.value = "JBX3656"  # type: ignore[misc]


class TestReservedForTesting:
    """NHIs beginning with Z are reserved for testing."""

    RESERVED = ["ZAA0105", "ZAA0113", "ZBN77VL", "ZZZ00AC"]
    UNRESERVED = ["JBX3656", "ABC1235", "ABC12AY", "XYZ12AN"]

    def test_reserved(self):
        for value in self.RESERVED:
            nhi = parse(value)
            assert nhi.is_test()
            assert not nhi.is_not_test()

    def test_unreserved(self):
        for value in self.UNRESERVED:
            nhi = parse(value)
            assert not nhi.is_test()
            assert nhi.is_not_test()

    def test_lowercase_z_is_reserved(self):
        assert parse("zvb97xq").is_test()


# ═══════════════════════════════════════════════════════════════════════
# PYDANTIC INTEGRATION
# ═══════════════════════════════════════════════════════════════════════


class Patient(BaseModel):
    nhi: NHI


class TestPydanticAdapter:
    def test_validates_and_normalises(self):
        patient = Patient.model_validate({"nhi": "zbn77vl"})
        assert patient.nhi == parse("ZBN77VL")
        assert isinstance(patient.nhi, NHI)

    def test_accepts_nhi_instance(self):
        nhi = parse("ZAC5361")
        assert Patient(nhi=nhi).nhi == nhi

    def test_serialises_as_plain_string(self):
        patient = Patient(nhi=parse("ZAC5361"))
        assert patient.model_dump() == {"nhi": "ZAC5361"}
        assert patient.model_dump_json() == '{"nhi":"ZAC5361"}'

    def test_json_round_trip(self):
        patient = Patient.model_validate_json('{"nhi":"zac5361"}')
        assert Patient.model_validate_json(patient.model_dump_json()) == patient

    def test_rejects_invalid_on_decode(self):
        with pytest.raises(ValidationError):
            Patient.model_validate_json('{"nhi":"ZZZ0044"}')
        with pytest.raises(ValidationError):
            Patient.model_validate({"nhi": "ZZZ00AA"})

    def test_rejects_non_string(self):
        with pytest.raises(ValidationError):
            Patient.model_validate({"nhi": 1234567})

    def test_json_schema_is_string(self):
        assert TypeAdapter(NHI).json_schema()["type"] == "string"
