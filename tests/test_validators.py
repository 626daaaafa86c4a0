"""Atomic validator and combinator behaviour."""
from decimal import Decimal

import pytest

from core.errors import ErrorCode
from core.validation import (
    MISSING,
    EachItem,
    EmailValidator,
    ExactLength,
    NonEmpty,
    NumericString,
    RegexPattern,
    Required,
    StringLength,
)


class TestRequired:
    @pytest.mark.parametrize("value", [MISSING, None, "", []])
    def test_absent_or_empty_fails(self, value):
        result = Required("Name is required").validate(value)
        assert not result.is_valid
        assert result.error_message == "Name is required"
        assert result.error_code == ErrorCode.E2001_REQUIRED_FIELD_MISSING

    @pytest.mark.parametrize("value", ["x", " ", ["S"], False, 0])
    def test_present_passes(self, value):
        assert Required().validate(value).is_valid

    def test_presence_flag_survives_message_override(self):
        assert Required().checks_presence
        assert Required().with_message("other").checks_presence
        assert not StringLength(max_length=3).checks_presence


class TestStringLength:
    def test_too_short_and_too_long_codes(self):
        rule = StringLength(min_length=2, max_length=4)
        assert rule.validate("a").error_code == ErrorCode.E2007_TOO_SHORT
        assert rule.validate("abcde").error_code == ErrorCode.E2008_TOO_LONG
        assert rule.validate("abc").is_valid

    def test_non_string_is_type_error(self):
        assert StringLength(max_length=3).validate(12).error_code == ErrorCode.E2004_INVALID_TYPE

    def test_exact_length(self):
        rule = ExactLength(6)
        assert rule.constraint_name == "length[6]"
        assert rule.validate("123456").is_valid
        assert not rule.validate("12345").is_valid
        assert not rule.validate("1234567").is_valid


class TestRegexPattern:
    def test_match_is_anchored_at_start(self):
        assert not RegexPattern(r"\d+").validate("a1").is_valid

    def test_search_finds_anywhere(self):
        rule = RegexPattern(r"[A-Z]", search=True)
        assert rule.validate("abcDef").is_valid
        assert not rule.validate("abcdef").is_valid

    def test_failure_is_pattern_mismatch(self):
        result = RegexPattern(r"^\d+$").validate("12a456")
        assert result.error_code == ErrorCode.E2002_INVALID_FORMAT


class TestEmailValidator:
    @pytest.mark.parametrize("email", [
        "user@nitestore.com",
        "first.last+tag@mail.nitestore.co.uk",
        "a_b-c@shop.io",
        "user@shop.test",
        "buyer@store.local",
        "x@[192.168.0.1]",
    ])
    def test_valid(self, email):
        assert EmailValidator().validate(email).is_valid

    @pytest.mark.parametrize("email", ["plainaddress", "user@", "@nitestore.com", "user@nodot", "two@@nitestore.com", ""])
    def test_invalid(self, email):
        result = EmailValidator().validate(email)
        assert not result.is_valid
        assert result.error_code == ErrorCode.E2010_INVALID_EMAIL


class TestNumericString:
    def test_exclusive_style_minimum(self):
        rule = NumericString(min_value=Decimal("0.01"))
        assert rule.validate("0.01").is_valid
        assert rule.validate("19.99").is_valid
        assert rule.validate("0").error_code == ErrorCode.E2003_OUT_OF_RANGE

    def test_integer_only(self):
        rule = NumericString(min_value=0, integer_only=True)
        assert rule.validate("12").is_valid
        assert rule.validate("1.5").error_code == ErrorCode.E2002_INVALID_FORMAT
        assert rule.validate("-1").error_code == ErrorCode.E2003_OUT_OF_RANGE

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity"])
    def test_not_a_number(self, value):
        assert NumericString().validate(value).error_code == ErrorCode.E2002_INVALID_FORMAT

    def test_range(self):
        rule = NumericString(min_value=0, max_value=5)
        assert rule.validate("5").is_valid
        assert not rule.validate("5.1").is_valid


class TestCombinators:
    def test_and_short_circuits(self):
        rule = StringLength(min_length=8) & RegexPattern(r"[A-Z]", search=True)
        assert rule.validate("Ab").error_code == ErrorCode.E2007_TOO_SHORT
        assert rule.validate("abcdefgh").error_code == ErrorCode.E2002_INVALID_FORMAT
        assert rule.validate("Abcdefgh").is_valid

    def test_with_message_keeps_code(self):
        result = StringLength(max_length=2).with_message("too long").validate("abc")
        assert result.error_message == "too long"
        assert result.error_code == ErrorCode.E2008_TOO_LONG

    def test_each_item_reports_index(self):
        result = EachItem(NonEmpty(strip_whitespace=False)).validate(["S", ""])
        assert not result.is_valid
        assert result.error_message.startswith("Item 1:")
