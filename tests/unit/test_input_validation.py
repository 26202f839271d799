"""
Unit Tests for Input Validation
"""

import pytest

from goalsportal.access import PartName
from goalsportal.core.validation import (
    ValidationError,
    normalize_email,
    parse_part_name,
    validate_pair_id,
)


class TestNormalizeEmail:
    def test_lowercases_and_strips(self):
        assert normalize_email("  Ana.Educator@School.ORG ") == "ana.educator@school.org"

    @pytest.mark.parametrize("email", [None, "", "   "])
    def test_empty(self, email):
        with pytest.raises(ValidationError, match="cannot be empty"):
            normalize_email(email)

    @pytest.mark.parametrize("email", ["no-at-sign", "two@@x.org", "a@b", "a b@x.org"])
    def test_malformed(self, email):
        with pytest.raises(ValidationError, match="Invalid email"):
            normalize_email(email)

    def test_too_long(self):
        with pytest.raises(ValidationError, match="too long"):
            normalize_email("a" * 320 + "@x.org")


class TestValidatePairId:
    @pytest.mark.parametrize("pair_id", ["P1", "2025-lincoln_07", "a.b"])
    def test_valid(self, pair_id):
        assert validate_pair_id(f" {pair_id} ") == pair_id

    @pytest.mark.parametrize("pair_id", [None, "", "  "])
    def test_empty(self, pair_id):
        with pytest.raises(ValidationError):
            validate_pair_id(pair_id)

    @pytest.mark.parametrize("pair_id", ["-P1", "P 1", "P1/../x", "x" * 65])
    def test_invalid(self, pair_id):
        with pytest.raises(ValidationError, match="Invalid pair id"):
            validate_pair_id(pair_id)


class TestParsePartName:
    @pytest.mark.parametrize("raw", ["Part2", "part2", "Part 2", "PART2", "2"])
    def test_accepted_spellings(self, raw):
        assert parse_part_name(raw) is PartName.PART2

    @pytest.mark.parametrize("raw", ["Part5", "Part0", "two", "Part"])
    def test_unknown(self, raw):
        with pytest.raises(ValidationError, match="Unknown part"):
            parse_part_name(raw)

    def test_empty(self):
        with pytest.raises(ValidationError):
            parse_part_name(None)
