"""Identifier normalization and cell coercion."""
import datetime as dt
import math

import pytest

from rostermatch.data.normalize import (
    cell_text,
    is_blank,
    mask_identifier,
    normalize_identifier,
    strip_identifier_prefix,
)


class TestNormalizeIdentifier:

    @pytest.mark.parametrize("raw", [
        " 1234  x ",
        "1234X",
        "\t12 34\r\nx",
        "G11010519491231002X",
        "g11010519491231002x",
        "　11010519491231002X　",
        "",
        "   ",
        "G123",
    ])
    def test_idempotent(self, raw):
        once = normalize_identifier(raw)
        assert normalize_identifier(once) == once
        stripped = normalize_identifier(raw, strip_prefix=True)
        assert normalize_identifier(stripped, strip_prefix=True) == stripped

    def test_case_and_whitespace_insensitive(self):
        assert normalize_identifier(" 1234  x ") == normalize_identifier("1234X") == "1234X"

    def test_removes_tabs_newlines_and_full_width_space(self):
        assert normalize_identifier("1101\t0519\n4912\r3100　2X") == "11010519491231002X"

    def test_prefix_stripped_when_remainder_is_full_length(self):
        assert normalize_identifier("G11010519491231002X", strip_prefix=True) == "11010519491231002X"

    def test_lowercase_prefix_stripped_after_uppercasing(self):
        assert normalize_identifier("g11010519491231002x", strip_prefix=True) == "11010519491231002X"

    def test_short_prefixed_value_untouched(self):
        assert normalize_identifier("G123", strip_prefix=True) == "G123"

    def test_seventeen_character_remainder_untouched(self):
        assert normalize_identifier("G1234567890123456X", strip_prefix=True) == "G1234567890123456X"

    def test_prefix_kept_without_flag(self):
        assert normalize_identifier("G11010519491231002X") == "G11010519491231002X"

    def test_non_ascii_letters_not_case_mapped(self):
        assert normalize_identifier("ａｂ12") == "ａｂ12"

    def test_numeric_cell(self):
        assert normalize_identifier(123456.0) == "123456"
        assert normalize_identifier(42) == "42"

    def test_absent_values_become_empty(self):
        assert normalize_identifier(None) == ""
        assert normalize_identifier(float("nan")) == ""


class TestStripIdentifierPrefix:

    def test_only_one_prefix_removed(self):
        assert strip_identifier_prefix("G" + "G" * 18) == "G" * 18

    def test_other_letters_untouched(self):
        assert strip_identifier_prefix("H11010519491231002X") == "H11010519491231002X"


class TestCellText:

    def test_strings_stripped(self):
        assert cell_text("  张三 ") == "张三"

    def test_integral_float_loses_decimal(self):
        assert cell_text(7.0) == "7"
        assert cell_text(7.5) == "7.5"

    def test_bool(self):
        assert cell_text(True) == "TRUE"

    def test_dates(self):
        assert cell_text(dt.date(2024, 9, 1)) == "2024-09-01"

    def test_blank(self):
        assert cell_text(None) == ""
        assert cell_text(math.nan) == ""
        assert is_blank("  ")
        assert not is_blank(0)


class TestMaskIdentifier:

    def test_keeps_ends(self):
        assert mask_identifier("11010519491231002X") == "110****02X"

    def test_short_values_fully_masked(self):
        assert mask_identifier("12345") == "****"
