"""Tests for amount parsing utilities."""

from decimal import Decimal

import pytest

from payengine.domain.errors import AmountOverflowError
from payengine.utils.amount_parser import (
    MAX_AMOUNT,
    checked_amount,
    parse_amount,
    quantize_amount,
)


class TestParseAmount:
    """Tests for parse_amount function."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("10", "10.0000"),
            ("1.5", "1.5000"),
            ("  0.0001 ", "0.0001"),
            ("1e2", "100.0000"),
            ("2.71828", "2.7183"),
            ("0.00005", "0.0000"),
            ("0.00015", "0.0002"),
        ],
    )
    def test_parse(self, text, expected):
        assert str(parse_amount(text)) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_amount(text)

    @pytest.mark.parametrize("text", ["NaN", "Infinity"])
    def test_non_finite(self, text):
        with pytest.raises(ValueError, match="finite"):
            parse_amount(text)

    def test_out_of_range(self):
        with pytest.raises(ValueError, match="supported range"):
            parse_amount("1e20")


class TestQuantizeAmount:
    """Tests for quantize_amount function."""

    def test_accepts_maximum(self):
        assert quantize_amount(MAX_AMOUNT) == MAX_AMOUNT

    def test_rejects_beyond_maximum(self):
        with pytest.raises(ValueError):
            quantize_amount(MAX_AMOUNT + Decimal("0.0001"))

    def test_accepts_int(self):
        assert quantize_amount(3) == Decimal("3.0000")


class TestCheckedAmount:
    """Tests for checked_amount function."""

    def test_in_range_unchanged(self):
        assert checked_amount(Decimal("-5.25")) == Decimal("-5.25")

    def test_overflow(self):
        with pytest.raises(AmountOverflowError):
            checked_amount(MAX_AMOUNT * 2)
