import re
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from stellar_market.shared.formatting import (
    format_amount,
    format_price,
    format_timestamp,
    parse_timestamp,
    quantize_stroops,
    short_address,
    short_hash,
    stroops_to_xlm,
    to_decimal,
    truncate_middle,
)


@pytest.mark.unit
class TestAmounts:
    def test_to_decimal_handles_missing_and_invalid(self):
        assert to_decimal(None) == Decimal(0)
        assert to_decimal("") == Decimal(0)
        assert to_decimal("abc") == Decimal(0)
        assert to_decimal("NaN") == Decimal(0)
        assert to_decimal("10.5") == Decimal("10.5")

    def test_quantize_truncates(self):
        assert quantize_stroops(Decimal("0.123456789")) == Decimal("0.1234567")

    def test_format_amount_seven_digits(self):
        assert format_amount("12.3") == "12.3000000"
        assert format_amount(Decimal("30")) == "30.0000000"
        assert format_amount(None) == "0.0000000"

    def test_format_price_two_digits(self):
        assert format_price(Decimal("19.995")) == "20.00"
        assert format_price(Decimal("5")) == "5.00"

    def test_stroops_to_xlm(self):
        assert stroops_to_xlm("100") == Decimal("0.00001")
        assert stroops_to_xlm(None) == Decimal(0)


@pytest.mark.unit
class TestTruncation:
    def test_short_address(self):
        address = "GAAZI4TCR3TY5OJHCTJC2A4QSY6CJWJH5IAJTGKIN2ER7LBNVKOCCWN7"
        assert short_address(address) == "GAAZI4...OCCWN7"

    def test_short_address_missing(self):
        assert short_address(None) == "Unknown Address"

    def test_short_hash(self):
        tx_hash = "0123456789abcdef" * 4
        assert short_hash(tx_hash) == "01234567...89abcdef"

    def test_short_values_are_unchanged(self):
        assert truncate_middle("abc", 6) == "abc"
        assert truncate_middle("", 6) == "N/A"


@pytest.mark.unit
class TestTimestamps:
    def test_parse_zulu_timestamp(self):
        parsed = parse_timestamp("2024-01-02T03:04:05Z")
        assert parsed == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_parse_invalid_timestamp(self):
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(None) is None

    def test_format_unknown(self):
        assert format_timestamp(None) == "Date Unknown"

    def test_format_known(self):
        text = format_timestamp(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", text)
