"""Display and wire formatting helpers for XLM amounts and addresses."""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation

from stellar_market.shared.validation import STROOP_DIGITS

STROOP = Decimal(1).scaleb(-STROOP_DIGITS)
CENT = Decimal("0.01")
NATIVE_ASSET_LABEL = "XLM"


def to_decimal(value: str | int | float | Decimal | None) -> Decimal:
    """Parse a Horizon amount; missing or unparsable values count as zero."""
    if value is None or value == "":
        return Decimal(0)
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        return Decimal(0)
    return result if result.is_finite() else Decimal(0)


def quantize_stroops(value: Decimal) -> Decimal:
    return value.quantize(STROOP, rounding=ROUND_DOWN)


def format_amount(value: str | int | float | Decimal | None) -> str:
    """Format an amount with exactly seven fraction digits, truncating."""
    return f"{quantize_stroops(to_decimal(value)):.{STROOP_DIGITS}f}"


def format_price(value: Decimal) -> str:
    return f"{value.quantize(CENT, rounding=ROUND_HALF_UP):.2f}"


def stroops_to_xlm(stroops: str | int | None) -> Decimal:
    return to_decimal(stroops).scaleb(-STROOP_DIGITS)


def truncate_middle(value: str | None, keep: int, placeholder: str = "N/A") -> str:
    if not value:
        return placeholder
    if len(value) <= keep * 2:
        return value
    return f"{value[:keep]}...{value[-keep:]}"


def short_address(address: str | None) -> str:
    return truncate_middle(address, 6, placeholder="Unknown Address")


def short_hash(tx_hash: str | None) -> str:
    return truncate_middle(tx_hash, 8)


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_timestamp(value: datetime | None) -> str:
    if value is None:
        return "Date Unknown"
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")
