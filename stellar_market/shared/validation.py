"""Input validation for prices, quantities and Stellar addresses."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from stellar_sdk import StrKey

# The native asset is divisible down to one stroop (10^-7 XLM).
STROOP_DIGITS = 7
MAX_STROOPS = 9_223_372_036_854_775_807


@dataclass
class ValidationResult:
    is_valid: bool
    error_message: str | None = None
    normalized_value: Any = None


class AmountValidator:
    @staticmethod
    def parse_amount(value: str | int | Decimal) -> ValidationResult:
        if isinstance(value, Decimal):
            raw_amount = str(value)
        else:
            raw_amount = str(value if value is not None else "").strip()

        if not raw_amount:
            return ValidationResult(
                is_valid=False,
                error_message="Amount is required",
            )

        raw_amount = raw_amount.replace(",", "").replace(" ", "")

        if raw_amount.startswith(("-", "+")):
            return ValidationResult(
                is_valid=False,
                error_message="Amount must be a positive number",
            )

        try:
            amount = Decimal(raw_amount)
        except (InvalidOperation, ValueError):
            return ValidationResult(
                is_valid=False,
                error_message=f"Amount must be a valid number: {raw_amount!r}",
            )

        if not amount.is_finite():
            return ValidationResult(
                is_valid=False,
                error_message="Invalid numeric format (special value detected)",
            )

        if amount <= 0:
            return ValidationResult(
                is_valid=False,
                error_message="Amount must be greater than zero",
            )

        return ValidationResult(is_valid=True, normalized_value=amount)

    @staticmethod
    def validate_decimal_places(
        amount: Decimal, digits: int = STROOP_DIGITS
    ) -> ValidationResult:
        exponent = amount.as_tuple().exponent
        if not isinstance(exponent, int):
            return ValidationResult(
                is_valid=False,
                error_message="Invalid numeric format",
            )

        if max(0, -exponent) > digits:
            return ValidationResult(
                is_valid=False,
                error_message=f"Too many decimal places. Maximum {digits} allowed",
            )

        return ValidationResult(is_valid=True)

    @classmethod
    def validate_price(cls, value: str | int | Decimal) -> ValidationResult:
        parse_result = cls.parse_amount(value)
        if not parse_result.is_valid:
            return parse_result

        amount: Decimal = parse_result.normalized_value
        digits_result = cls.validate_decimal_places(amount)
        if not digits_result.is_valid:
            return digits_result

        if amount.scaleb(STROOP_DIGITS) > MAX_STROOPS:
            return ValidationResult(
                is_valid=False,
                error_message="Amount exceeds maximum allowed value",
            )

        return ValidationResult(is_valid=True, normalized_value=amount)


class QuantityValidator:
    @staticmethod
    def validate(value: Any) -> ValidationResult:
        if isinstance(value, bool):
            return ValidationResult(
                is_valid=False, error_message="Quantity must be an integer"
            )
        try:
            quantity = int(str(value).strip())
        except (TypeError, ValueError):
            return ValidationResult(
                is_valid=False, error_message="Quantity must be an integer"
            )
        if quantity < 1:
            return ValidationResult(
                is_valid=False, error_message="Quantity must be at least 1"
            )
        return ValidationResult(is_valid=True, normalized_value=quantity)


class AddressValidator:
    ADDRESS_LENGTH = 56

    @staticmethod
    def validate(value: str) -> ValidationResult:
        if not value or not value.strip():
            return ValidationResult(
                is_valid=False,
                error_message="Address is required",
            )

        normalized = value.strip().upper()

        if len(normalized) != AddressValidator.ADDRESS_LENGTH:
            return ValidationResult(
                is_valid=False,
                error_message=f"Address must be {AddressValidator.ADDRESS_LENGTH} characters",
            )

        if not normalized.startswith("G"):
            return ValidationResult(
                is_valid=False,
                error_message="Address must start with 'G'",
            )

        if not StrKey.is_valid_ed25519_public_key(normalized):
            return ValidationResult(
                is_valid=False,
                error_message="Address checksum is invalid",
            )

        return ValidationResult(is_valid=True, normalized_value=normalized)
