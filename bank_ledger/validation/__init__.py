"""Amount validation package."""

from bank_ledger.validation.validator import (
    MAX_FRACTION_DIGITS,
    MAX_INTEGER_DIGITS,
    ValidationError,
    check_withdrawal,
    is_valid_number,
    parse_amount,
)

__all__ = [
    "MAX_FRACTION_DIGITS",
    "MAX_INTEGER_DIGITS",
    "ValidationError",
    "check_withdrawal",
    "is_valid_number",
    "parse_amount",
]
