"""
Amount Validation

DESIGN DECISION: Validation is checked on the text the user typed,
not on the parsed number.

RULE - a string is a valid amount iff:
1. It parses as a finite decimal number
2. The value is not negative
3. If it contains a decimal point, at most 2 characters follow the
   first decimal point
4. The value has at most MAX_INTEGER_DIGITS integer digits

"5.100" is therefore invalid even though it equals 5.1. Exponent
notation is accepted only when the value still fits in two places
("1e2" is fine, "1e-3" is not).

IMPORTANT: Validation NEVER silently fixes input.
Anything that is not clearly valid is rejected for the user to retype.
"""

from decimal import Decimal, InvalidOperation

from bank_ledger.models.ledger import MAX_INTEGER_DIGITS, exceeds_max_amount, format_amount


MAX_FRACTION_DIGITS = 2


class ValidationError(Exception):
    """An amount was rejected (bad format or overdraw)."""

    def __init__(self, message: str, amount_text: str = ""):
        super().__init__(message)
        self.amount_text = amount_text


def _to_decimal(text: str) -> Decimal:
    value = Decimal(text)
    if not value.is_finite():
        raise InvalidOperation(f"not a finite number: {text}")
    return value


def is_valid_number(amount_text: str) -> bool:
    """
    Check an amount string against the validation rule.

    Returns True if the text can be recorded as a deposit or withdrawal.
    """
    if not isinstance(amount_text, str):
        return False

    text = amount_text.strip()
    try:
        value = _to_decimal(text)
    except (InvalidOperation, ValueError):
        return False

    if value < 0 or exceeds_max_amount(value):
        return False

    if "." in text:
        fraction = text.split(".", 1)[1]
        if len(fraction) > MAX_FRACTION_DIGITS:
            return False

    # Exponent forms like "1e-3" carry no '.' but still need > 2 places
    return value.as_tuple().exponent >= -MAX_FRACTION_DIGITS


def parse_amount(amount_text: str, operation: str = "amount") -> Decimal:
    """
    Validate and parse an amount string.

    Args:
        amount_text: Raw text entered by the user
        operation: Used in the error message ("deposit", "withdraw")

    Returns:
        The non-negative amount as a Decimal

    Raises:
        ValidationError: If the text fails the validation rule
    """
    if not is_valid_number(amount_text):
        raise ValidationError(
            f"{operation.capitalize()} number entered is invalid.",
            amount_text=amount_text if isinstance(amount_text, str) else repr(amount_text),
        )
    # copy_abs() turns "-0" into 0
    return _to_decimal(amount_text.strip()).copy_abs()


def check_withdrawal(amount: Decimal, balance: Decimal) -> None:
    """
    Make sure a withdrawal cannot take the balance below zero.

    Raises:
        ValidationError: If amount exceeds the current balance
    """
    if amount > balance:
        raise ValidationError(
            f"Withdraw number entered is invalid: ${format_amount(amount)} "
            f"exceeds the current balance of ${format_amount(balance)}.",
            amount_text=str(amount),
        )
