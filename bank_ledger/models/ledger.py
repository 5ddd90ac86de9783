"""
Core Data Models for Bank Ledger

These models define the shapes of data moving between the ledger,
its storage backends and the command dispatcher.

DESIGN DECISION: Amounts are Decimal everywhere.
Float summation drifts; Decimal keeps two-place amounts exact
through the storage round trip.
"""

from decimal import MAX_EMAX, MIN_EMIN, ROUND_HALF_UP, Decimal, localcontext
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


CENTS = Decimal("0.01")

# Amounts must stay below 10**15 (one quadrillion)
MAX_INTEGER_DIGITS = 15


def format_amount(value: Decimal) -> str:
    """Format a Decimal to exactly two places, rounding half up."""
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus two places
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        rounded = value.quantize(CENTS, rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        # never show "-0.00"
        rounded = rounded.copy_abs()
    return str(rounded)


def exceeds_max_amount(value: Decimal) -> bool:
    """True if value has more than MAX_INTEGER_DIGITS integer digits."""
    return not value.is_zero() and value.adjusted() >= MAX_INTEGER_DIGITS


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    """
    Sum finite amounts left to right without any rounding.

    The working precision is widened to cover every digit the total
    can have, from the largest integer digit down to the smallest
    fractional one.
    """
    amounts = list(amounts)
    total = Decimal("0")
    if not amounts:
        return total

    highest = max(amount.adjusted() for amount in amounts) + len(str(len(amounts)))
    lowest = min(amount.as_tuple().exponent for amount in amounts)

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, highest - min(lowest, 0) + 2)
        ctx.Emax = MAX_EMAX
        ctx.Emin = MIN_EMIN
        for amount in amounts:
            total += amount
    return total


# =============================================================================
# ENUMS
# =============================================================================

class LedgerCommand(str, Enum):
    """Commands understood by the interactive dispatcher."""
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    BALANCE = "balance"
    EXIT = "exit"


# =============================================================================
# LEDGER STATE
# =============================================================================

class LedgerSnapshot(BaseModel):
    """
    Serializable ledger state.

    This is what storage backends read and write. Order of both
    sequences is insertion order and must be preserved.
    """

    donations: list[Decimal] = Field(
        default_factory=list,
        description="Recorded donations (never negative)"
    )
    transactions: list[Decimal] = Field(
        default_factory=list,
        description="Signed transactions: deposits positive, withdrawals negative"
    )

    @field_validator('donations', 'transactions')
    @classmethod
    def validate_amounts(cls, v: list[Decimal], info: ValidationInfo) -> list[Decimal]:
        """Amounts are finite and bounded; donations are never negative."""
        for amount in v:
            # Checked first: comparing NaN raises instead of returning False
            if not amount.is_finite():
                raise ValueError(f"Amounts must be finite numbers: {amount}")
            if exceeds_max_amount(amount):
                raise ValueError(
                    f"Amounts must have at most {MAX_INTEGER_DIGITS} integer digits: {amount}"
                )
            if info.field_name == "donations" and amount < 0:
                raise ValueError(f"Donation amounts cannot be negative: {amount}")
        return v

    @property
    def balance(self) -> Decimal:
        """Sum of transactions, left to right."""
        return sum_amounts(self.transactions)


# =============================================================================
# DISPATCHER RESULTS
# =============================================================================

class CommandResult(BaseModel):
    """
    Outcome of one dispatched command.

    The interactive loop prints `message`; tests inspect the rest.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    command: str = Field(
        ...,
        description="Command as entered by the user (normalized)"
    )
    success: bool
    message: str = Field(
        default="",
        description="Text shown to the user"
    )
    amount: Optional[Decimal] = Field(
        default=None,
        description="Signed amount recorded, for deposit/withdraw"
    )
    balance: Optional[str] = Field(
        default=None,
        description="Balance after the command, formatted to two places"
    )
    write_failed: bool = Field(
        default=False,
        description="The amount was valid but could not be saved"
    )
    exit_requested: bool = False
