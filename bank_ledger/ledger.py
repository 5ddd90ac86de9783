"""
Ledger Core

The Ledger owns the two recorded series and every read and write of
the backing document.

GUARANTEES:
- The balance is always the sum of the transactions, never a cached value
- A withdrawal can never take the balance below zero
- deposit()/withdraw() return only after the document has been replaced
- If the document cannot be written, the in-memory append is rolled
  back before the error propagates, so memory and disk never disagree

The ledger never logs and never retries. Errors are raised to the
caller (the command dispatcher), which decides what to tell the user.
"""

from decimal import Decimal
from pathlib import Path
from typing import Optional

from bank_ledger.models.ledger import LedgerSnapshot, format_amount, sum_amounts
from bank_ledger.services.storage import (
    LedgerStorageInterface,
    StorageWriteError,
    get_storage_for_path,
)
from bank_ledger.validation import check_withdrawal, parse_amount


class Ledger:
    """
    A single account's donation and transaction history.

    Usage:
        ledger = Ledger(Path("log.html"))
        ledger.deposit("100.00")
        ledger.withdraw("30")
        ledger.determine_balance()  # "70.00"
    """

    def __init__(
        self,
        path: Path,
        storage: Optional[LedgerStorageInterface] = None,
    ):
        """
        Load the ledger document at path.

        Args:
            path: Location of the ledger document
            storage: Document backend. Picked from the file suffix if None.

        Raises:
            StorageReadError: If the document cannot be read or parsed
        """
        self._path = Path(path)
        self._storage = storage or get_storage_for_path(self._path)

        snapshot = self._storage.load(self._path)
        self._donations: list[Decimal] = list(snapshot.donations)
        self._transactions: list[Decimal] = list(snapshot.transactions)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def donations(self) -> tuple[Decimal, ...]:
        return tuple(self._donations)

    @property
    def transactions(self) -> tuple[Decimal, ...]:
        return tuple(self._transactions)

    def snapshot(self) -> LedgerSnapshot:
        """Current state as a serializable snapshot."""
        return LedgerSnapshot(
            donations=list(self._donations),
            transactions=list(self._transactions),
        )

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def deposit(self, amount_text: str) -> Decimal:
        """
        Record a deposit.

        Args:
            amount_text: Non-negative amount with at most 2 decimal places

        Returns:
            The recorded amount

        Raises:
            ValidationError: If amount_text is not a valid amount
            StorageWriteError: If the document could not be written
                (the deposit is not kept)
        """
        amount = parse_amount(amount_text, "deposit")
        self._append(amount)
        return amount

    def withdraw(self, amount_text: str) -> Decimal:
        """
        Record a withdrawal.

        Returns:
            The recorded (negative) amount

        Raises:
            ValidationError: If amount_text is not a valid amount or
                exceeds the current balance
            StorageWriteError: If the document could not be written
                (the withdrawal is not kept)
        """
        amount = parse_amount(amount_text, "withdraw")
        check_withdrawal(amount, self._balance())
        recorded = -amount
        self._append(recorded)
        return recorded

    def determine_balance(self) -> str:
        """
        Sum all transactions and format to two places.

        "0.00" for an empty ledger.
        """
        return format_amount(self._balance())

    # Name used by the command surface
    balance = determine_balance

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _balance(self) -> Decimal:
        return sum_amounts(self._transactions)

    def _append(self, amount: Decimal) -> None:
        self._transactions.append(amount)
        try:
            self._persist()
        except StorageWriteError:
            self._transactions.pop()
            raise

    def _persist(self) -> None:
        """
        Replace the backing document with the current state.

        Donations first, then transactions, both in insertion order.
        """
        self._storage.save(self._path, self.snapshot())

    def __repr__(self) -> str:
        return (
            f"Ledger(path={str(self._path)!r}, donations={len(self._donations)}, "
            f"transactions={len(self._transactions)}, balance={self.determine_balance()})"
        )
