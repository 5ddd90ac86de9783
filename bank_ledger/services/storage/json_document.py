"""
JSON Document Storage

Alternative ledger document:

    {
      "donations": ["25.00", "10"],
      "transactions": ["100.00", "-30.00"]
    }

Amounts are written as strings so no float conversion ever touches
them. Numbers are accepted on load too, for hand-edited files.
"""

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path

from pydantic import ValidationError as ModelValidationError

from bank_ledger.models.ledger import LedgerSnapshot
from bank_ledger.services.storage.interface import (
    LedgerStorageInterface,
    StorageReadError,
    atomic_write_text,
)


SECTIONS = ("donations", "transactions")


class JsonLedgerStorage(LedgerStorageInterface):
    """JSON implementation of ledger storage."""

    format_name = "json"

    def __init__(self, indent: int = 2):
        self._indent = indent

    def load(self, path: Path) -> LedgerSnapshot:
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                # parse_float keeps "10.10" from becoming 10.1000000000000001
                data = json.load(f, parse_float=Decimal)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(
                f"Unable to read {path} to pull account information: {e}"
            ) from e
        except json.JSONDecodeError as e:
            raise StorageReadError(f"Malformed JSON in {path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageReadError(f"Expected a JSON object in {path}")

        sections = {}
        for name in SECTIONS:
            values = data.get(name, [])
            if not isinstance(values, list):
                raise StorageReadError(f"Section '{name}' in {path} must be a list")
            try:
                sections[name] = [self._to_decimal(v) for v in values]
            except (InvalidOperation, TypeError, ValueError) as e:
                raise StorageReadError(
                    f"Invalid amount in section '{name}' of {path}: {e}"
                ) from e

        try:
            return LedgerSnapshot(**sections)
        except ModelValidationError as e:
            raise StorageReadError(f"Invalid ledger content in {path}: {e}") from e

    @staticmethod
    def _to_decimal(value) -> Decimal:
        if isinstance(value, bool):
            raise TypeError(f"not an amount: {value!r}")
        if isinstance(value, (int, Decimal)):
            return Decimal(value)
        if isinstance(value, str):
            return Decimal(value.strip())
        raise TypeError(f"not an amount: {value!r}")

    def render(self, snapshot: LedgerSnapshot) -> str:
        data = {
            "donations": [format(v, "f") for v in snapshot.donations],
            "transactions": [format(v, "f") for v in snapshot.transactions],
        }
        return json.dumps(data, indent=self._indent) + "\n"

    def save(self, path: Path, snapshot: LedgerSnapshot) -> None:
        atomic_write_text(Path(path), self.render(snapshot))
