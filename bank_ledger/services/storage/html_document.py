"""
HTML Table Document Storage

The ledger document is a small HTML page with two tables:

    <table id="donations">    one <td> per donation
    <table id="transactions"> one <td> per signed transaction

This is the layout of the original `log.html` files, so existing
ledgers keep working. Parsing is done with BeautifulSoup and is
lenient about surrounding markup: only the <td> cells of the two
tables matter. A missing table is an empty series.

TRADEOFFS:
- Comments, styling and extra markup are not preserved on save
- Amounts are re-rendered in plain decimal notation
"""

from decimal import Decimal, InvalidOperation
from pathlib import Path

from bs4 import BeautifulSoup
from pydantic import ValidationError as ModelValidationError

from bank_ledger.models.ledger import LedgerSnapshot
from bank_ledger.services.storage.interface import (
    LedgerStorageInterface,
    StorageReadError,
    atomic_write_text,
)


DONATIONS_TABLE_ID = "donations"
TRANSACTIONS_TABLE_ID = "transactions"

_HEADER = (
    "<html>\n"
    "<body>\n"
    "    <div class=\"content\">\n"
)

_TABLE_OPEN = (
    "        <table id=\"{table_id}\" class=\"table-bordered\">\n"
    "            <thead>\n"
    "                <th>Amount</th>\n"
    "            </thead>\n"
    "            <tbody>\n"
)

_ROW = "                <tr><td>{amount}</td></tr>\n"

_TABLE_CLOSE = (
    "            </tbody>\n"
    "        </table>\n"
)

_FOOTER = (
    "    </div>\n"
    "</body>\n"
    "</html>\n"
)


class HtmlLedgerStorage(LedgerStorageInterface):
    """
    HTML table implementation of ledger storage.

    One amount per table cell, in document order.
    """

    format_name = "html"

    def __init__(self, parser: str = "html.parser"):
        self._parser = parser

    def _read_table(self, soup: BeautifulSoup, table_id: str, path: Path) -> list[Decimal]:
        """Parse every cell of one table into a Decimal."""
        amounts = []
        for cell in soup.select(f"table#{table_id} td"):
            text = cell.get_text(strip=True)
            try:
                amounts.append(Decimal(text))
            except InvalidOperation as e:
                raise StorageReadError(
                    f"Invalid amount {text!r} in table '{table_id}' of {path}"
                ) from e
        return amounts

    def load(self, path: Path) -> LedgerSnapshot:
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                soup = BeautifulSoup(f.read(), self._parser)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(
                f"Unable to read {path} to pull account information: {e}"
            ) from e

        donations = self._read_table(soup, DONATIONS_TABLE_ID, path)
        transactions = self._read_table(soup, TRANSACTIONS_TABLE_ID, path)

        try:
            return LedgerSnapshot(donations=donations, transactions=transactions)
        except ModelValidationError as e:
            raise StorageReadError(f"Invalid ledger content in {path}: {e}") from e

    def render(self, snapshot: LedgerSnapshot) -> str:
        """Render a snapshot as a complete HTML document."""
        parts = [_HEADER]

        for table_id, amounts in (
            (DONATIONS_TABLE_ID, snapshot.donations),
            (TRANSACTIONS_TABLE_ID, snapshot.transactions),
        ):
            parts.append(_TABLE_OPEN.format(table_id=table_id))
            for amount in amounts:
                parts.append(_ROW.format(amount=format(amount, "f")))
            parts.append(_TABLE_CLOSE)

        parts.append(_FOOTER)
        return "".join(parts)

    def save(self, path: Path, snapshot: LedgerSnapshot) -> None:
        atomic_write_text(Path(path), self.render(snapshot))
