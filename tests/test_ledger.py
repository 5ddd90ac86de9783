"""Tests for the Ledger core."""

import os

import pytest
from decimal import Decimal

from bank_ledger.ledger import Ledger
from bank_ledger.models.ledger import LedgerSnapshot
from bank_ledger.services.storage import (
    HtmlLedgerStorage,
    JsonLedgerStorage,
    LedgerStorageInterface,
    StorageReadError,
    StorageWriteError,
)
from bank_ledger.validation import ValidationError


class FailingStorage(LedgerStorageInterface):
    """Loads a fixed snapshot; every save fails."""

    format_name = "failing"

    def __init__(self, snapshot=None):
        self._snapshot = snapshot or LedgerSnapshot()
        self.save_calls = 0

    def load(self, path):
        return self._snapshot

    def save(self, path, snapshot):
        self.save_calls += 1
        raise StorageWriteError("disk full")


class TestLedgerLoading:
    """Tests for Ledger construction."""

    def test_load_html(self, html_ledger_path):
        """Test both series are loaded from the HTML document."""
        ledger = Ledger(html_ledger_path)
        assert ledger.path == html_ledger_path
        assert ledger.donations == (Decimal("25.0"), Decimal("10.5"))
        assert ledger.transactions == (Decimal("100.0"), Decimal("-30.25"), Decimal("5.5"))
        assert ledger.determine_balance() == "75.25"

    def test_load_json_by_suffix(self, json_ledger_path):
        """Test a .json path is read with the JSON backend."""
        ledger = Ledger(json_ledger_path)
        assert ledger.determine_balance() == "75.25"

    def test_missing_file(self, tmp_path):
        """Test a missing document fails construction."""
        with pytest.raises(StorageReadError):
            Ledger(tmp_path / "log.html")

    def test_malformed_amount(self, tmp_path):
        """Test a non-numeric amount fails construction."""
        path = tmp_path / "log.html"
        path.write_text(
            '<table id="transactions"><tbody><tr><td>1O0</td></tr></tbody></table>',
            encoding="utf-8",
        )
        with pytest.raises(StorageReadError):
            Ledger(path)

    def test_explicit_storage(self, html_ledger_path):
        """Test an explicit backend is used instead of the suffix."""
        snapshot = LedgerSnapshot(transactions=[Decimal("1")])
        ledger = Ledger(html_ledger_path, storage=FailingStorage(snapshot))
        assert ledger.transactions == (Decimal("1"),)


class TestBalance:
    """Tests for determine_balance."""

    def test_empty_ledger(self, empty_ledger_path):
        """Test an empty ledger has a zero balance."""
        assert Ledger(empty_ledger_path).determine_balance() == "0.00"

    def test_balance_alias(self, html_ledger_path):
        """Test balance() is the same operation."""
        ledger = Ledger(html_ledger_path)
        assert ledger.balance() == ledger.determine_balance()

    def test_balance_has_no_side_effects(self, html_ledger_path):
        """Test reading the balance does not touch the document."""
        before = html_ledger_path.read_text(encoding="utf-8")
        ledger = Ledger(html_ledger_path)
        ledger.determine_balance()
        assert html_ledger_path.read_text(encoding="utf-8") == before

    def test_balance_rounds_half_up(self, tmp_path):
        """Test loaded amounts with more places are rounded half up."""
        path = tmp_path / "ledger.json"
        path.write_text('{"transactions": ["0.125"]}', encoding="utf-8")
        assert Ledger(path).determine_balance() == "0.13"


class TestDeposit:
    """Tests for deposit."""

    @pytest.mark.parametrize("amount", ["0", "1", "5.1", "5.12", "100.00", "0.01"])
    def test_deposit_increases_balance_exactly(self, empty_ledger_path, amount):
        """Test a deposit raises the balance by exactly the amount."""
        ledger = Ledger(empty_ledger_path)
        ledger.deposit("10.00")
        before = Decimal(ledger.determine_balance())

        recorded = ledger.deposit(amount)

        assert recorded == Decimal(amount)
        assert Decimal(ledger.determine_balance()) == before + Decimal(amount)

    def test_deposit_is_persisted(self, empty_ledger_path):
        """Test a deposit is on disk when the call returns."""
        Ledger(empty_ledger_path).deposit("12.34")
        assert Ledger(empty_ledger_path).transactions == (Decimal("12.34"),)

    def test_deposit_keeps_donations(self, html_ledger_path):
        """Test donations are written back unchanged."""
        ledger = Ledger(html_ledger_path)
        ledger.deposit("1")
        assert Ledger(html_ledger_path).donations == (Decimal("25.0"), Decimal("10.5"))

    @pytest.mark.parametrize("amount", ["-5", "abc", "5.123", "5.100", "", "1e-3"])
    def test_invalid_deposit(self, html_ledger_path, amount):
        """Test invalid amounts are rejected without any change."""
        ledger = Ledger(html_ledger_path)
        before = html_ledger_path.read_text(encoding="utf-8")

        with pytest.raises(ValidationError, match="Deposit number entered is invalid"):
            ledger.deposit(amount)

        assert ledger.determine_balance() == "75.25"
        assert html_ledger_path.read_text(encoding="utf-8") == before


class TestWithdraw:
    """Tests for withdraw."""

    def test_withdraw_decreases_balance_exactly(self, html_ledger_path):
        """Test a withdrawal lowers the balance by exactly the amount."""
        ledger = Ledger(html_ledger_path)
        recorded = ledger.withdraw("25.25")
        assert recorded == Decimal("-25.25")
        assert ledger.determine_balance() == "50.00"
        assert Ledger(html_ledger_path).transactions[-1] == Decimal("-25.25")

    def test_withdraw_entire_balance(self, html_ledger_path):
        """Test the balance can be taken down to zero."""
        ledger = Ledger(html_ledger_path)
        ledger.withdraw("75.25")
        assert ledger.determine_balance() == "0.00"

    def test_overdraw_rejected(self, html_ledger_path):
        """Test a withdrawal above the balance is rejected."""
        ledger = Ledger(html_ledger_path)
        with pytest.raises(ValidationError):
            ledger.withdraw("75.26")
        assert ledger.determine_balance() == "75.25"
        assert len(ledger.transactions) == 3

    def test_withdraw_from_empty_ledger(self, empty_ledger_path):
        """Test nothing can be withdrawn from an empty ledger."""
        ledger = Ledger(empty_ledger_path)
        with pytest.raises(ValidationError):
            ledger.withdraw("0.01")
        ledger.withdraw("0")
        assert ledger.determine_balance() == "0.00"

    @pytest.mark.parametrize("amount", ["-5", "abc", "5.123"])
    def test_invalid_withdraw(self, html_ledger_path, amount):
        """Test invalid amounts are rejected."""
        with pytest.raises(ValidationError, match="Withdraw number entered is invalid"):
            Ledger(html_ledger_path).withdraw(amount)


class TestScenarios:
    """End-to-end ledger scenarios."""

    def test_deposit_withdraw_deposit(self, empty_ledger_path):
        """Test deposit 100.00, withdraw 30.00, deposit 5.5."""
        ledger = Ledger(empty_ledger_path)
        ledger.deposit("100.00")
        ledger.withdraw("30.00")
        ledger.deposit("5.5")
        assert ledger.determine_balance() == "75.50"
        assert Ledger(empty_ledger_path).determine_balance() == "75.50"

    def test_overdraw_after_deposit(self, empty_ledger_path):
        """Test deposit 100 then withdraw 150."""
        ledger = Ledger(empty_ledger_path)
        ledger.deposit("100")
        with pytest.raises(ValidationError):
            ledger.withdraw("150")
        assert ledger.determine_balance() == "100.00"

    def test_largest_deposits_sum_exactly(self, empty_ledger_path):
        """Test the largest accepted amounts add up without rounding."""
        ledger = Ledger(empty_ledger_path)
        ledger.deposit("999999999999999.99")
        ledger.deposit("999999999999999.99")
        ledger.withdraw("0.01")
        assert ledger.determine_balance() == "1999999999999999.97"

    @pytest.mark.parametrize("amount", ["1234567890123456789012345678.99", "1e1000000"])
    def test_oversized_deposit_rejected(self, empty_ledger_path, amount):
        """Test oversized amounts never reach the document."""
        ledger = Ledger(empty_ledger_path)
        with pytest.raises(ValidationError):
            ledger.deposit(amount)

        assert ledger.determine_balance() == "0.00"
        assert Ledger(empty_ledger_path).transactions == ()
        ledger.deposit("1")
        assert ledger.withdraw("1") == Decimal("-1")

    def test_oversized_document_amount_fails_to_load(self, tmp_path):
        """Test a document holding an oversized amount cannot be opened."""
        path = tmp_path / "ledger.json"
        path.write_text('{"transactions": ["1e1000000"]}', encoding="utf-8")
        with pytest.raises(StorageReadError):
            Ledger(path)

    def test_long_fractions_sum_exactly(self, tmp_path):
        """Test loaded amounts with many places are summed before rounding."""
        path = tmp_path / "ledger.json"
        path.write_text(
            '{"transactions": ["999999999999999.994", "0.000000000000000000000000001"]}',
            encoding="utf-8",
        )
        ledger = Ledger(path)
        assert ledger.determine_balance() == "999999999999999.99"
        ledger.withdraw("999999999999999.99")
        assert ledger.determine_balance() == "0.00"

    @pytest.mark.parametrize("fixture_name", ["html_ledger_path", "json_ledger_path"])
    def test_persist_round_trip(self, request, fixture_name):
        """Test persisting with no mutations reloads identical series."""
        path = request.getfixturevalue(fixture_name)
        ledger = Ledger(path)
        ledger._persist()
        reloaded = Ledger(path)
        assert reloaded.donations == ledger.donations
        assert reloaded.transactions == ledger.transactions


class TestWriteFailure:
    """Tests for the rollback policy on write failure."""

    def test_deposit_rolled_back(self):
        """Test a failed write leaves the balance at its previous value."""
        storage = FailingStorage(LedgerSnapshot(transactions=[Decimal("10")]))
        ledger = Ledger("log.html", storage=storage)

        with pytest.raises(StorageWriteError):
            ledger.deposit("5")

        assert storage.save_calls == 1
        assert ledger.determine_balance() == "10.00"
        assert ledger.transactions == (Decimal("10"),)

    def test_withdraw_rolled_back(self):
        """Test a failed withdrawal write is rolled back too."""
        ledger = Ledger(
            "log.html",
            storage=FailingStorage(LedgerSnapshot(transactions=[Decimal("10")])),
        )
        with pytest.raises(StorageWriteError):
            ledger.withdraw("4")
        assert ledger.determine_balance() == "10.00"

    def test_document_unchanged_on_failed_replace(self, html_ledger_path, monkeypatch):
        """Test the document on disk survives a failed rename."""
        before = html_ledger_path.read_text(encoding="utf-8")
        ledger = Ledger(html_ledger_path)

        def failing_replace(src, dst):
            raise OSError("read-only file system")

        monkeypatch.setattr(os, "replace", failing_replace)

        with pytest.raises(StorageWriteError, match="read-only"):
            ledger.deposit("100")

        assert ledger.determine_balance() == "75.25"
        assert html_ledger_path.read_text(encoding="utf-8") == before
        assert sorted(os.listdir(html_ledger_path.parent)) == ["log.html"]

    def test_retry_after_failure_succeeds(self, json_ledger_path, monkeypatch):
        """Test the same deposit can be retried once writing works again."""
        ledger = Ledger(json_ledger_path, storage=JsonLedgerStorage())
        real_replace = os.replace
        calls = []

        def flaky_replace(src, dst):
            calls.append(src)
            if len(calls) == 1:
                raise OSError("temporarily unavailable")
            real_replace(src, dst)

        monkeypatch.setattr(os, "replace", flaky_replace)

        with pytest.raises(StorageWriteError):
            ledger.deposit("10")
        ledger.deposit("10")

        assert ledger.determine_balance() == "85.25"
        assert Ledger(json_ledger_path).determine_balance() == "85.25"


def test_repr(html_ledger_path):
    """Test the repr shows the path and balance."""
    text = repr(Ledger(html_ledger_path, storage=HtmlLedgerStorage()))
    assert "log.html" in text
    assert "balance=75.25" in text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
