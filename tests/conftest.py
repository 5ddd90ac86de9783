"""Shared fixtures: ledger documents on disk and settings without retry waits."""

import json

import pytest

from bank_ledger.config import LedgerSettings


SAMPLE_HTML = """<html>
<body>
    <div class="content">
        <table id="donations" class="table-bordered">
            <thead>
                <th>Amount</th>
            </thead>
            <tbody>
                <tr><td>25.0</td></tr>
                <tr><td>10.5</td></tr>
            </tbody>
        </table>
        <table id="transactions" class="table-bordered">
            <thead>
                <th>Amount</th>
            </thead>
            <tbody>
                <tr><td>100.0</td></tr>
                <tr><td>-30.25</td></tr>
                <tr><td>5.5</td></tr>
            </tbody>
        </table>
    </div>
</body>
</html>"""


EMPTY_HTML = """<html>
<body>
    <div class="content">
        <table id="donations" class="table-bordered">
            <thead><th>Amount</th></thead>
            <tbody></tbody>
        </table>
        <table id="transactions" class="table-bordered">
            <thead><th>Amount</th></thead>
            <tbody></tbody>
        </table>
    </div>
</body>
</html>"""


@pytest.fixture
def html_ledger_path(tmp_path):
    """log.html with two donations and three transactions (balance 75.25)."""
    path = tmp_path / "log.html"
    path.write_text(SAMPLE_HTML, encoding="utf-8")
    return path


@pytest.fixture
def empty_ledger_path(tmp_path):
    path = tmp_path / "empty.html"
    path.write_text(EMPTY_HTML, encoding="utf-8")
    return path


@pytest.fixture
def json_ledger_path(tmp_path):
    """ledger.json with the same content as html_ledger_path."""
    path = tmp_path / "ledger.json"
    path.write_text(
        json.dumps({
            "donations": ["25.0", "10.5"],
            "transactions": ["100.0", "-30.25", "5.5"],
        }),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def ledger_settings():
    """Settings with retries that never sleep."""
    return LedgerSettings(
        write_retry_attempts=3,
        write_retry_wait_seconds=0.0,
        max_path_attempts=3,
    )
