"""
Command-line entry point.

    bank-ledger [--path log.html] [--format auto|html|json] [--log-level INFO]
    python -m bank_ledger ...
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from bank_ledger import __version__
from bank_ledger.audit import configure_logging
from bank_ledger.config import LOG_LEVELS, get_settings
from bank_ledger.orchestrator import LedgerSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bank-ledger",
        description="Record deposits and withdrawals in a ledger document",
    )
    parser.add_argument(
        "--path",
        type=Path,
        default=None,
        help="Ledger document to open (default: LEDGER_LEDGER_PATH or ./log.html)",
    )
    parser.add_argument(
        "--format",
        choices=["auto", "html", "json"],
        default=None,
        help="Document format (default: LEDGER_STORAGE_FORMAT or auto)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Log level for stderr output (default: LEDGER_LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    try:
        log_settings = settings.logging
        ledger_settings = settings.ledger
    except ValidationError as e:
        parser.error(f"invalid LEDGER_* settings: {e}")

    configure_logging(
        level=args.log_level or log_settings.log_level,
        json_format=log_settings.log_json,
    )

    if args.format:
        ledger_settings = ledger_settings.model_copy(update={"storage_format": args.format})

    session = LedgerSession(
        ledger_path=args.path,
        settings=ledger_settings,
    )
    return session.run()


if __name__ == "__main__":
    sys.exit(main())
