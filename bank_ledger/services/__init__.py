"""Services package."""

from bank_ledger.services.storage import (
    HtmlLedgerStorage,
    JsonLedgerStorage,
    LedgerStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
    get_storage_for_path,
)

__all__ = [
    # Storage services
    "HtmlLedgerStorage",
    "JsonLedgerStorage",
    "LedgerStorageInterface",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "get_storage_for_path",
]
