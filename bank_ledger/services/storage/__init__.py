"""
Storage Services Package

Provides the abstract ledger storage interface and the two document
formats. Backends are picked by file suffix unless configured.
"""

from pathlib import Path

from bank_ledger.services.storage.interface import (
    LedgerStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
    atomic_write_text,
)
from bank_ledger.services.storage.html_document import HtmlLedgerStorage
from bank_ledger.services.storage.json_document import JsonLedgerStorage


STORAGE_BACKENDS = {
    HtmlLedgerStorage.format_name: HtmlLedgerStorage,
    JsonLedgerStorage.format_name: JsonLedgerStorage,
}


def get_storage_for_path(path: Path, storage_format: str = "auto") -> LedgerStorageInterface:
    """
    Pick a storage backend for a ledger document.

    Args:
        path: Ledger document path
        storage_format: "html", "json" or "auto" (".json" suffix selects
            JSON, anything else HTML)

    Raises:
        ValueError: If storage_format is not a known format
    """
    if storage_format == "auto":
        storage_format = "json" if Path(path).suffix.lower() == ".json" else "html"

    try:
        backend = STORAGE_BACKENDS[storage_format]
    except KeyError:
        raise ValueError(
            f"Unknown storage format: {storage_format}. "
            f"Allowed: {sorted(STORAGE_BACKENDS)} or 'auto'"
        )
    return backend()


__all__ = [
    # Interface
    "LedgerStorageInterface",
    "atomic_write_text",
    "get_storage_for_path",
    "STORAGE_BACKENDS",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Document formats
    "HtmlLedgerStorage",
    "JsonLedgerStorage",
]
