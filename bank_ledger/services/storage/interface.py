"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for the ledger document.
This allows us to:
1. Keep reading the original HTML table document
2. Offer a plain JSON document as an alternative
3. Use failing or in-memory backends in tests
4. Keep the ledger core decoupled from any document syntax

A backend only has to turn a file into a LedgerSnapshot and back.
Atomic replacement of the file is shared by all backends.
"""

import os
import stat
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from bank_ledger.models.ledger import LedgerSnapshot


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger document storage.

    Any document format must implement these methods.
    """

    #: Short name used by configuration ("html", "json")
    format_name: str = ""

    @abstractmethod
    def load(self, path: Path) -> LedgerSnapshot:
        """
        Read the ledger document at path.

        Args:
            path: Location of the document

        Returns:
            Donations and transactions in document order

        Raises:
            StorageReadError: If the file cannot be read or a value
                is not a valid amount
        """
        pass

    @abstractmethod
    def save(self, path: Path, snapshot: LedgerSnapshot) -> None:
        """
        Replace the ledger document at path with snapshot.

        The previous document stays intact until the new one is
        completely written.

        Raises:
            StorageWriteError: If the document could not be written
        """
        pass


def atomic_write_text(path: Path, content: str) -> None:
    """
    Write content to path through a temporary file and os.replace().

    An existing document keeps its permission bits.

    The temporary file lives next to the target so the rename never
    crosses filesystems. On failure the temporary file is removed and
    path is left as it was.

    Raises:
        StorageWriteError: If any step fails
    """
    path = Path(path)
    directory = path.parent

    try:
        tmp_fd, tmp_path = tempfile.mkstemp(
            dir=directory,
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
    except OSError as e:
        raise StorageWriteError(f"Unable to create a temporary file in {directory}: {e}") from e

    try:
        with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        if path.exists():
            # mkstemp creates files as 0600; keep the document's own mode
            os.chmod(tmp_path, stat.S_IMODE(path.stat().st_mode))

        os.replace(tmp_path, path)

    except OSError as e:
        # Cleanup tmp file on failure
        if Path(tmp_path).exists():
            os.unlink(tmp_path)
        raise StorageWriteError(f"Unable to write ledger file {path}: {e}") from e


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Ledger document could not be read or parsed."""
    pass


class StorageWriteError(StorageError):
    """Ledger document could not be written."""
    pass
