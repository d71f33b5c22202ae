"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for ledger persistence.
This allows us to:
1. Keep the CSV files as the primary backend
2. Use in-memory storage for testing
3. Keep ledger operations decoupled from file handling

The interface is intentionally small: load a whole ledger, write a whole
ledger, and append freshly created movements.

Failure semantics: I/O errors (OSError and subclasses) propagate to the
caller unchanged. Implementations never retry; retry policy belongs to
whoever calls them.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence, Union

from ledger.models.ledger import Ledger
from ledger.models.records import Movement

PathLike = Union[str, Path]


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger storage operations.

    Any storage implementation (CSV files, in-memory, ...)
    must implement these methods.
    """

    @abstractmethod
    def load(self, directory: PathLike) -> Ledger:
        """
        Load the ledger stored under `directory`.

        Missing files load as empty collections. Never fails on
        malformed content; unparseable values degrade to defaults.

        Raises:
            OSError: If a file exists but cannot be read
        """
        pass

    @abstractmethod
    def persist(self, ledger: Ledger, directory: PathLike) -> None:
        """
        Write every collection of `ledger` under `directory`.

        Each file is replaced atomically.

        Raises:
            OSError: If writing fails; the previous file stays intact
        """
        pass

    @abstractmethod
    def append_movements(
        self,
        ledger: Ledger,
        movements: Sequence[Movement],
        directory: PathLike,
    ) -> None:
        """
        Append newly created movements without rewriting the movements file.

        `ledger` is the full snapshot, already containing `movements`; it
        is used to resolve each movement's currency precision. When the
        stored file has an outdated header, the whole snapshot is
        rewritten instead of appended to.

        Raises:
            OSError: If writing fails
        """
        pass
