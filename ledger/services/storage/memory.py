"""
In-Memory Storage Implementation

Keeps each directory's three collections as encoded CSV text in a dict,
so a round trip through this backend exercises the same codec as the
file backend. Used by the test suite and anywhere a throwaway ledger is
needed.
"""

from pathlib import Path
from typing import Optional, Sequence

from ledger.codec.schema import ACCOUNT_SCHEMA, CATEGORY_SCHEMA, MOVEMENT_SCHEMA
from ledger.config import StorageSettings, get_settings
from ledger.models.ledger import Ledger
from ledger.models.records import Account, Category, Movement
from ledger.services.storage.csv_files import (
    LINE_TERMINATOR,
    CsvLedgerStorage,
    header_is_current,
    records_to_text,
    text_to_records,
)
from ledger.services.storage.interface import LedgerStorageInterface, PathLike


class InMemoryLedgerStorage(LedgerStorageInterface):
    """
    Dict-backed ledger storage.

    `writes` and `appends` count full persists and append calls, which
    lets tests check which persistence path a caller took.
    """

    def __init__(self, settings: Optional[StorageSettings] = None):
        self._settings = settings or get_settings().storage
        # Same precision rules as the file backend
        self._precision = CsvLedgerStorage(self._settings)
        self._files: dict[str, str] = {}
        self.writes = 0
        self.appends = 0

    def _key(self, directory: PathLike, file_name: str) -> str:
        return str(Path(directory) / file_name)

    def put_text(self, directory: PathLike, file_name: str, text: str) -> None:
        """Seed raw file content, e.g. an old file missing newer columns."""
        self._files[self._key(directory, file_name)] = text

    def get_text(self, directory: PathLike, file_name: str) -> Optional[str]:
        return self._files.get(self._key(directory, file_name))

    def load(self, directory: PathLike) -> Ledger:
        accounts = text_to_records(
            self.get_text(directory, self._settings.accounts_file) or "",
            ACCOUNT_SCHEMA,
            Account,
            self._precision.account_precision,
        )
        movements = text_to_records(
            self.get_text(directory, self._settings.movements_file) or "",
            MOVEMENT_SCHEMA,
            Movement,
            self._precision.movement_precision(accounts),
        )
        categories = text_to_records(
            self.get_text(directory, self._settings.categories_file) or "",
            CATEGORY_SCHEMA,
            Category,
            self._precision.category_precision,
        )
        return Ledger(
            accounts=tuple(accounts),
            movements=tuple(movements),
            categories=tuple(categories),
        )

    def persist(self, ledger: Ledger, directory: PathLike) -> None:
        self.put_text(
            directory,
            self._settings.accounts_file,
            records_to_text(ACCOUNT_SCHEMA, ledger.accounts, self._precision.account_precision),
        )
        self.put_text(
            directory,
            self._settings.movements_file,
            records_to_text(
                MOVEMENT_SCHEMA,
                ledger.movements,
                self._precision.movement_precision(ledger.accounts),
            ),
        )
        self.put_text(
            directory,
            self._settings.categories_file,
            records_to_text(CATEGORY_SCHEMA, ledger.categories, self._precision.category_precision),
        )
        self.writes += 1

    def append_movements(
        self,
        ledger: Ledger,
        movements: Sequence[Movement],
        directory: PathLike,
    ) -> None:
        if not movements:
            return
        existing = self.get_text(directory, self._settings.movements_file) or ""
        if not header_is_current(existing, MOVEMENT_SCHEMA):
            self.persist(ledger, directory)
            return

        rows = records_to_text(
            MOVEMENT_SCHEMA,
            movements,
            self._precision.movement_precision(ledger.accounts),
            include_header=not existing,
        )
        if existing and not existing.endswith(("\n", "\r")):
            existing += LINE_TERMINATOR
        self.put_text(directory, self._settings.movements_file, existing + rows)
        self.appends += 1
