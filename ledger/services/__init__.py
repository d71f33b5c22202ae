"""Services package."""

from ledger.services.storage import (
    CsvLedgerStorage,
    InMemoryLedgerStorage,
    LedgerStorageInterface,
)

__all__ = [
    "CsvLedgerStorage",
    "InMemoryLedgerStorage",
    "LedgerStorageInterface",
]
