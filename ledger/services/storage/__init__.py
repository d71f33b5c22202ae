"""
Storage Services Package

Provides the abstract storage interface and its implementations.
CSV files are the primary backend; the in-memory backend is swappable in.
"""

from ledger.services.storage.interface import LedgerStorageInterface, PathLike
from ledger.services.storage.csv_files import (
    CsvLedgerStorage,
    append_records,
    atomic_write_text,
    header_is_current,
    parse_csv,
    read_records,
    records_to_text,
    render_rows,
    text_to_records,
    write_records,
)
from ledger.services.storage.memory import InMemoryLedgerStorage

__all__ = [
    # Interface
    "LedgerStorageInterface",
    "PathLike",
    # CSV implementation
    "CsvLedgerStorage",
    "append_records",
    "atomic_write_text",
    "header_is_current",
    "parse_csv",
    "read_records",
    "records_to_text",
    "render_rows",
    "text_to_records",
    "write_records",
    # In-memory implementation
    "InMemoryLedgerStorage",
]
