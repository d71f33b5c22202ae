"""
CSV File Storage Implementation

DESIGN DECISION: Flat CSV files are the storage backend because:
1. Users can open and read their data in any spreadsheet tool
2. No database setup required
3. Files diff well and are easy to back up

Each collection lives in its own file: a header row with the schema's
column names, then one row per record. Quoting follows the usual CSV
rules (fields containing a comma, quote or line break are quoted;
embedded quotes are doubled).

Crash safety:
- Full writes go to a temp file in the same directory, are flushed and
  fsync'ed, then renamed over the target. A crash before the rename
  leaves the old file untouched; after it, the new file is complete.
- Appends (new movements only) skip the rewrite and write rows at the
  end of the existing file.

I/O errors are never caught or retried here.
"""

import contextlib
import csv
import io
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, TypeVar, Union

import structlog
from pydantic import BaseModel

from ledger.codec.rows import decode, encode
from ledger.codec.schema import (
    ACCOUNT_SCHEMA,
    CATEGORY_SCHEMA,
    DEFAULT_PRECISION,
    MOVEMENT_SCHEMA,
    Schema,
    field_names,
    precision_for,
)
from ledger.config import StorageSettings, get_settings
from ledger.models.ledger import Ledger
from ledger.models.records import Account, Category, Movement
from ledger.services.storage.interface import LedgerStorageInterface, PathLike

RecordT = TypeVar("RecordT", bound=BaseModel)

# Either a fixed precision for every row, or a function picking one per row.
# Readers call it with the raw string row, writers with the typed record.
PrecisionSource = Union[int, Callable[[Any], int]]

BOM = "\ufeff"
LINE_TERMINATOR = "\r\n"

logger = structlog.get_logger(__name__)

# Lift the csv default field cap (128 KiB) so long notes load back.
# 2**31 - 1 is accepted on every platform.
csv.field_size_limit(min(sys.maxsize, 2**31 - 1))


def _precision(source: PrecisionSource, item: Any) -> int:
    return source(item) if callable(source) else source


# =============================================================================
# TEXT FORMAT
# =============================================================================

def parse_csv(text: str) -> list[dict[str, str]]:
    """
    Parse CSV text into one dict per data row, keyed by header.

    A leading BOM is ignored, blank lines are skipped, and short rows are
    padded with "" for the missing cells.
    """
    if text.startswith(BOM):
        text = text[len(BOM):]

    rows = [row for row in csv.reader(io.StringIO(text, newline="")) if row]
    if not rows:
        return []

    headers = rows[0]
    return [
        {header: (row[i] if i < len(row) else "") for i, header in enumerate(headers)}
        for row in rows[1:]
    ]


def render_rows(headers: Sequence[str], rows: Iterable[Mapping[str, str]], include_header: bool = True) -> str:
    """Render string rows as CSV text (header first unless told otherwise)."""
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer, lineterminator=LINE_TERMINATOR, quoting=csv.QUOTE_MINIMAL)
    if include_header:
        writer.writerow(headers)
    for row in rows:
        writer.writerow([row.get(header, "") for header in headers])
    return buffer.getvalue()


def records_to_text(
    schema: Schema,
    records: Iterable[BaseModel],
    precision: PrecisionSource = DEFAULT_PRECISION,
    include_header: bool = True,
) -> str:
    """Encode typed records as CSV text with every schema column."""
    rows = (encode(record, schema, _precision(precision, record)) for record in records)
    return render_rows(field_names(schema), rows, include_header=include_header)


def text_to_records(
    text: str,
    schema: Schema,
    model: type[RecordT],
    precision: PrecisionSource = DEFAULT_PRECISION,
) -> list[RecordT]:
    """Decode CSV text into typed records. Never fails on bad values."""
    return [
        decode(raw, schema, model, _precision(precision, raw))
        for raw in parse_csv(text)
    ]


# =============================================================================
# DURABLE FILE OPERATIONS
# =============================================================================

def _fsync_directory(directory: Path) -> None:
    """Make a rename durable on POSIX; a no-op where directories can't be opened."""
    if not hasattr(os, "O_DIRECTORY"):
        return
    fd = os.open(directory, os.O_RDONLY | os.O_DIRECTORY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def atomic_write_text(path: PathLike, content: str) -> None:
    """
    Replace `path` with `content` atomically.

    Writes a temp file next to the target, flushes and fsyncs it, then
    renames it over the target. On any failure the temp file is removed
    and the existing file is left as it was.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise
    _fsync_directory(path.parent)


def header_is_current(text: str, schema: Schema) -> bool:
    """
    True when `text` is empty or its header row lists exactly the schema's
    columns, in order.

    Rows appended under an older header would land in the wrong columns.
    """
    if text.startswith(BOM):
        text = text[len(BOM):]
    for row in csv.reader(io.StringIO(text, newline="")):
        if row:
            return row == field_names(schema)
    return True


def read_header_text(path: PathLike) -> str:
    """The first non-blank line of `path`, or "" when there is none."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace", newline="") as handle:
            for line in handle:
                if line.strip().strip(BOM):
                    return line
    except FileNotFoundError:
        pass
    return ""


def read_records(
    path: PathLike,
    schema: Schema,
    model: type[RecordT],
    precision: PrecisionSource = DEFAULT_PRECISION,
) -> list[RecordT]:
    """
    Read a CSV file into typed records.

    Returns [] when the file does not exist or holds only a header.
    Missing columns get defaults, extra columns are ignored.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8", errors="replace", newline="") as handle:
            text = handle.read()
    except FileNotFoundError:
        return []
    return text_to_records(text, schema, model, precision)


def write_records(
    path: PathLike,
    schema: Schema,
    records: Iterable[BaseModel],
    precision: PrecisionSource = DEFAULT_PRECISION,
) -> None:
    """Serialize records with the full column set and replace the file atomically."""
    atomic_write_text(path, records_to_text(schema, records, precision))


def append_records(
    path: PathLike,
    schema: Schema,
    records: Sequence[BaseModel],
    precision: PrecisionSource = DEFAULT_PRECISION,
) -> None:
    """
    Append records to an existing CSV file without rewriting it.

    The file's header must already match the schema (see header_is_current);
    callers holding the whole collection rewrite it instead when it does not.
    Falls back to a full atomic write when the file is missing or empty.
    Appending nothing is a no-op.
    """
    if not records:
        return

    path = Path(path)
    try:
        size = path.stat().st_size
    except FileNotFoundError:
        size = 0

    if size == 0:
        write_records(path, schema, records, precision)
        return

    content = records_to_text(schema, records, precision, include_header=False)
    with open(path, "rb") as handle:
        handle.seek(-1, os.SEEK_END)
        needs_newline = handle.read(1) not in (b"\n", b"\r")
    if needs_newline:
        content = LINE_TERMINATOR + content

    with open(path, "a", encoding="utf-8", newline="") as handle:
        handle.write(content)
        handle.flush()
        os.fsync(handle.fileno())


# =============================================================================
# LEDGER STORAGE
# =============================================================================

class CsvLedgerStorage(LedgerStorageInterface):
    """
    CSV implementation of ledger storage.

    Money precision per row:
    - accounts: the account's own currency
    - movements: the currency of the account they belong to
      (the default currency when that account is missing)
    - categories: the configured budget currency
    """

    def __init__(self, settings: Optional[StorageSettings] = None):
        self._settings = settings or get_settings().storage

    @property
    def settings(self) -> StorageSettings:
        return self._settings

    def paths(self, directory: PathLike) -> tuple[Path, Path, Path]:
        """(accounts, movements, categories) file paths under `directory`."""
        directory = Path(directory)
        return (
            directory / self._settings.accounts_file,
            directory / self._settings.movements_file,
            directory / self._settings.categories_file,
        )

    # -------------------------------------------------------------------------
    # Precision resolvers
    # -------------------------------------------------------------------------

    def account_precision(self, item: Any) -> int:
        """Precision for an account row (raw dict) or Account record."""
        currency = item.currency if isinstance(item, Account) else item.get("currency", "")
        return precision_for(currency or self._settings.default_currency)

    def movement_precision(self, accounts: Iterable[Account]) -> Callable[[Any], int]:
        """Build a resolver mapping a movement to its account's precision."""
        currencies = {account.id: account.currency for account in accounts}
        default = self._settings.default_currency

        def resolve(item: Any) -> int:
            if isinstance(item, Movement):
                account_id = item.account_id
            else:
                account_id = item.get("accountId", "")
            return precision_for(currencies.get(account_id) or default)

        return resolve

    @property
    def category_precision(self) -> int:
        return precision_for(self._settings.budget_currency)

    # -------------------------------------------------------------------------
    # LedgerStorageInterface
    # -------------------------------------------------------------------------

    def load(self, directory: PathLike) -> Ledger:
        accounts_path, movements_path, categories_path = self.paths(directory)

        # Accounts first: movements need their currencies
        accounts = read_records(accounts_path, ACCOUNT_SCHEMA, Account, self.account_precision)
        movements = read_records(
            movements_path,
            MOVEMENT_SCHEMA,
            Movement,
            self.movement_precision(accounts),
        )
        categories = read_records(
            categories_path,
            CATEGORY_SCHEMA,
            Category,
            self.category_precision,
        )

        logger.debug(
            "ledger_files_read",
            directory=str(directory),
            accounts=len(accounts),
            movements=len(movements),
            categories=len(categories),
        )
        return Ledger(
            accounts=tuple(accounts),
            movements=tuple(movements),
            categories=tuple(categories),
        )

    def persist(self, ledger: Ledger, directory: PathLike) -> None:
        Path(directory).mkdir(parents=True, exist_ok=True)
        accounts_path, movements_path, categories_path = self.paths(directory)

        write_records(accounts_path, ACCOUNT_SCHEMA, ledger.accounts, self.account_precision)
        write_records(
            movements_path,
            MOVEMENT_SCHEMA,
            ledger.movements,
            self.movement_precision(ledger.accounts),
        )
        write_records(
            categories_path,
            CATEGORY_SCHEMA,
            ledger.categories,
            self.category_precision,
        )
        logger.debug("ledger_files_written", directory=str(directory))

    def append_movements(
        self,
        ledger: Ledger,
        movements: Sequence[Movement],
        directory: PathLike,
    ) -> None:
        Path(directory).mkdir(parents=True, exist_ok=True)
        _, movements_path, _ = self.paths(directory)

        if not header_is_current(read_header_text(movements_path), MOVEMENT_SCHEMA):
            # Older column set: rewrite everything so the file is upgraded
            logger.info("movements_header_outdated", directory=str(directory))
            self.persist(ledger, directory)
            return

        append_records(
            movements_path,
            MOVEMENT_SCHEMA,
            movements,
            self.movement_precision(ledger.accounts),
        )
        logger.debug("movement_rows_appended", directory=str(directory), count=len(movements))
