"""
Ledger Session Orchestrator

This module ties together storage, operations and auditing into the
one flow a caller needs:

    load -> apply operation -> persist on success

DESIGN DECISION: The session enforces the boundaries:
- Only one load/apply/persist sequence runs at a time (asyncio.Lock)
- A rejected operation never touches disk
- The in-memory snapshot only advances once the new ledger is on disk
- Every step is audited

Operations stay pure and synchronous; file I/O runs in a worker thread
via asyncio.to_thread. Retrying failed writes is the session's job
(tenacity, configured by AppSettings), never the store's.
"""

import asyncio
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, Union
from uuid import UUID

import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ledger.audit import AuditLogger, create_correlation_id
from ledger.audit.logger import AuditSink
from ledger.config import AppSettings, get_settings
from ledger.models.ledger import Ledger
from ledger.models.records import Movement
from ledger.models.results import ImportResult, OperationResult
from ledger.services.storage import (
    CsvLedgerStorage,
    InMemoryLedgerStorage,
    LedgerStorageInterface,
    PathLike,
)

Outcome = Union[OperationResult, ImportResult]

logger = structlog.get_logger(__name__)


class LedgerNotLoadedError(Exception):
    """Raised when a session is used before load()."""
    pass


def appended_movements(previous: Ledger, current: Ledger) -> Optional[Sequence[Movement]]:
    """
    Movements added at the end of `previous`, if that is the only change.

    Returns None when accounts or categories changed, or when existing
    movements were edited, removed or reordered. The caller then has to
    rewrite the files instead of appending.
    """
    if current.accounts != previous.accounts or current.categories != previous.categories:
        return None
    old_count = len(previous.movements)
    if len(current.movements) <= old_count:
        return None
    if current.movements[:old_count] != previous.movements:
        return None
    return current.movements[old_count:]


def _counts(ledger: Ledger) -> dict[str, int]:
    return {
        "accounts": len(ledger.accounts),
        "movements": len(ledger.movements),
        "categories": len(ledger.categories),
    }


class LedgerSession:
    """
    Caller-owned handle on one data directory.

    Usage:
        session = LedgerSession("data/")
        await session.load()
        result = await session.apply(create_account, {"name": "Checking", ...})
        if result.success:
            ...

    If persisting fails after every retry, the OSError propagates and the
    session keeps its previous snapshot.
    """

    def __init__(
        self,
        directory: Optional[PathLike] = None,
        storage: Optional[LedgerStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        settings = get_settings()
        self._app_settings = app_settings or settings.app
        self._directory = Path(directory) if directory is not None else settings.storage.data_dir
        self._storage = storage or CsvLedgerStorage(settings.storage)
        self._audit_logger = audit_logger or AuditLogger()
        self._lock = asyncio.Lock()
        self._ledger: Optional[Ledger] = None

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def is_loaded(self) -> bool:
        return self._ledger is not None

    @property
    def ledger(self) -> Ledger:
        """The current snapshot."""
        if self._ledger is None:
            raise LedgerNotLoadedError(
                f"Ledger for {self._directory} has not been loaded; call load() first"
            )
        return self._ledger

    def snapshot(self) -> Ledger:
        return self.ledger

    async def load(self, correlation_id: Optional[UUID] = None) -> Ledger:
        """(Re)load the ledger from storage, replacing the current snapshot."""
        correlation_id = correlation_id or create_correlation_id()
        async with self._lock:
            ledger = await asyncio.to_thread(self._storage.load, self._directory)
            self._ledger = ledger

        await self._audit_logger.log_ledger_loaded(
            directory=str(self._directory),
            counts=_counts(ledger),
            correlation_id=correlation_id,
        )
        return ledger

    async def apply(
        self,
        operation: Callable[..., Outcome],
        *args: Any,
        **kwargs: Any,
    ) -> Outcome:
        """
        Run `operation(current_ledger, *args, **kwargs)` and persist on success.

        Returns whatever the operation returned (an OperationResult, or an
        ImportResult for bulk import). Nothing is written when the
        operation fails or hands back the same ledger it was given.

        Raises:
            LedgerNotLoadedError: If load() was never called
            OSError: If persisting failed on every attempt
        """
        name = getattr(operation, "__name__", repr(operation))
        correlation_id = create_correlation_id()

        async with self._lock:
            current = self.ledger
            try:
                outcome = operation(current, *args, **kwargs)
            except Exception as e:
                await self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"operation": name},
                    correlation_id=correlation_id,
                )
                raise

            result = outcome.result if isinstance(outcome, ImportResult) else outcome
            if not result.success:
                await self._audit_logger.log_operation_rejected(
                    operation=name,
                    failure_kind=result.failure.kind.value,
                    reason=result.failure.reason,
                    correlation_id=correlation_id,
                )
                return outcome

            updated = result.ledger
            changed = updated is not current
            if changed:
                await self._write(current, updated, correlation_id)
                self._ledger = updated

        await self._audit_logger.log_operation_succeeded(
            operation=name,
            changed=changed,
            correlation_id=correlation_id,
        )
        return outcome

    async def persist(self) -> None:
        """Rewrite every file from the current snapshot."""
        async with self._lock:
            await self._write(None, self.ledger, create_correlation_id())

    def _retrying(self) -> AsyncRetrying:
        app = self._app_settings
        return AsyncRetrying(
            stop=stop_after_attempt(app.persist_retry_attempts),
            wait=wait_exponential(
                multiplier=app.persist_retry_min_wait,
                min=app.persist_retry_min_wait,
                max=app.persist_retry_max_wait,
            ),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )

    async def _write(
        self,
        previous: Optional[Ledger],
        ledger: Ledger,
        correlation_id: UUID,
    ) -> None:
        """
        Write `ledger` to disk, retrying on OSError.

        Appends when only new movements were added; a retry after a failed
        append always does a full rewrite so rows are never doubled.
        """
        new_movements = appended_movements(previous, ledger) if previous is not None else None
        directory = str(self._directory)
        retrying = self._retrying()
        attempts = 0

        try:
            async for attempt in retrying:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    if new_movements and attempts == 1:
                        await asyncio.to_thread(
                            self._storage.append_movements,
                            ledger,
                            new_movements,
                            self._directory,
                        )
                    else:
                        await asyncio.to_thread(self._storage.persist, ledger, self._directory)
        except OSError as e:
            logger.error("ledger_persist_failed", directory=directory, attempts=attempts, error=str(e))
            await self._audit_logger.log_persist_failed(
                directory=directory,
                error_message=str(e),
                attempts=attempts,
                correlation_id=correlation_id,
            )
            raise

        if new_movements and attempts == 1:
            await self._audit_logger.log_movements_appended(
                directory=directory,
                movement_ids=[m.id for m in new_movements],
                correlation_id=correlation_id,
            )
        else:
            await self._audit_logger.log_ledger_persisted(
                directory=directory,
                counts=_counts(ledger),
                correlation_id=correlation_id,
            )


def create_session(
    directory: Optional[PathLike] = None,
    use_files: bool = True,
    audit_sink: Optional[AuditSink] = None,
) -> LedgerSession:
    """
    Factory function to create a ledger session.

    Args:
        directory: Data directory. Defaults to the configured data_dir.
        use_files: Set to False to keep everything in memory (testing).
        audit_sink: Optional callable receiving every audit event.
    """
    settings = get_settings()
    storage: LedgerStorageInterface = (
        CsvLedgerStorage(settings.storage)
        if use_files
        else InMemoryLedgerStorage(settings.storage)
    )
    return LedgerSession(
        directory=directory,
        storage=storage,
        audit_logger=AuditLogger(audit_sink),
        app_settings=settings.app,
    )
