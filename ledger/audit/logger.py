"""
Audit Logger

DESIGN DECISION: Every load, every operation applied through a session,
and every persist is logged. This provides:
1. Complete traceability of ledger mutations
2. Debugging capability when a persist fails

The audit logger:
- Is async so it can sit on the session's async path
- Gracefully handles failures (doesn't break the session if a sink fails)
- Supports correlation IDs to trace one apply-and-persist cycle
"""

import logging
import sys
from typing import Any, Callable, Optional
from uuid import UUID, uuid4

import structlog

from ledger.config import AppSettings, get_settings
from ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity

AuditSink = Callable[[AuditEvent], Any]


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """
    Configure structlog on top of the standard logging module.

    Call once at startup. JSON output unless `json_logs` is off, in
    which case a human-readable console renderer is used.
    """
    settings = settings or get_settings().app
    level = getattr(logging, settings.log_level, logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_logs
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events to:
    1. The structured log (always)
    2. An optional sink, e.g. a list's append or an event store
    """

    def __init__(self, sink: Optional[AuditSink] = None):
        """
        Initialize audit logger.

        Args:
            sink: Called with every event after it is logged.
                  If None, only logs locally.
        """
        self._sink = sink
        self._logger = structlog.get_logger("ledger.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the sink raised, True otherwise.
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._sink is not None:
            try:
                self._sink(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_ledger_loaded(
        self,
        directory: str,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.ledger_loaded(
            directory=directory,
            counts=counts,
            correlation_id=correlation_id,
        ))

    async def log_ledger_persisted(
        self,
        directory: str,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.ledger_persisted(
            directory=directory,
            counts=counts,
            correlation_id=correlation_id,
        ))

    async def log_movements_appended(
        self,
        directory: str,
        movement_ids: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.movements_appended(
            directory=directory,
            movement_ids=movement_ids,
            correlation_id=correlation_id,
        ))

    async def log_persist_failed(
        self,
        directory: str,
        error_message: str,
        attempts: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.persist_failed(
            directory=directory,
            error_message=error_message,
            attempts=attempts,
            correlation_id=correlation_id,
        ))

    async def log_operation_succeeded(
        self,
        operation: str,
        changed: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.operation_succeeded(
            operation=operation,
            changed=changed,
            correlation_id=correlation_id,
        ))

    async def log_operation_rejected(
        self,
        operation: str,
        failure_kind: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.operation_rejected(
            operation=operation,
            failure_kind=failure_kind,
            reason=reason,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    The session creates one per apply() and passes it to every event
    that cycle produces.
    """
    return uuid4()
