"""
Audit Models for Personal Ledger

Every load, every operation applied through a session, and every
persist is recorded as an AuditEvent. This provides:
1. Traceability of every mutation
2. Debugging information when a persist fails
3. Ability to reconstruct what happened to a data directory

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Storage
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_PERSISTED = "ledger_persisted"
    MOVEMENTS_APPENDED = "movements_appended"
    PERSIST_FAILED = "persist_failed"

    # Operations
    OPERATION_SUCCEEDED = "operation_succeeded"
    OPERATION_REJECTED = "operation_rejected"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'ledger', 'operation')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Id or name of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one apply-and-persist cycle)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.ledger_loaded(directory, counts, correlation_id)
        event = AuditEventBuilder.operation_rejected("delete_account", "conflict", reason, correlation_id)
    """

    @staticmethod
    def ledger_loaded(
        directory: str,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            entity_type="ledger",
            entity_id=directory,
            correlation_id=correlation_id,
            description=f"Ledger loaded from {directory}",
            details=dict(counts),
        )

    @staticmethod
    def ledger_persisted(
        directory: str,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_PERSISTED,
            entity_type="ledger",
            entity_id=directory,
            correlation_id=correlation_id,
            description=f"Ledger written to {directory}",
            details=dict(counts),
        )

    @staticmethod
    def movements_appended(
        directory: str,
        movement_ids: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MOVEMENTS_APPENDED,
            entity_type="ledger",
            entity_id=directory,
            correlation_id=correlation_id,
            description=f"Appended {len(movement_ids)} movements",
            details={"movement_ids": movement_ids},
        )

    @staticmethod
    def persist_failed(
        directory: str,
        error_message: str,
        attempts: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSIST_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            entity_id=directory,
            correlation_id=correlation_id,
            description=f"Persisting ledger failed after {attempts} attempt(s)",
            error_message=error_message,
            details={"attempts": attempts},
        )

    @staticmethod
    def operation_succeeded(
        operation: str,
        changed: bool,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_SUCCEEDED,
            entity_type="operation",
            entity_id=operation,
            correlation_id=correlation_id,
            description=f"Operation {operation} succeeded",
            details={"changed": changed},
        )

    @staticmethod
    def operation_rejected(
        operation: str,
        failure_kind: str,
        reason: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="operation",
            entity_id=operation,
            correlation_id=correlation_id,
            description=f"Operation {operation} rejected ({failure_kind})",
            error_code=failure_kind,
            error_message=reason,
            details={"failure_kind": failure_kind},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
