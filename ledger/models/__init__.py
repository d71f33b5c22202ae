"""
Data Models Package

This package contains all Pydantic models used by the ledger engine.
All data flowing through the system must conform to these schemas.
"""

from ledger.models.records import (
    Account,
    AccountChanges,
    AccountInput,
    AccountKind,
    Category,
    CategoryChanges,
    CategoryInput,
    CategoryKind,
    Movement,
    MovementChanges,
    MovementInput,
    MovementKind,
    MovementSource,
)
from ledger.models.ledger import Ledger
from ledger.models.results import (
    FailureKind,
    ImportResult,
    ImportRowOutcome,
    ImportRowStatus,
    LedgerFailure,
    LedgerOperationError,
    OperationResult,
    ValidationIssue,
)
from ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Records
    "Account",
    "AccountKind",
    "Category",
    "CategoryKind",
    "Movement",
    "MovementKind",
    "MovementSource",
    # Inputs
    "AccountChanges",
    "AccountInput",
    "CategoryChanges",
    "CategoryInput",
    "MovementChanges",
    "MovementInput",
    # Aggregate
    "Ledger",
    # Results
    "FailureKind",
    "ImportResult",
    "ImportRowOutcome",
    "ImportRowStatus",
    "LedgerFailure",
    "LedgerOperationError",
    "OperationResult",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
