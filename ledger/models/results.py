"""
Operation Result Models

Every fallible ledger operation returns an OperationResult instead of
raising. A failure carries a human-readable reason plus a FailureKind so
the caller can tell what to do next:

- VALIDATION: bad input, re-prompt
- REFERENCE: an account/category/movement id does not resolve
- CONFLICT: blocked by dependents or by a balance discrepancy
- CORRUPTION: stored data breaks an invariant and needs repair
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from ledger.models.ledger import Ledger


class FailureKind(str, Enum):
    """Category of an operation failure."""
    VALIDATION = "validation"
    REFERENCE = "reference"
    CONFLICT = "conflict"
    CORRUPTION = "corruption"


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class LedgerFailure(BaseModel):
    """Why an operation was rejected."""

    kind: FailureKind
    reason: str = Field(
        ...,
        description="Human-readable explanation"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="Field-level issues (validation failures only)"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Structured extras, e.g. {'discrepancy': -1250}"
    )


class LedgerOperationError(Exception):
    """Raised by OperationResult.unwrap() when the operation failed."""

    def __init__(self, failure: LedgerFailure):
        self.failure = failure
        super().__init__(f"{failure.kind.value}: {failure.reason}")


class OperationResult(BaseModel):
    """
    Outcome of a ledger operation.

    Exactly one of `ledger` (on success) or `failure` is set.
    """

    success: bool
    ledger: Optional[Ledger] = None
    failure: Optional[LedgerFailure] = None

    @classmethod
    def ok(cls, ledger: Ledger) -> "OperationResult":
        return cls(success=True, ledger=ledger)

    @classmethod
    def fail(
        cls,
        kind: FailureKind,
        reason: str,
        issues: Optional[list[ValidationIssue]] = None,
        **details: Any,
    ) -> "OperationResult":
        return cls(
            success=False,
            failure=LedgerFailure(
                kind=kind,
                reason=reason,
                issues=issues or [],
                details=details,
            ),
        )

    @classmethod
    def invalid(cls, issues: list[ValidationIssue]) -> "OperationResult":
        """Validation failure whose reason lists every issue."""
        reason = "; ".join(f"{issue.field}: {issue.message}" for issue in issues)
        return cls.fail(FailureKind.VALIDATION, reason, issues=issues)

    @classmethod
    def not_found(cls, entity: str, entity_id: str) -> "OperationResult":
        return cls.fail(
            FailureKind.REFERENCE,
            f"{entity} not found: {entity_id}",
            entity=entity.lower(),
            entity_id=entity_id,
        )

    @property
    def failure_kind(self) -> Optional[FailureKind]:
        return self.failure.kind if self.failure else None

    @property
    def error_message(self) -> Optional[str]:
        return self.failure.reason if self.failure else None

    def unwrap(self) -> Ledger:
        """Return the new ledger, or raise LedgerOperationError."""
        if not self.success or self.ledger is None:
            raise LedgerOperationError(self.failure)
        return self.ledger


# =============================================================================
# BULK IMPORT
# =============================================================================

class ImportRowStatus(str, Enum):
    """What happened to one candidate row of a bulk import."""
    IMPORTED = "imported"
    IMPORTED_UNCATEGORIZED = "imported_uncategorized"  # category did not resolve
    DUPLICATE = "duplicate"
    BEFORE_RECONCILED = "before_reconciled"
    INVALID = "invalid"


class ImportRowOutcome(BaseModel):
    """Per-row result of a bulk import."""

    index: int = Field(
        ...,
        ge=0,
        description="Position of the candidate in the submitted batch"
    )
    status: ImportRowStatus
    movement_id: Optional[str] = Field(
        default=None,
        description="Id assigned to the new movement, if imported"
    )
    reason: str = ""


class ImportResult(BaseModel):
    """Outcome of a bulk import: the operation result plus per-row detail."""

    result: OperationResult
    rows: list[ImportRowOutcome] = Field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return sum(
            1 for row in self.rows
            if row.status in (ImportRowStatus.IMPORTED, ImportRowStatus.IMPORTED_UNCATEGORIZED)
        )

    def count(self, status: ImportRowStatus) -> int:
        return sum(1 for row in self.rows if row.status == status)
