"""
Tests for Personal Ledger models: records, inputs, the Ledger aggregate,
operation results and audit events.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from ledger.models import (
    Account,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    FailureKind,
    ImportResult,
    ImportRowOutcome,
    ImportRowStatus,
    Ledger,
    LedgerOperationError,
    Movement,
    MovementInput,
    MovementKind,
    OperationResult,
    ValidationIssue,
)


class TestRecords:
    """Tests for record and input models."""

    def test_records_are_frozen(self):
        account = Account(id="1", name="Cash")
        with pytest.raises(ValueError):
            account.name = "Other"

    def test_input_accepts_enums_and_dates(self):
        data = MovementInput(
            kind=MovementKind.EXPENSE,
            account_id="1",
            date=date(2024, 1, 5),
            amount=-100,
        )
        assert data.kind == "expense"
        assert data.date == "2024-01-05"

    def test_input_strips_whitespace(self):
        data = MovementInput(description="  Coffee  ", payee=" Cafe ")
        assert data.description == "Coffee"
        assert data.payee == "Cafe"

    def test_input_rejects_fractional_amount(self):
        with pytest.raises(ValueError):
            MovementInput(amount="12.5")


class TestLedger:
    """Tests for the immutable aggregate."""

    def test_with_movements_shares_other_collections(self):
        ledger = Ledger(accounts=(Account(id="1"),))
        updated = ledger.with_movements([Movement(id="1", account_id="1")])

        assert updated.accounts is ledger.accounts
        assert updated.categories is ledger.categories
        assert ledger.movements == ()

    def test_clear_reconciled_returns_self_when_nothing_to_clear(self):
        ledger = Ledger(accounts=(Account(id="1"),))
        assert ledger.clear_reconciled("1") is ledger

    def test_clear_reconciled(self):
        ledger = Ledger(accounts=(
            Account(id="1", reconciled="2024-01-31"),
            Account(id="2", reconciled="2024-01-31"),
        ))
        cleared = ledger.clear_reconciled("1")

        assert cleared.find_account("1").reconciled == ""
        assert cleared.find_account("2").reconciled == "2024-01-31"
        assert ledger.find_account("1").reconciled == "2024-01-31"

    def test_lookups(self):
        ledger = Ledger(accounts=(Account(id="1", name="Cash"),))
        assert ledger.find_account("1").name == "Cash"
        assert ledger.find_account("2") is None
        assert ledger.has_account("1")
        assert not ledger.has_category("1")


class TestOperationResult:
    """Tests for success/failure results."""

    def test_ok_keeps_ledger_identity(self):
        ledger = Ledger()
        assert OperationResult.ok(ledger).ledger is ledger

    def test_unwrap_success(self):
        ledger = Ledger()
        assert OperationResult.ok(ledger).unwrap() is ledger

    def test_unwrap_failure_raises(self):
        result = OperationResult.fail(FailureKind.CONFLICT, "blocked", account_id="1")

        with pytest.raises(LedgerOperationError, match="conflict: blocked") as exc_info:
            result.unwrap()
        assert exc_info.value.failure.details == {"account_id": "1"}

    def test_invalid_lists_every_issue(self):
        result = OperationResult.invalid([
            ValidationIssue(field="name", issue_type="missing", message="Name is required"),
            ValidationIssue(field="date", issue_type="missing", message="Date is required"),
        ])

        assert result.failure_kind == FailureKind.VALIDATION
        assert result.error_message == "name: Name is required; date: Date is required"
        assert len(result.failure.issues) == 2

    def test_not_found_is_reference_failure(self):
        result = OperationResult.not_found("Account", "7")
        assert result.failure_kind == FailureKind.REFERENCE
        assert result.error_message == "Account not found: 7"

    def test_issue_severity_pattern(self):
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


class TestImportResult:
    """Tests for the bulk import summary."""

    def test_counts(self):
        result = ImportResult(
            result=OperationResult.ok(Ledger()),
            rows=[
                ImportRowOutcome(index=0, status=ImportRowStatus.IMPORTED, movement_id="1"),
                ImportRowOutcome(index=1, status=ImportRowStatus.IMPORTED_UNCATEGORIZED, movement_id="2"),
                ImportRowOutcome(index=2, status=ImportRowStatus.DUPLICATE),
                ImportRowOutcome(index=3, status=ImportRowStatus.DUPLICATE),
            ],
        )
        assert result.imported_count == 2
        assert result.count(ImportRowStatus.DUPLICATE) == 2
        assert result.count(ImportRowStatus.INVALID) == 0


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            description="Ledger loaded",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.utcoffset() == timedelta(0)
        assert event.timestamp <= datetime.now(timezone.utc)

    def test_to_log_dict(self):
        event = AuditEventBuilder.movements_appended("data", ["4", "5"])
        log_dict = event.to_log_dict()

        assert log_dict["event_type"] == "movements_appended"
        assert log_dict["details"] == {"movement_ids": ["4", "5"]}
        assert log_dict["correlation_id"] is None

    def test_builder_severities(self):
        assert AuditEventBuilder.persist_failed("data", "disk full", 3).severity == AuditSeverity.ERROR
        rejected = AuditEventBuilder.operation_rejected("delete_account", "conflict", "has movements")
        assert rejected.severity == AuditSeverity.WARNING
        assert rejected.error_code == "conflict"
        assert AuditEventBuilder.operation_succeeded("create_account", True).details == {"changed": True}
