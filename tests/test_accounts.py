"""Tests for account operations."""

from ledger.models import Account, AccountInput, AccountKind, FailureKind, Ledger
from ledger.operations import (
    create_account,
    create_movement,
    delete_account,
    hide_account,
    unhide_account,
    update_account,
)


class TestCreateAccount:
    """Tests for create_account."""

    def test_assigns_ids_and_system_fields(self):
        first = create_account(Ledger(), {"name": "Cash", "kind": "cash", "currency": "usd"}).unwrap()
        second = create_account(first, AccountInput(name="Card", kind=AccountKind.CREDIT_CARD, currency="EUR")).unwrap()

        account = second.find_account("1")
        assert account.currency == "USD"
        assert account.hidden is False
        assert account.reconciled == ""
        assert account.created_at.endswith("Z")
        assert second.find_account("2").kind == "credit_card"

    def test_next_id_ignores_non_numeric_ids(self):
        ledger = Ledger(accounts=(Account(id="legacy"), Account(id="7"), Account(id="3")))
        updated = create_account(ledger, {"name": "Cash", "kind": "cash", "currency": "USD"}).unwrap()
        assert updated.accounts[-1].id == "8"

    def test_reports_every_invalid_field(self):
        result = create_account(Ledger(), {"name": "", "kind": "mattress", "currency": ""})

        assert result.failure_kind == FailureKind.VALIDATION
        assert [i.field for i in result.failure.issues] == ["name", "kind", "currency"]

    def test_non_numeric_balance_is_validation_failure(self):
        result = create_account(Ledger(), {"name": "Cash", "kind": "cash", "currency": "USD", "balance": "lots"})

        assert not result.success
        assert result.failure_kind == FailureKind.VALIDATION
        assert result.failure.issues[0].field == "balance"

    def test_input_ledger_untouched(self):
        ledger = Ledger()
        create_account(ledger, {"name": "Cash", "kind": "cash", "currency": "USD"})
        assert ledger.accounts == ()


class TestUpdateAccount:
    """Tests for update_account."""

    def test_merges_changes(self, ledger):
        updated = update_account(ledger, "1", {"name": "Main checking", "institution": "Credit Union"}).unwrap()

        account = updated.find_account("1")
        assert account.name == "Main checking"
        assert account.institution == "Credit Union"
        assert account.kind == "checking"
        assert updated.categories is ledger.categories

    def test_merged_record_is_validated(self, ledger):
        result = update_account(ledger, "1", {"kind": "vault"})
        assert result.failure_kind == FailureKind.VALIDATION

    def test_unknown_account(self, ledger):
        result = update_account(ledger, "42", {"name": "x"})
        assert result.failure_kind == FailureKind.REFERENCE
        assert result.error_message == "Account not found: 42"


class TestHideAccount:
    """Tests for soft delete."""

    def test_hide_and_unhide(self, ledger):
        hidden = hide_account(ledger, "1").unwrap()
        assert hidden.find_account("1").hidden is True

        shown = unhide_account(hidden, "1").unwrap()
        assert shown.find_account("1").hidden is False

    def test_hide_keeps_reconciled(self, ledger, mark_reconciled):
        ledger = mark_reconciled(ledger, "1")
        assert hide_account(ledger, "1").unwrap().find_account("1").reconciled == "2024-01-31"

    def test_hide_unknown(self, ledger):
        assert hide_account(ledger, "9").failure_kind == FailureKind.REFERENCE


class TestDeleteAccount:
    """Tests for hard delete."""

    def test_delete_unused_account(self, ledger):
        updated = delete_account(ledger, "2").unwrap()
        assert [a.id for a in updated.accounts] == ["1"]

    def test_blocked_by_movements(self, ledger):
        """Deleting an account with movements is a conflict and changes nothing."""
        ledger = create_movement(
            ledger, {"kind": "expense", "account_id": "1", "date": "2024-01-10", "amount": -500}
        ).unwrap()
        snapshot = ledger.model_copy(deep=True)

        result = delete_account(ledger, "1")

        assert result.failure_kind == FailureKind.CONFLICT
        assert result.failure.details["movement_count"] == 1
        assert "Hide the account instead" in result.error_message
        assert ledger == snapshot

    def test_delete_unknown(self, ledger):
        assert delete_account(ledger, "9").failure_kind == FailureKind.REFERENCE
