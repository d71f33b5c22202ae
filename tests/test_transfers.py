"""Tests for transfer pairs."""

from datetime import date

from ledger.models import FailureKind, Movement, MovementKind
from ledger.operations import (
    create_transfer,
    get_transfer_pair,
    is_transfer,
    sync_transfer_amount,
    unlink_transfer,
)


class TestCreateTransfer:
    """Tests for create_transfer."""

    def test_creates_linked_pair(self, ledger):
        updated = create_transfer(ledger, "1", "2", 5000, "2024-02-01", description="To savings").unwrap()

        outflow, inflow = updated.movements
        assert (outflow.account_id, outflow.amount) == ("1", -5000)
        assert (inflow.account_id, inflow.amount) == ("2", 5000)
        assert outflow.transfer_pair_id == inflow.id
        assert inflow.transfer_pair_id == outflow.id
        assert outflow.kind == inflow.kind == "transfer"
        assert outflow.description == "To savings"

    def test_amount_sign_is_normalized(self, ledger):
        updated = create_transfer(ledger, "1", "2", -750, date(2024, 2, 1)).unwrap()
        assert [m.amount for m in updated.movements] == [-750, 750]
        assert updated.movements[0].date == "2024-02-01"

    def test_clears_both_accounts(self, ledger, mark_reconciled):
        ledger = mark_reconciled(ledger, "1", "2")
        updated = create_transfer(ledger, "1", "2", 100, "2024-02-01").unwrap()
        assert [a.reconciled for a in updated.accounts] == ["", ""]

    def test_rejections(self, ledger):
        assert create_transfer(ledger, "1", "1", 100, "2024-02-01").failure_kind == FailureKind.VALIDATION
        assert create_transfer(ledger, "1", "2", 0, "2024-02-01").failure_kind == FailureKind.VALIDATION
        assert create_transfer(ledger, "1", "2", 100, "Feb 1").failure_kind == FailureKind.VALIDATION
        assert create_transfer(ledger, "1", "9", 100, "2024-02-01").failure_kind == FailureKind.REFERENCE
        assert create_transfer(ledger, "9", "1", 100, "2024-02-01").failure_kind == FailureKind.REFERENCE

    def test_helpers(self, ledger):
        updated = create_transfer(ledger, "1", "2", 100, "2024-02-01").unwrap()
        outflow, inflow = updated.movements

        assert is_transfer(outflow)
        assert get_transfer_pair(updated, outflow) == inflow
        assert not is_transfer(Movement(id="9", kind="transfer"))
        assert get_transfer_pair(updated, Movement(id="9")) is None


class TestSyncTransferAmount:
    """Tests for sync_transfer_amount."""

    def test_updates_both_sides(self, ledger, mark_reconciled):
        ledger = create_transfer(ledger, "1", "2", 5000, "2024-02-01").unwrap()
        ledger = mark_reconciled(ledger, "1", "2")

        updated = sync_transfer_amount(ledger, "1", -6000).unwrap()

        assert updated.find_movement("1").amount == -6000
        assert updated.find_movement("2").amount == 6000
        assert [a.reconciled for a in updated.accounts] == ["", ""]

    def test_zero_rejected(self, ledger):
        ledger = create_transfer(ledger, "1", "2", 5000, "2024-02-01").unwrap()
        assert sync_transfer_amount(ledger, "1", 0).failure_kind == FailureKind.VALIDATION

    def test_not_found_vs_not_transfer(self, ledger):
        plain = Movement(id="1", kind="expense", account_id="1", date="2024-02-01", amount=-5)
        ledger = ledger.with_movements([plain])

        assert sync_transfer_amount(ledger, "7", 10).failure_kind == FailureKind.REFERENCE
        assert sync_transfer_amount(ledger, "1", 10).failure_kind == FailureKind.VALIDATION

    def test_missing_pair(self, ledger):
        orphan = Movement(id="1", kind="transfer", account_id="1", transfer_pair_id="2", amount=-5)
        result = sync_transfer_amount(ledger.with_movements([orphan]), "1", -10)

        assert result.failure_kind == FailureKind.REFERENCE
        assert result.failure.details["pair_id"] == "2"

    def test_corrupted_pair(self, ledger):
        """A pair that exists but is not a transfer is corruption, not 'not found'."""
        movements = [
            Movement(id="1", kind="transfer", account_id="1", transfer_pair_id="2", amount=-5),
            Movement(id="2", kind="expense", account_id="2", transfer_pair_id="1", amount=5),
        ]
        result = sync_transfer_amount(ledger.with_movements(movements), "1", -10)

        assert result.failure_kind == FailureKind.CORRUPTION


class TestUnlinkTransfer:
    """Tests for unlink_transfer."""

    def test_converts_and_deletes_pair(self, ledger, mark_reconciled):
        ledger = create_transfer(ledger, "1", "2", 5000, "2024-02-01").unwrap()
        ledger = mark_reconciled(ledger, "1", "2")

        updated = unlink_transfer(ledger, "1", MovementKind.EXPENSE).unwrap()

        [movement] = updated.movements
        assert movement.id == "1"
        assert movement.kind == "expense"
        assert movement.transfer_pair_id == ""
        assert movement.amount == -5000
        assert [a.reconciled for a in updated.accounts] == ["", ""]

    def test_new_kind_must_be_income_or_expense(self, ledger):
        ledger = create_transfer(ledger, "1", "2", 5000, "2024-02-01").unwrap()
        assert unlink_transfer(ledger, "1", "transfer").failure_kind == FailureKind.VALIDATION

    def test_not_a_transfer(self, ledger):
        plain = Movement(id="1", kind="income", account_id="1", date="2024-02-01", amount=5)
        assert unlink_transfer(ledger.with_movements([plain]), "1", "expense").failure_kind == FailureKind.VALIDATION
        assert unlink_transfer(ledger, "1", "expense").failure_kind == FailureKind.REFERENCE
