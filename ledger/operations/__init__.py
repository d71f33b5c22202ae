"""
Ledger Operations Package

Every operation is a pure function (Ledger, ...) -> OperationResult.
Bulk import returns an ImportResult that wraps the OperationResult.
"""

from ledger.operations.accounts import (
    create_account,
    delete_account,
    hide_account,
    unhide_account,
    update_account,
)
from ledger.operations.categories import (
    create_category,
    delete_category,
    hide_category,
    unhide_category,
    update_category,
)
from ledger.operations.ids import next_id
from ledger.operations.movements import (
    bulk_import_movements,
    create_movement,
    deduplication_key,
    delete_movement,
    update_movement,
)
from ledger.operations.reconciliation import (
    BALANCE_ADJUSTMENT_DESCRIPTION,
    ReconciliationState,
    balance_discrepancy,
    create_balance_adjustment,
    reconcile,
    reconciliation_state,
    working_balance,
)
from ledger.operations.transfers import (
    create_transfer,
    get_transfer_pair,
    is_transfer,
    sync_transfer_amount,
    unlink_transfer,
)

__all__ = [
    # Accounts
    "create_account",
    "delete_account",
    "hide_account",
    "unhide_account",
    "update_account",
    # Movements
    "bulk_import_movements",
    "create_movement",
    "deduplication_key",
    "delete_movement",
    "update_movement",
    # Categories
    "create_category",
    "delete_category",
    "hide_category",
    "unhide_category",
    "update_category",
    # Transfers
    "create_transfer",
    "get_transfer_pair",
    "is_transfer",
    "sync_transfer_amount",
    "unlink_transfer",
    # Reconciliation
    "BALANCE_ADJUSTMENT_DESCRIPTION",
    "ReconciliationState",
    "balance_discrepancy",
    "create_balance_adjustment",
    "reconcile",
    "reconciliation_state",
    "working_balance",
    # Ids
    "next_id",
]
