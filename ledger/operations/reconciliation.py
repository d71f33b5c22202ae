"""
Reconciliation Engine

An account is in one of three states:

- RECONCILED: `reconciled` holds the date the user confirmed the balance
- BALANCED: not reconciled, but the reported balance equals the working
  balance (the sum of the account's movement amounts)
- DISCREPANCY: not reconciled and the two differ

Every change to an account's movements drops it out of RECONCILED; the
movement and transfer operations take care of that. reconcile() is the
only way in.
"""

import datetime as dt
from enum import Enum
from typing import Any, Optional, Union

from ledger.models.ledger import Ledger
from ledger.models.records import MovementInput, MovementKind, MovementSource
from ledger.models.results import FailureKind, OperationResult
from ledger.operations.common import replace_where
from ledger.operations.movements import create_movement

BALANCE_ADJUSTMENT_DESCRIPTION = "Balance adjustment"


class ReconciliationState(str, Enum):
    """Balance status of an account."""
    RECONCILED = "reconciled"
    BALANCED = "balanced"
    DISCREPANCY = "discrepancy"


def working_balance(ledger: Ledger, account_id: str) -> int:
    """Sum of all movement amounts on the account, in minor units."""
    return sum(m.amount for m in ledger.movements if m.account_id == account_id)


def balance_discrepancy(ledger: Ledger, account_id: str, reported_balance: int) -> int:
    """reported - working; positive means money is missing from the ledger."""
    return reported_balance - working_balance(ledger, account_id)


def reconciliation_state(ledger: Ledger, account_id: str) -> Optional[ReconciliationState]:
    """Current state of an account, or None if it does not exist."""
    account = ledger.find_account(account_id)
    if account is None:
        return None
    if account.reconciled:
        return ReconciliationState.RECONCILED
    if account.balance == working_balance(ledger, account_id):
        return ReconciliationState.BALANCED
    return ReconciliationState.DISCREPANCY


def _as_date_text(value: Union[str, dt.date, None]) -> str:
    if value is None:
        return dt.date.today().isoformat()
    if isinstance(value, dt.date):
        return value.isoformat()
    return value


def _check_amount(reported_balance: Any) -> Optional[OperationResult]:
    if isinstance(reported_balance, int) and not isinstance(reported_balance, bool):
        return None
    return OperationResult.fail(
        FailureKind.VALIDATION,
        "Reported balance must be a number",
    )


def reconcile(
    ledger: Ledger,
    account_id: str,
    reported_balance: int,
    today: Union[str, dt.date, None] = None,
) -> OperationResult:
    """
    Confirm an account's balance.

    Fails with CONFLICT (details["discrepancy"]) when the working balance
    does not match. On success stores `reported_balance` as the account
    balance and sets `reconciled` to today's date.
    """
    invalid = _check_amount(reported_balance)
    if invalid:
        return invalid

    if not ledger.has_account(account_id):
        return OperationResult.not_found("Account", account_id)

    working = working_balance(ledger, account_id)
    discrepancy = reported_balance - working
    if discrepancy != 0:
        return OperationResult.fail(
            FailureKind.CONFLICT,
            f"Balance discrepancy of {discrepancy} exists. "
            f"Reported: {reported_balance}, Working: {working}. "
            f"Create a balance adjustment first, or correct movements.",
            account_id=account_id,
            discrepancy=discrepancy,
            reported_balance=reported_balance,
            working_balance=working,
        )

    return OperationResult.ok(ledger.with_accounts(replace_where(
        ledger.accounts,
        lambda a: a.id == account_id,
        {"balance": reported_balance, "reconciled": _as_date_text(today)},
    )))


def create_balance_adjustment(
    ledger: Ledger,
    account_id: str,
    reported_balance: int,
    date: Union[str, dt.date, None] = None,
) -> OperationResult:
    """
    Add one movement that closes the gap to `reported_balance`.

    Income for a positive discrepancy, expense for a negative one, tagged
    with source "reconciliation". Fails with CONFLICT when there is
    nothing to adjust.
    """
    invalid = _check_amount(reported_balance)
    if invalid:
        return invalid

    if not ledger.has_account(account_id):
        return OperationResult.not_found("Account", account_id)

    discrepancy = balance_discrepancy(ledger, account_id, reported_balance)
    if discrepancy == 0:
        return OperationResult.fail(
            FailureKind.CONFLICT,
            "No discrepancy to adjust",
            account_id=account_id,
            discrepancy=0,
        )

    kind = MovementKind.INCOME if discrepancy > 0 else MovementKind.EXPENSE
    return create_movement(ledger, MovementInput(
        kind=kind,
        account_id=account_id,
        date=_as_date_text(date),
        description=BALANCE_ADJUSTMENT_DESCRIPTION,
        amount=discrepancy,
        source=MovementSource.RECONCILIATION,
    ))
