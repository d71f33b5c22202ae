"""
Transfer Coordination

A transfer is two movements: an outflow on the source account and an
inflow on the destination account, each pointing at the other through
`transfer_pair_id`. Both have kind "transfer" and amounts that negate
each other.

The functions here are the only way to create a pair, change its
amount, or turn one side back into an ordinary movement. Plain
movement updates refuse to touch the locked fields.
"""

import datetime as dt
from typing import Any, Optional, Union

from ledger.models.ledger import Ledger
from ledger.models.records import Movement, MovementKind, MovementSource
from ledger.models.results import FailureKind, OperationResult, ValidationIssue
from ledger.operations.common import utc_now_iso
from ledger.operations.ids import next_id
from ledger.validation import is_valid_date

UNLINK_KINDS = (MovementKind.INCOME.value, MovementKind.EXPENSE.value)


def _as_text(value: Any) -> Any:
    if isinstance(value, MovementKind):
        return value.value
    if isinstance(value, dt.date):
        return value.isoformat()
    return value


def _is_amount(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# QUERIES
# =============================================================================

def is_transfer(movement: Movement) -> bool:
    """True when the movement is one side of a transfer pair."""
    return movement.kind == MovementKind.TRANSFER.value and bool(movement.transfer_pair_id)


def get_transfer_pair(ledger: Ledger, movement: Movement) -> Optional[Movement]:
    """The other side of a transfer, or None."""
    if not movement.transfer_pair_id:
        return None
    return ledger.find_movement(movement.transfer_pair_id)


# =============================================================================
# OPERATIONS
# =============================================================================

def create_transfer(
    ledger: Ledger,
    from_account_id: str,
    to_account_id: str,
    amount: int,
    date: Union[str, dt.date],
    description: str = "",
    payee: str = "",
    notes: str = "",
    category_id: str = "",
) -> OperationResult:
    """
    Move `|amount|` minor units from one account to another.

    Creates the outflow (-|amount|) on `from_account_id` and the inflow
    (+|amount|) on `to_account_id`, cross-linked, and clears
    `reconciled` on both accounts.
    """
    date = _as_text(date)
    issues = []

    if from_account_id == to_account_id:
        issues.append(ValidationIssue(
            field="to_account_id",
            issue_type="invalid_value",
            message="Cannot transfer to the same account",
        ))
    if not _is_amount(amount):
        issues.append(ValidationIssue(
            field="amount",
            issue_type="invalid_type",
            message="Amount must be a number",
        ))
    elif amount == 0:
        issues.append(ValidationIssue(
            field="amount",
            issue_type="invalid_value",
            message="Transfer amount cannot be zero",
        ))
    if not is_valid_date(date):
        issues.append(ValidationIssue(
            field="date",
            issue_type="invalid_format",
            message="Date must be a valid date in YYYY-MM-DD format",
        ))
    if issues:
        return OperationResult.invalid(issues)

    for account_id in (from_account_id, to_account_id):
        if not ledger.has_account(account_id):
            return OperationResult.not_found("Account", account_id)
    if category_id and not ledger.has_category(category_id):
        return OperationResult.not_found("Category", category_id)

    out_id = next_id(ledger.movements)
    in_id = str(int(out_id) + 1)
    created_at = utc_now_iso()
    shared = dict(
        kind=MovementKind.TRANSFER.value,
        date=date,
        category_id=category_id,
        description=description.strip(),
        payee=payee.strip(),
        notes=notes.strip(),
        source=MovementSource.MANUAL.value,
        created_at=created_at,
    )
    outflow = Movement(
        id=out_id,
        account_id=from_account_id,
        transfer_pair_id=in_id,
        amount=-abs(amount),
        **shared,
    )
    inflow = Movement(
        id=in_id,
        account_id=to_account_id,
        transfer_pair_id=out_id,
        amount=abs(amount),
        **shared,
    )

    return OperationResult.ok(
        ledger.clear_reconciled(from_account_id, to_account_id)
        .with_movements((*ledger.movements, outflow, inflow))
    )


def sync_transfer_amount(ledger: Ledger, movement_id: str, new_amount: int) -> OperationResult:
    """
    Change a transfer's amount, keeping both sides in sync.

    The target movement gets `new_amount` and its pair gets the negation.

    Failure kinds:
    - REFERENCE: movement not found, or its pair is missing
    - VALIDATION: not a transfer, or a zero/non-integer amount
    - CORRUPTION: the pair exists but is not a transfer pointing back
    """
    movement = ledger.find_movement(movement_id)
    if movement is None:
        return OperationResult.not_found("Movement", movement_id)

    if not is_transfer(movement):
        return OperationResult.fail(
            FailureKind.VALIDATION,
            f"Movement {movement_id} is not a transfer",
            movement_id=movement_id,
        )
    if not _is_amount(new_amount) or new_amount == 0:
        return OperationResult.fail(
            FailureKind.VALIDATION,
            "Transfer amount must be a non-zero number",
            movement_id=movement_id,
        )

    pair = get_transfer_pair(ledger, movement)
    if pair is None:
        return OperationResult.fail(
            FailureKind.REFERENCE,
            f"Transfer pair not found: {movement.transfer_pair_id}",
            movement_id=movement_id,
            pair_id=movement.transfer_pair_id,
        )
    if pair.kind != MovementKind.TRANSFER.value or pair.transfer_pair_id != movement.id:
        return OperationResult.fail(
            FailureKind.CORRUPTION,
            f"Transfer pair {pair.id} of movement {movement_id} is corrupted: "
            f"kind={pair.kind!r}, transfer_pair_id={pair.transfer_pair_id!r}",
            movement_id=movement_id,
            pair_id=pair.id,
        )

    amounts = {movement.id: new_amount, pair.id: -new_amount}
    movements = tuple(
        m.model_copy(update={"amount": amounts[m.id]}) if m.id in amounts else m
        for m in ledger.movements
    )
    return OperationResult.ok(
        ledger.clear_reconciled(movement.account_id, pair.account_id)
        .with_movements(movements)
    )


def unlink_transfer(
    ledger: Ledger,
    movement_id: str,
    new_kind: Union[str, MovementKind],
) -> OperationResult:
    """
    Turn one side of a transfer into an ordinary income or expense.

    The other side is deleted. Clears `reconciled` on both accounts.
    """
    new_kind = _as_text(new_kind)
    if new_kind not in UNLINK_KINDS:
        return OperationResult.invalid([ValidationIssue(
            field="new_kind",
            issue_type="invalid_value",
            message=f"New kind must be one of: {', '.join(UNLINK_KINDS)}",
        )])

    movement = ledger.find_movement(movement_id)
    if movement is None:
        return OperationResult.not_found("Movement", movement_id)
    if not movement.transfer_pair_id:
        return OperationResult.fail(
            FailureKind.VALIDATION,
            f"Movement {movement_id} is not a transfer",
            movement_id=movement_id,
        )

    pair = get_transfer_pair(ledger, movement)
    affected = [movement.account_id]
    if pair is not None:
        affected.append(pair.account_id)

    plain = movement.model_copy(update={"kind": new_kind, "transfer_pair_id": ""})
    movements = tuple(
        plain if m.id == movement_id else m
        for m in ledger.movements
        if pair is None or m.id != pair.id
    )
    return OperationResult.ok(ledger.clear_reconciled(*affected).with_movements(movements))
