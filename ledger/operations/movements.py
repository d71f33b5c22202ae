"""
Movement Operations

Pure functions: (Ledger, input) -> OperationResult.

Integrity rules enforced here:
- a movement's account must exist; its category must exist or be ""
- transfer movements are only created, re-amounted and converted through
  ledger.operations.transfers, so a pair can never drift apart
- deleting one side of a transfer deletes the other side too
- every change to an account's movements clears its `reconciled` date
"""

from typing import Any, Sequence, Union

from ledger.models.ledger import Ledger
from ledger.models.records import (
    Movement,
    MovementChanges,
    MovementInput,
    MovementKind,
    MovementSource,
)
from ledger.models.results import (
    FailureKind,
    ImportResult,
    ImportRowOutcome,
    ImportRowStatus,
    OperationResult,
    ValidationIssue,
)
from ledger.operations.common import coerce_input, utc_now_iso
from ledger.operations.ids import next_id
from ledger.validation import validate_movement

# Fields that must move in lockstep with the other side of a transfer
TRANSFER_LOCKED_FIELDS = {
    "kind": "Cannot change kind on a transfer movement; use unlink_transfer to convert it",
    "amount": "Cannot change amount on a transfer movement; use sync_transfer_amount to keep the pair in sync",
    "account_id": "Cannot change account on a transfer movement; use unlink_transfer first",
}


def deduplication_key(movement: Union[Movement, MovementInput]) -> str:
    """Bulk-import identity of a movement: date|accountId|amount|description."""
    return f"{movement.date}|{movement.account_id}|{movement.amount}|{movement.description}"


def _no_bare_transfers(movement: Movement) -> list[ValidationIssue]:
    if movement.kind == MovementKind.TRANSFER.value:
        return [ValidationIssue(
            field="kind",
            issue_type="invalid_value",
            message="Transfers are created in pairs; use create_transfer",
        )]
    return []


def _build(data: MovementInput, movement_id: str, default_source: MovementSource) -> Movement:
    return Movement(
        id=movement_id,
        kind=data.kind,
        account_id=data.account_id,
        date=data.date,
        category_id=data.category_id,
        description=data.description,
        payee=data.payee,
        transfer_pair_id="",
        amount=data.amount,
        notes=data.notes,
        source=data.source or default_source.value,
        created_at=utc_now_iso(),
    )


# =============================================================================
# CRUD
# =============================================================================

def create_movement(
    ledger: Ledger,
    data: Union[MovementInput, dict[str, Any]],
) -> OperationResult:
    """
    Create a single income or expense movement.

    Defaults `source` to "manual" and clears `reconciled` on the account.
    """
    data = coerce_input(MovementInput, data)
    if isinstance(data, OperationResult):
        return data

    movement = _build(data, next_id(ledger.movements), MovementSource.MANUAL)

    issues = validate_movement(movement) + _no_bare_transfers(movement)
    if issues:
        return OperationResult.invalid(issues)

    if not ledger.has_account(movement.account_id):
        return OperationResult.not_found("Account", movement.account_id)
    if movement.category_id and not ledger.has_category(movement.category_id):
        return OperationResult.not_found("Category", movement.category_id)

    return OperationResult.ok(
        ledger.clear_reconciled(movement.account_id)
        .with_movements((*ledger.movements, movement))
    )


def update_movement(
    ledger: Ledger,
    movement_id: str,
    changes: Union[MovementChanges, dict[str, Any]],
) -> OperationResult:
    """
    Apply a partial update to a movement.

    The merged record is re-validated and changed references re-checked.
    On a transfer movement, kind, amount and account are locked.
    Clears `reconciled` on the old and the new owning account.
    """
    existing = ledger.find_movement(movement_id)
    if existing is None:
        return OperationResult.not_found("Movement", movement_id)

    changes = coerce_input(MovementChanges, changes)
    if isinstance(changes, OperationResult):
        return changes

    update = changes.model_dump(exclude_none=True)

    if existing.transfer_pair_id:
        for field, message in TRANSFER_LOCKED_FIELDS.items():
            if field in update:
                return OperationResult.fail(
                    FailureKind.CONFLICT,
                    message,
                    movement_id=movement_id,
                    field=field,
                )

    updated = existing.model_copy(update=update)

    issues = validate_movement(updated)
    if not existing.transfer_pair_id:
        issues += _no_bare_transfers(updated)
    if issues:
        return OperationResult.invalid(issues)

    if "account_id" in update and not ledger.has_account(updated.account_id):
        return OperationResult.not_found("Account", updated.account_id)
    if update.get("category_id") and not ledger.has_category(updated.category_id):
        return OperationResult.not_found("Category", updated.category_id)

    movements = tuple(updated if m.id == movement_id else m for m in ledger.movements)
    return OperationResult.ok(
        ledger.clear_reconciled(existing.account_id, updated.account_id)
        .with_movements(movements)
    )


def delete_movement(ledger: Ledger, movement_id: str) -> OperationResult:
    """
    Hard delete a movement.

    If it is one side of a transfer, the other side goes with it.
    """
    movement = ledger.find_movement(movement_id)
    if movement is None:
        return OperationResult.not_found("Movement", movement_id)

    doomed = {movement_id}
    if movement.transfer_pair_id:
        doomed.add(movement.transfer_pair_id)

    affected = {m.account_id for m in ledger.movements if m.id in doomed}
    return OperationResult.ok(
        ledger.clear_reconciled(*affected)
        .with_movements(m for m in ledger.movements if m.id not in doomed)
    )


# =============================================================================
# BULK IMPORT
# =============================================================================

def bulk_import_movements(
    ledger: Ledger,
    account_id: str,
    candidates: Sequence[Union[MovementInput, dict[str, Any]]],
) -> ImportResult:
    """
    Import a batch of movements into one account.

    Each candidate is skipped (never fatal) when it is:
    - invalid
    - dated before the account's `reconciled` date
    - a duplicate of an existing movement on the account, or of an
      earlier candidate in the same batch (see deduplication_key)

    A category that does not resolve becomes uncategorized. Imported
    rows default to source "import". When nothing is imported, the
    result carries the very same Ledger object that was passed in.
    """
    account = ledger.find_account(account_id)
    if account is None:
        return ImportResult(result=OperationResult.not_found("Account", account_id))

    seen = {
        deduplication_key(m)
        for m in ledger.movements
        if m.account_id == account_id
    }
    counter = int(next_id(ledger.movements))
    imported: list[Movement] = []
    rows: list[ImportRowOutcome] = []

    for index, candidate in enumerate(candidates):
        if isinstance(candidate, MovementInput):
            candidate = candidate.model_copy(update={"account_id": account_id})
        else:
            candidate = {**dict(candidate), "account_id": account_id}

        data = coerce_input(MovementInput, candidate)
        if isinstance(data, OperationResult):
            rows.append(ImportRowOutcome(
                index=index,
                status=ImportRowStatus.INVALID,
                reason=data.error_message or "",
            ))
            continue

        movement = _build(data, str(counter), MovementSource.IMPORT)
        issues = validate_movement(movement) + _no_bare_transfers(movement)
        if issues:
            rows.append(ImportRowOutcome(
                index=index,
                status=ImportRowStatus.INVALID,
                reason="; ".join(f"{i.field}: {i.message}" for i in issues),
            ))
            continue

        if account.reconciled and movement.date < account.reconciled:
            rows.append(ImportRowOutcome(
                index=index,
                status=ImportRowStatus.BEFORE_RECONCILED,
                reason=f"Dated before the account was reconciled ({account.reconciled})",
            ))
            continue

        key = deduplication_key(movement)
        if key in seen:
            rows.append(ImportRowOutcome(
                index=index,
                status=ImportRowStatus.DUPLICATE,
                reason=f"Already recorded: {key}",
            ))
            continue

        status = ImportRowStatus.IMPORTED
        reason = ""
        if movement.category_id and not ledger.has_category(movement.category_id):
            movement = movement.model_copy(update={"category_id": ""})
            status = ImportRowStatus.IMPORTED_UNCATEGORIZED
            reason = f"Category not found: {data.category_id}"

        imported.append(movement)
        seen.add(key)
        counter += 1
        rows.append(ImportRowOutcome(
            index=index,
            status=status,
            movement_id=movement.id,
            reason=reason,
        ))

    if not imported:
        return ImportResult(result=OperationResult.ok(ledger), rows=rows)

    return ImportResult(
        result=OperationResult.ok(
            ledger.clear_reconciled(account_id)
            .with_movements((*ledger.movements, *imported))
        ),
        rows=rows,
    )
