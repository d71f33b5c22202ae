"""
Account Operations

Pure functions: (Ledger, input) -> OperationResult. The input ledger is
never modified; a successful result carries a new snapshot.

DESIGN DECISION: Accounts are never deleted while movements point at
them. Hiding is the reversible alternative and has no side effects on
movements or reconciliation.
"""

from typing import Any, Union

from ledger.models.ledger import Ledger
from ledger.models.records import Account, AccountChanges, AccountInput
from ledger.models.results import FailureKind, OperationResult
from ledger.operations.common import coerce_input, replace_where, utc_now_iso
from ledger.operations.ids import next_id
from ledger.validation import validate_account


def create_account(
    ledger: Ledger,
    data: Union[AccountInput, dict[str, Any]],
) -> OperationResult:
    """Create an account with the next free id."""
    data = coerce_input(AccountInput, data)
    if isinstance(data, OperationResult):
        return data

    account = Account(
        id=next_id(ledger.accounts),
        name=data.name,
        kind=data.kind,
        currency=data.currency.upper(),
        institution=data.institution,
        balance=data.balance,
        hidden=False,
        reconciled="",
        created_at=utc_now_iso(),
    )

    issues = validate_account(account)
    if issues:
        return OperationResult.invalid(issues)

    return OperationResult.ok(ledger.with_accounts((*ledger.accounts, account)))


def update_account(
    ledger: Ledger,
    account_id: str,
    changes: Union[AccountChanges, dict[str, Any]],
) -> OperationResult:
    """
    Apply a partial update to an account.

    The merged record is validated as if it were new. Account fields do
    not affect which movements belong to the account, so `reconciled`
    is left alone.
    """
    existing = ledger.find_account(account_id)
    if existing is None:
        return OperationResult.not_found("Account", account_id)

    changes = coerce_input(AccountChanges, changes)
    if isinstance(changes, OperationResult):
        return changes

    update = changes.model_dump(exclude_none=True)
    if "currency" in update:
        update["currency"] = update["currency"].upper()

    updated = existing.model_copy(update=update)
    issues = validate_account(updated)
    if issues:
        return OperationResult.invalid(issues)

    return OperationResult.ok(ledger.with_accounts(
        replace_where(ledger.accounts, lambda a: a.id == account_id, update)
    ))


def _set_hidden(ledger: Ledger, account_id: str, hidden: bool) -> OperationResult:
    if not ledger.has_account(account_id):
        return OperationResult.not_found("Account", account_id)
    return OperationResult.ok(ledger.with_accounts(
        replace_where(ledger.accounts, lambda a: a.id == account_id, {"hidden": hidden})
    ))


def hide_account(ledger: Ledger, account_id: str) -> OperationResult:
    """Soft delete: flip `hidden` on. Reversible with unhide_account."""
    return _set_hidden(ledger, account_id, True)


def unhide_account(ledger: Ledger, account_id: str) -> OperationResult:
    return _set_hidden(ledger, account_id, False)


def delete_account(ledger: Ledger, account_id: str) -> OperationResult:
    """
    Hard delete an account.

    Rejected with a CONFLICT while any movement references the account;
    hide it instead, or delete its movements first.
    """
    if not ledger.has_account(account_id):
        return OperationResult.not_found("Account", account_id)

    referencing = sum(1 for m in ledger.movements if m.account_id == account_id)
    if referencing:
        return OperationResult.fail(
            FailureKind.CONFLICT,
            f"Cannot delete account {account_id}: {referencing} movement(s) reference it. "
            f"Hide the account instead, or delete its movements first.",
            account_id=account_id,
            movement_count=referencing,
        )

    return OperationResult.ok(ledger.with_accounts(
        a for a in ledger.accounts if a.id != account_id
    ))
