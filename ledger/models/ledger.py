"""
Ledger Aggregate

The in-memory triple (accounts, movements, categories).

DESIGN DECISION: The aggregate is frozen and holds tuples. An operation
that changes one collection builds a new tuple for that collection only;
the other two are shared with the previous snapshot.
"""

from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict

from ledger.models.records import Account, Category, Movement


class Ledger(BaseModel):
    """An immutable snapshot of all ledger records."""

    model_config = ConfigDict(frozen=True)

    accounts: tuple[Account, ...] = ()
    movements: tuple[Movement, ...] = ()
    categories: tuple[Category, ...] = ()

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def find_account(self, account_id: str) -> Optional[Account]:
        return next((a for a in self.accounts if a.id == account_id), None)

    def find_movement(self, movement_id: str) -> Optional[Movement]:
        return next((m for m in self.movements if m.id == movement_id), None)

    def find_category(self, category_id: str) -> Optional[Category]:
        return next((c for c in self.categories if c.id == category_id), None)

    def has_account(self, account_id: str) -> bool:
        return any(a.id == account_id for a in self.accounts)

    def has_category(self, category_id: str) -> bool:
        return any(c.id == category_id for c in self.categories)

    # -------------------------------------------------------------------------
    # Structural updates (return new snapshots)
    # -------------------------------------------------------------------------

    def with_accounts(self, accounts: Iterable[Account]) -> "Ledger":
        return self.model_copy(update={"accounts": tuple(accounts)})

    def with_movements(self, movements: Iterable[Movement]) -> "Ledger":
        return self.model_copy(update={"movements": tuple(movements)})

    def with_categories(self, categories: Iterable[Category]) -> "Ledger":
        return self.model_copy(update={"categories": tuple(categories)})

    def clear_reconciled(self, *account_ids: str) -> "Ledger":
        """
        Clear `reconciled` on the given accounts.

        Returns self unchanged when none of them was reconciled, so the
        accounts tuple stays shared with the previous snapshot.
        """
        targets = set(account_ids)
        if not any(a.id in targets and a.reconciled for a in self.accounts):
            return self
        return self.with_accounts(
            a.model_copy(update={"reconciled": ""})
            if a.id in targets and a.reconciled
            else a
            for a in self.accounts
        )
