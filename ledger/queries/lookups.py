"""
Read-only lookups over a Ledger snapshot.

Nothing here changes the ledger. Date ranges compare YYYY-MM-DD text,
which sorts the same way as the dates themselves.
"""

from typing import Optional

from ledger.models.ledger import Ledger
from ledger.models.records import Account, Category, Movement


def visible_accounts(ledger: Ledger) -> list[Account]:
    return [a for a in ledger.accounts if not a.hidden]


def visible_categories(ledger: Ledger) -> list[Category]:
    return [c for c in ledger.categories if not c.hidden]


def find_account(ledger: Ledger, account_id: str) -> Optional[Account]:
    return ledger.find_account(account_id)


def find_movement(ledger: Ledger, movement_id: str) -> Optional[Movement]:
    return ledger.find_movement(movement_id)


def find_category(ledger: Ledger, category_id: str) -> Optional[Category]:
    return ledger.find_category(category_id)


def movements_for_account(ledger: Ledger, account_id: str) -> list[Movement]:
    return [m for m in ledger.movements if m.account_id == account_id]


def movements_for_category(ledger: Ledger, category_id: str) -> list[Movement]:
    """Movements in a category; pass "" for the uncategorized ones."""
    return [m for m in ledger.movements if m.category_id == category_id]


def movements_in_range(ledger: Ledger, start: str, end: str) -> list[Movement]:
    """Movements dated from `start` to `end`, both inclusive."""
    return [m for m in ledger.movements if start <= m.date <= end]


def categories_by_group(categories: list[Category]) -> dict[str, list[Category]]:
    """Group categories by their `group`, keeping first-seen order."""
    groups: dict[str, list[Category]] = {}
    for category in categories:
        groups.setdefault(category.group, []).append(category)
    return groups
