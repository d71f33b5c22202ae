"""Read-only queries and budget reporting."""

from ledger.queries.budget import (
    BudgetLine,
    BudgetOverview,
    BudgetTotals,
    budget_overview,
    category_available,
    category_spent,
    month_window,
)
from ledger.queries.lookups import (
    categories_by_group,
    find_account,
    find_category,
    find_movement,
    movements_for_account,
    movements_for_category,
    movements_in_range,
    visible_accounts,
    visible_categories,
)

__all__ = [
    # Lookups
    "categories_by_group",
    "find_account",
    "find_category",
    "find_movement",
    "movements_for_account",
    "movements_for_category",
    "movements_in_range",
    "visible_accounts",
    "visible_categories",
    # Budget
    "BudgetLine",
    "BudgetOverview",
    "BudgetTotals",
    "budget_overview",
    "category_available",
    "category_spent",
    "month_window",
]
