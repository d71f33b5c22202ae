"""
Budget Reporting

Categories store only what was assigned to them. What was spent, and so
what is still available, is derived from movements inside a window
(usually one calendar month):

    spent     = sum of expense amounts in the category (negative or zero)
    available = assigned + spent

Transfers never count as spending.
"""

import calendar
import re
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from ledger.models.ledger import Ledger
from ledger.models.records import Category, Movement, MovementKind
from ledger.queries.lookups import movements_in_range, visible_categories

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


class BudgetLine(BaseModel):
    """One category row of the budget."""

    category: Category
    spent: int = Field(
        ...,
        description="Sum of expense amounts (minor units, <= 0 for outflows)"
    )
    available: int = Field(
        ...,
        description="assigned + spent"
    )


class BudgetTotals(BaseModel):
    assigned: int = 0
    spent: int = 0
    available: int = 0


class BudgetOverview(BaseModel):
    """Assigned / spent / available for every visible category."""

    month: Optional[str] = Field(
        default=None,
        description="YYYY-MM window, or None for all time"
    )
    lines: list[BudgetLine] = Field(default_factory=list)
    totals: BudgetTotals = Field(default_factory=BudgetTotals)
    income: int = Field(
        default=0,
        description="Sum of income amounts in the window"
    )


def month_window(month: str) -> Optional[tuple[str, str]]:
    """
    First and last day of a YYYY-MM month.

    >>> month_window("2024-02")
    ('2024-02-01', '2024-02-29')

    Returns None when `month` is not a valid YYYY-MM value.
    """
    match = MONTH_PATTERN.match(month or "")
    if not match:
        return None
    year, mon = int(match.group(1)), int(match.group(2))
    if not 1 <= mon <= 12 or year < 1:
        return None
    last_day = calendar.monthrange(year, mon)[1]
    return f"{year:04d}-{mon:02d}-01", f"{year:04d}-{mon:02d}-{last_day:02d}"


def category_spent(category_id: str, movements: Iterable[Movement]) -> int:
    return sum(
        m.amount for m in movements
        if m.category_id == category_id and m.kind == MovementKind.EXPENSE.value
    )


def category_available(assigned: int, spent: int) -> int:
    return assigned + spent


def budget_overview(ledger: Ledger, month: Optional[str] = None) -> BudgetOverview:
    """
    Build the budget for one month, or for all time when `month` is None.

    Raises:
        ValueError: If `month` is given but is not YYYY-MM
    """
    movements: list[Movement] = list(ledger.movements)
    if month is not None:
        window = month_window(month)
        if window is None:
            raise ValueError(f"Month must be YYYY-MM, got: {month!r}")
        movements = movements_in_range(ledger, *window)

    lines = []
    for category in visible_categories(ledger):
        spent = category_spent(category.id, movements)
        lines.append(BudgetLine(
            category=category,
            spent=spent,
            available=category_available(category.assigned, spent),
        ))

    return BudgetOverview(
        month=month,
        lines=lines,
        totals=BudgetTotals(
            assigned=sum(line.category.assigned for line in lines),
            spent=sum(line.spent for line in lines),
            available=sum(line.available for line in lines),
        ),
        income=sum(m.amount for m in movements if m.kind == MovementKind.INCOME.value),
    )
