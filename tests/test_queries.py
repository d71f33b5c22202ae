"""Tests for read-only queries and the budget overview."""

import pytest

from ledger.operations import create_movement, create_transfer, hide_account, hide_category
from ledger.queries import (
    budget_overview,
    categories_by_group,
    category_available,
    category_spent,
    movements_for_account,
    movements_for_category,
    movements_in_range,
    month_window,
    visible_accounts,
    visible_categories,
)


@pytest.fixture
def busy_ledger(ledger):
    entries = [
        ("expense", "1", "2024-01-15", -3000, "1"),
        ("expense", "1", "2024-02-03", -1200, "1"),
        ("expense", "1", "2024-02-20", -800, ""),
        ("income", "1", "2024-02-01", 250000, "2"),
        ("income", "2", "2024-02-29", 500, ""),
    ]
    for kind, account_id, when, amount, category_id in entries:
        ledger = create_movement(ledger, {
            "kind": kind, "account_id": account_id, "date": when,
            "amount": amount, "category_id": category_id,
        }).unwrap()
    return create_transfer(ledger, "1", "2", 10000, "2024-02-10", category_id="1").unwrap()


class TestLookups:
    def test_visibility(self, ledger):
        ledger = hide_category(hide_account(ledger, "2").unwrap(), "2").unwrap()
        assert [a.id for a in visible_accounts(ledger)] == ["1"]
        assert [c.id for c in visible_categories(ledger)] == ["1"]

    def test_filters(self, busy_ledger):
        assert len(movements_for_account(busy_ledger, "2")) == 2
        assert [m.id for m in movements_for_category(busy_ledger, "")] == ["3", "5"]
        assert [m.id for m in movements_in_range(busy_ledger, "2024-02-01", "2024-02-10")] == ["2", "4", "6", "7"]

    def test_categories_by_group(self, ledger):
        groups = categories_by_group(list(ledger.categories))
        assert list(groups) == ["Everyday", "Income"]
        assert [c.name for c in groups["Everyday"]] == ["Groceries"]


class TestBudget:
    @pytest.mark.parametrize("month,expected", [
        ("2024-02", ("2024-02-01", "2024-02-29")),
        ("2023-02", ("2023-02-01", "2023-02-28")),
        ("2024-12", ("2024-12-01", "2024-12-31")),
        ("2024-13", None),
        ("2024-2", None),
        ("", None),
    ])
    def test_month_window(self, month, expected):
        assert month_window(month) == expected

    def test_spent_ignores_income_and_transfers(self, busy_ledger):
        assert category_spent("1", busy_ledger.movements) == -4200
        assert category_available(40000, -4200) == 35800

    def test_overview_for_month(self, busy_ledger):
        overview = budget_overview(busy_ledger, "2024-02")

        groceries = overview.lines[0]
        assert groceries.category.name == "Groceries"
        assert groceries.spent == -1200
        assert groceries.available == 38800
        assert overview.totals.assigned == 40000
        assert overview.totals.spent == -1200
        assert overview.income == 250500

    def test_overview_all_time(self, busy_ledger):
        overview = budget_overview(busy_ledger)
        assert overview.month is None
        assert overview.lines[0].spent == -4200

    def test_hidden_categories_are_left_out(self, busy_ledger):
        overview = budget_overview(hide_category(busy_ledger, "1").unwrap())
        assert [line.category.id for line in overview.lines] == ["2"]

    def test_invalid_month(self, busy_ledger):
        with pytest.raises(ValueError, match="YYYY-MM"):
            budget_overview(busy_ledger, "February")
