"""
Category Operations

Pure functions: (Ledger, input) -> OperationResult.

DESIGN DECISION: Deleting a category is never blocked. Every movement
that pointed at it becomes uncategorized (category_id = ""), which is a
normal state, not an error. Ownership of movements by accounts does not
change, so no account loses its `reconciled` date.
"""

from typing import Any, Union

from ledger.models.ledger import Ledger
from ledger.models.records import Category, CategoryChanges, CategoryInput
from ledger.models.results import OperationResult
from ledger.operations.common import coerce_input, replace_where
from ledger.operations.ids import next_id
from ledger.validation import validate_category


def create_category(
    ledger: Ledger,
    data: Union[CategoryInput, dict[str, Any]],
) -> OperationResult:
    """Create a budget category (kind defaults to expense)."""
    data = coerce_input(CategoryInput, data)
    if isinstance(data, OperationResult):
        return data

    category = Category(
        id=next_id(ledger.categories),
        kind=data.kind,
        name=data.name,
        group=data.group,
        assigned=data.assigned,
        hidden=False,
    )

    issues = validate_category(category)
    if issues:
        return OperationResult.invalid(issues)

    return OperationResult.ok(ledger.with_categories((*ledger.categories, category)))


def update_category(
    ledger: Ledger,
    category_id: str,
    changes: Union[CategoryChanges, dict[str, Any]],
) -> OperationResult:
    existing = ledger.find_category(category_id)
    if existing is None:
        return OperationResult.not_found("Category", category_id)

    changes = coerce_input(CategoryChanges, changes)
    if isinstance(changes, OperationResult):
        return changes

    update = changes.model_dump(exclude_none=True)
    issues = validate_category(existing.model_copy(update=update))
    if issues:
        return OperationResult.invalid(issues)

    return OperationResult.ok(ledger.with_categories(
        replace_where(ledger.categories, lambda c: c.id == category_id, update)
    ))


def _set_hidden(ledger: Ledger, category_id: str, hidden: bool) -> OperationResult:
    if not ledger.has_category(category_id):
        return OperationResult.not_found("Category", category_id)
    return OperationResult.ok(ledger.with_categories(
        replace_where(ledger.categories, lambda c: c.id == category_id, {"hidden": hidden})
    ))


def hide_category(ledger: Ledger, category_id: str) -> OperationResult:
    return _set_hidden(ledger, category_id, True)


def unhide_category(ledger: Ledger, category_id: str) -> OperationResult:
    return _set_hidden(ledger, category_id, False)


def delete_category(ledger: Ledger, category_id: str) -> OperationResult:
    """Hard delete a category and uncategorize its movements."""
    if not ledger.has_category(category_id):
        return OperationResult.not_found("Category", category_id)

    remaining = ledger.with_categories(c for c in ledger.categories if c.id != category_id)

    if not any(m.category_id == category_id for m in ledger.movements):
        return OperationResult.ok(remaining)

    return OperationResult.ok(remaining.with_movements(
        replace_where(ledger.movements, lambda m: m.category_id == category_id, {"category_id": ""})
    ))
