"""
Record Validation

DESIGN DECISION: Validators look at a fully merged record (for an
update: the existing record with the changes applied), never at a
partial input. This means an update can't sneak an invalid record in by
leaving a broken field untouched.

Validators only check the record itself. Reference checks (does this
account exist?) need the whole ledger and live in the operations.

IMPORTANT: Validation NEVER silently fixes issues.
It reports every problem found, not just the first one.
"""

import re
from datetime import date
from typing import Any

from ledger.models.records import AccountKind, CategoryKind, MovementKind
from ledger.models.results import ValidationIssue

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

ACCOUNT_KINDS = [kind.value for kind in AccountKind]
MOVEMENT_KINDS = [kind.value for kind in MovementKind]
CATEGORY_KINDS = [kind.value for kind in CategoryKind]


def is_valid_date(value: str) -> bool:
    """True for a real calendar date written as YYYY-MM-DD."""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _required(field: str, label: str) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type="missing",
        message=f"{label} is required",
    )


def _one_of(field: str, label: str, allowed: list[str]) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type="invalid_value",
        message=f"{label} must be one of: {', '.join(allowed)}",
    )


class LedgerValidator:
    """
    Validates ledger records one field at a time.

    Each check returns every issue it finds as a list of ValidationIssue;
    an empty list means the record is valid. The validator holds no
    state, so one shared instance serves every operation.
    """

    def validate_account(self, account: Any) -> list[ValidationIssue]:
        """
        Check an account record.

        Checks:
        - name present
        - kind is a known account type
        - currency present
        - balance is an integer number of minor units
        """
        issues = []

        if _blank(account.name):
            issues.append(_required("name", "Name"))
        if account.kind not in ACCOUNT_KINDS:
            issues.append(_one_of("kind", "Type", ACCOUNT_KINDS))
        if _blank(account.currency):
            issues.append(_required("currency", "Currency"))
        if not isinstance(account.balance, int) or isinstance(account.balance, bool):
            issues.append(ValidationIssue(
                field="balance",
                issue_type="invalid_type",
                message="Balance must be a number",
            ))

        return issues

    def validate_movement(self, movement: Any) -> list[ValidationIssue]:
        """
        Check a movement record.

        Checks:
        - kind is income, expense or transfer
        - account id present
        - date present and a real YYYY-MM-DD date
        - amount is an integer number of minor units
        """
        issues = []

        if movement.kind not in MOVEMENT_KINDS:
            issues.append(_one_of("kind", "Type", MOVEMENT_KINDS))
        if _blank(movement.account_id):
            issues.append(_required("account_id", "Account ID"))

        if _blank(movement.date):
            issues.append(_required("date", "Date"))
        elif not is_valid_date(movement.date):
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message="Date must be a valid date in YYYY-MM-DD format",
            ))

        if not isinstance(movement.amount, int) or isinstance(movement.amount, bool):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_type",
                message="Amount must be a number",
            ))

        return issues

    def validate_category(self, category: Any) -> list[ValidationIssue]:
        """Check a category record: name, group and a known kind."""
        issues = []

        if _blank(category.name):
            issues.append(_required("name", "Name"))
        if _blank(category.group):
            issues.append(_required("group", "Group"))
        if category.kind not in CATEGORY_KINDS:
            issues.append(_one_of("kind", "Type", CATEGORY_KINDS))

        return issues


_validator = LedgerValidator()


def validate_account(account: Any) -> list[ValidationIssue]:
    return _validator.validate_account(account)


def validate_movement(movement: Any) -> list[ValidationIssue]:
    return _validator.validate_movement(movement)


def validate_category(category: Any) -> list[ValidationIssue]:
    return _validator.validate_category(category)
