"""Record validation package."""

from ledger.validation.validator import (
    DATE_PATTERN,
    LedgerValidator,
    is_valid_date,
    validate_account,
    validate_category,
    validate_movement,
)

__all__ = [
    "DATE_PATTERN",
    "LedgerValidator",
    "is_valid_date",
    "validate_account",
    "validate_category",
    "validate_movement",
]
