"""
Field schemas - single source of truth for CSV <-> record conversion.

Each schema is an ordered tuple of FieldDef entries. The order is the
CSV column order; the field type drives parsing, formatting and the
default used when a column is missing from an older file.
"""

from enum import Enum
from typing import Any, NamedTuple


class FieldType(str, Enum):
    """How a column is parsed and formatted."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    MONEY = "money"


class FieldDef(NamedTuple):
    """One column of a schema."""
    column: str   # name in the CSV header
    attr: str     # attribute on the record model
    type: FieldType


Schema = tuple[FieldDef, ...]


# =============================================================================
# CURRENCY PRECISION
# =============================================================================

DEFAULT_PRECISION = 2

# Decimal places per currency code; unknown codes use DEFAULT_PRECISION.
CURRENCY_PRECISION: dict[str, int] = {
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "CAD": 2,
    "AUD": 2,
    "CHF": 2,
    "CNY": 2,
    "JPY": 0,
    "KRW": 0,
    "BTC": 8,
    "ETH": 8,
    "SOL": 8,
}


def precision_for(currency: str) -> int:
    """Get precision for a currency code (defaults to 2)."""
    return CURRENCY_PRECISION.get((currency or "").strip().upper(), DEFAULT_PRECISION)


# =============================================================================
# SCHEMAS
# =============================================================================

ACCOUNT_SCHEMA: Schema = (
    FieldDef("id", "id", FieldType.STRING),
    FieldDef("name", "name", FieldType.STRING),
    FieldDef("type", "kind", FieldType.STRING),
    FieldDef("currency", "currency", FieldType.STRING),
    FieldDef("institution", "institution", FieldType.STRING),
    FieldDef("balance", "balance", FieldType.MONEY),
    FieldDef("hidden", "hidden", FieldType.BOOLEAN),
    FieldDef("reconciled", "reconciled", FieldType.STRING),
    FieldDef("createdAt", "created_at", FieldType.STRING),
)

MOVEMENT_SCHEMA: Schema = (
    FieldDef("id", "id", FieldType.STRING),
    FieldDef("type", "kind", FieldType.STRING),
    FieldDef("accountId", "account_id", FieldType.STRING),
    FieldDef("date", "date", FieldType.STRING),
    FieldDef("categoryId", "category_id", FieldType.STRING),
    FieldDef("description", "description", FieldType.STRING),
    FieldDef("payee", "payee", FieldType.STRING),
    FieldDef("transferPairId", "transfer_pair_id", FieldType.STRING),
    FieldDef("amount", "amount", FieldType.MONEY),
    FieldDef("notes", "notes", FieldType.STRING),
    FieldDef("source", "source", FieldType.STRING),
    FieldDef("createdAt", "created_at", FieldType.STRING),
)

CATEGORY_SCHEMA: Schema = (
    FieldDef("id", "id", FieldType.STRING),
    FieldDef("type", "kind", FieldType.STRING),
    FieldDef("name", "name", FieldType.STRING),
    FieldDef("group", "group", FieldType.STRING),
    FieldDef("assigned", "assigned", FieldType.MONEY),
    FieldDef("hidden", "hidden", FieldType.BOOLEAN),
)


def field_names(schema: Schema) -> list[str]:
    """Ordered column names (the CSV header)."""
    return [field.column for field in schema]


def default_for(field_type: FieldType) -> Any:
    if field_type == FieldType.STRING:
        return ""
    if field_type == FieldType.BOOLEAN:
        return False
    return 0


def schema_defaults(schema: Schema) -> dict[str, Any]:
    """Default value for every attribute in a schema."""
    return {field.attr: default_for(field.type) for field in schema}
