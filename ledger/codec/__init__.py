"""Record codec package: field schemas, money conversion, row encode/decode."""

from ledger.codec.money import from_minor_units, to_minor_units
from ledger.codec.rows import decode, encode
from ledger.codec.schema import (
    ACCOUNT_SCHEMA,
    CATEGORY_SCHEMA,
    CURRENCY_PRECISION,
    DEFAULT_PRECISION,
    MOVEMENT_SCHEMA,
    FieldDef,
    FieldType,
    Schema,
    field_names,
    precision_for,
    schema_defaults,
)

__all__ = [
    # Schemas
    "ACCOUNT_SCHEMA",
    "CATEGORY_SCHEMA",
    "MOVEMENT_SCHEMA",
    "FieldDef",
    "FieldType",
    "Schema",
    "field_names",
    "schema_defaults",
    # Currency
    "CURRENCY_PRECISION",
    "DEFAULT_PRECISION",
    "precision_for",
    # Conversion
    "decode",
    "encode",
    "from_minor_units",
    "to_minor_units",
]
