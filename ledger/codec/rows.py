"""
Record codec: raw string rows <-> typed records.

decode() never fails. Missing columns get the type's default (this is how
files written before a column existed are migrated), extra columns are
dropped, and unparseable numbers become 0. encode() always emits every
schema column, so the next write upgrades an old file.

The money precision is an argument: the caller resolves it (accounts from
their own currency, movements from their account's currency).
"""

import math
from typing import Any, Mapping, Optional, TypeVar

from pydantic import BaseModel

from ledger.codec.money import from_minor_units, to_minor_units
from ledger.codec.schema import DEFAULT_PRECISION, FieldType, Schema, default_for

RecordT = TypeVar("RecordT", bound=BaseModel)


def _parse_number(text: str) -> Any:
    text = text.strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return 0
    return number if math.isfinite(number) else 0


def decode_value(field_type: FieldType, raw: Optional[str], precision: int) -> Any:
    """Parse one raw cell; None means the column was missing."""
    if raw is None:
        return default_for(field_type)
    if field_type == FieldType.STRING:
        return raw
    if field_type == FieldType.BOOLEAN:
        return raw.strip().lower() == "true"
    if field_type == FieldType.NUMBER:
        return _parse_number(raw)
    return to_minor_units(raw, precision)


def encode_value(field_type: FieldType, value: Any, precision: int) -> str:
    """Format one typed value as a cell."""
    if field_type == FieldType.STRING:
        return "" if value is None else str(value)
    if field_type == FieldType.BOOLEAN:
        return "true" if value else "false"
    if field_type == FieldType.NUMBER:
        return str(value if value is not None else 0)
    return from_minor_units(value or 0, precision)


def decode_fields(
    raw: Mapping[str, Optional[str]],
    schema: Schema,
    precision: int = DEFAULT_PRECISION,
) -> dict[str, Any]:
    """Decode a raw row into {attr: typed value} following the schema."""
    return {
        field.attr: decode_value(field.type, raw.get(field.column), precision)
        for field in schema
    }


def decode(
    raw: Mapping[str, Optional[str]],
    schema: Schema,
    model: type[RecordT],
    precision: int = DEFAULT_PRECISION,
) -> RecordT:
    """Convert a raw string row (e.g. from a CSV file) into a typed record."""
    return model(**decode_fields(raw, schema, precision))


def encode(
    record: BaseModel,
    schema: Schema,
    precision: int = DEFAULT_PRECISION,
) -> dict[str, str]:
    """Convert a typed record into a string row with every schema column, in order."""
    return {
        field.column: encode_value(field.type, getattr(record, field.attr, None), precision)
        for field in schema
    }
