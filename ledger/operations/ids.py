"""Id allocation: next id = highest numeric id in the collection + 1."""

import re
from typing import Any, Iterable, Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def numeric_id(value: str) -> Optional[int]:
    """Leading integer of an id, or None when the id is not numeric."""
    match = _LEADING_INT.match(value or "")
    return int(match.group(1)) if match else None


def next_id(records: Iterable[Any]) -> str:
    """
    Next id for a collection, as a string.

    Non-numeric ids are ignored; an empty collection starts at "1".
    """
    highest = 0
    for record in records:
        number = numeric_id(record.id)
        if number is not None and number > highest:
            highest = number
    return str(highest + 1)
