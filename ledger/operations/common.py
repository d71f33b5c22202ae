"""
Shared plumbing for ledger operations.

Operations accept either a ready-made input model or a plain dict.
A dict that fails pydantic coercion (say a non-numeric amount) becomes a
VALIDATION failure instead of an exception.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Iterable, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ledger.models.results import OperationResult, ValidationIssue

InputT = TypeVar("InputT", bound=BaseModel)
RecordT = TypeVar("RecordT", bound=BaseModel)


def utc_now_iso() -> str:
    """Current time as an ISO-8601 timestamp (UTC)."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def issues_from_error(error: ValidationError) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            field=".".join(str(part) for part in err["loc"]) or "input",
            issue_type=err["type"],
            message=err["msg"],
        )
        for err in error.errors()
    ]


def coerce_input(
    model: type[InputT],
    data: Union[InputT, dict[str, Any]],
) -> Union[InputT, OperationResult]:
    """Return `data` as `model`, or an invalid OperationResult explaining why not."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        return OperationResult.invalid(issues_from_error(e))


def replace_where(
    records: Iterable[RecordT],
    match: Callable[[RecordT], bool],
    update: dict[str, Any],
) -> tuple[RecordT, ...]:
    """Copy of `records` with `update` applied to every record `match` accepts."""
    return tuple(
        record.model_copy(update=update) if match(record) else record
        for record in records
    )
