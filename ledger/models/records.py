"""
Core Record Models for Personal Ledger

These models define the three record types kept by the ledger:
accounts, money movements and budget categories.

DESIGN DECISION: Records are frozen Pydantic models. A record is never
changed in place; operations build a new one with model_copy(update=...).

Enumerated fields ("kind") are stored as plain strings so that a
hand-edited file with an unknown value still loads. Membership in the
enums below is checked by the validators at mutation time.
"""

import datetime as dt
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountKind(str, Enum):
    """Supported account types."""
    CASH = "cash"
    CHECKING = "checking"
    CREDIT_CARD = "credit_card"
    LOAN = "loan"
    SAVINGS = "savings"
    ASSET = "asset"
    CRYPTO = "crypto"


class MovementKind(str, Enum):
    """
    Money movement types.

    TRANSFER movements always come in mutually-linked pairs.
    """
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class CategoryKind(str, Enum):
    """Budget category types."""
    INCOME = "income"
    EXPENSE = "expense"


class MovementSource(str, Enum):
    """Where a movement came from."""
    MANUAL = "manual"
    IMPORT = "import"
    RECONCILIATION = "reconciliation"


# =============================================================================
# RECORDS
# =============================================================================

class Account(BaseModel):
    """
    A place money lives: a bank account, a wallet, a loan.

    `balance` is the balance reported by the user, in minor units of
    the account's currency. `reconciled` is "" or the YYYY-MM-DD date of
    the last successful reconciliation.
    """
    model_config = ConfigDict(frozen=True)

    id: str = ""
    name: str = ""
    kind: str = ""
    currency: str = ""
    institution: str = ""
    balance: int = 0
    hidden: bool = False
    reconciled: str = ""
    created_at: str = ""


class Movement(BaseModel):
    """
    A single money movement (transaction) on one account.

    `amount` is signed minor units: negative is an outflow.
    An empty `category_id` means uncategorized.
    `transfer_pair_id` is empty unless this movement is one side of a transfer.
    """
    model_config = ConfigDict(frozen=True)

    id: str = ""
    kind: str = ""
    account_id: str = ""
    date: str = ""
    category_id: str = ""
    description: str = ""
    payee: str = ""
    transfer_pair_id: str = ""
    amount: int = 0
    notes: str = ""
    source: str = ""
    created_at: str = ""


class Category(BaseModel):
    """
    A budget category.

    Only `assigned` is stored. Spent and available amounts are derived
    from movements for whatever window the caller picks.
    """
    model_config = ConfigDict(frozen=True)

    id: str = ""
    kind: str = ""
    name: str = ""
    group: str = ""
    assigned: int = 0
    hidden: bool = False


# =============================================================================
# OPERATION INPUTS
# =============================================================================

class _Input(BaseModel):
    """
    Base for caller-supplied inputs.

    Enum members (e.g. AccountKind.CHECKING) and date objects are accepted
    anywhere a plain string is expected and stored as their string value.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    @model_validator(mode="before")
    @classmethod
    def unwrap_enums(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: _plain(value) for key, value in data.items()}
        return data


class AccountInput(_Input):
    """Fields a caller may set when creating an account."""

    name: str = ""
    kind: str = ""
    currency: str = ""
    institution: str = ""
    balance: int = 0


class MovementInput(_Input):
    """Fields a caller may set when creating or importing a movement."""

    kind: str = ""
    account_id: str = ""
    date: str = ""
    category_id: str = ""
    description: str = ""
    payee: str = ""
    amount: int = 0
    notes: str = ""
    source: str = Field(
        default="",
        description="Origin tag; empty means the operation's default"
    )


class CategoryInput(_Input):
    """Fields a caller may set when creating a category."""

    kind: str = CategoryKind.EXPENSE.value
    name: str = ""
    group: str = ""
    assigned: int = 0


class AccountChanges(_Input):
    """Partial update for an account; unset fields are left as they are."""

    name: Optional[str] = None
    kind: Optional[str] = None
    currency: Optional[str] = None
    institution: Optional[str] = None
    balance: Optional[int] = None


class MovementChanges(_Input):
    """Partial update for a movement; unset fields are left as they are."""

    kind: Optional[str] = None
    account_id: Optional[str] = None
    date: Optional[str] = None
    category_id: Optional[str] = None
    description: Optional[str] = None
    payee: Optional[str] = None
    amount: Optional[int] = None
    notes: Optional[str] = None


class CategoryChanges(_Input):
    """Partial update for a category; unset fields are left as they are."""

    kind: Optional[str] = None
    name: Optional[str] = None
    group: Optional[str] = None
    assigned: Optional[int] = None


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    return value
