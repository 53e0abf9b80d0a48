"""
Ledger Data Models for Pocketbook

These models define the schemas of everything kept in the local store:
transactions, accounts, groups and the expense-splitting state.

DESIGN DECISION: Amounts on transactions are kept as the text the user
typed. They are parsed only when something needs a number, so a blob
written by an older build (or edited by hand) always loads.
"""

import math
import re
from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


_GROUPED_NUMBER = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d+)?$")

# Field named "date" below shadows the type inside the class body
CalendarDate = date


def new_id() -> str:
    """Opaque identifier for stored entities."""
    return uuid4().hex


def parse_amount(value: object) -> Optional[float]:
    """
    Parse user-entered amount text to a float.

    Commas are accepted only as thousands separators ("1,250").
    Returns None for anything that is not a finite number
    ("", "abc", "nan", "inf", "1,5", "1_000", None).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text or "_" in text:
            return None
        if "," in text:
            if not _GROUPED_NUMBER.match(text):
                return None
            text = text.replace(",", "")
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a logged transaction."""
    EXPENSE = "expense"
    INCOME = "income"

    @classmethod
    def _missing_(cls, value: object) -> Optional["TransactionType"]:
        # Labels written by the original mobile build
        legacy = {"支出": cls.EXPENSE, "收入": cls.INCOME}
        if isinstance(value, str):
            key = value.strip()
            if key in legacy:
                return legacy[key]
            for member in cls:
                if member.value == key.lower():
                    return member
        return None


class AccountIcon(str, Enum):
    """Icons an account can be shown with."""
    CASH = "cash"
    CREDIT_CARD = "credit-card"
    BANK = "bank"
    WALLET = "wallet"


class JoinOutcome(str, Enum):
    """Result of trying to join a group by code."""
    EMPTY_CODE = "empty_code"
    ALREADY_JOINED = "already_joined"
    NOT_FOUND = "not_found"


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionRecord(BaseModel):
    """
    A single income or expense entry.

    Records are never edited after creation, only deleted.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Unique transaction ID"
    )
    amount: str = Field(
        ...,
        description="Amount as entered; parsed at aggregation time"
    )
    type: TransactionType = Field(
        ...,
        description="Expense or income"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="User-defined category label"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Optional free-text note"
    )
    date: CalendarDate = Field(
        default_factory=date.today,
        description="Calendar day of the transaction"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount_to_text(cls, v: object) -> object:
        """Older blobs may hold plain numbers."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return repr(v) if isinstance(v, float) else str(v)
        return v

    @field_validator('note', mode='before')
    @classmethod
    def blank_note_is_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def parsed_amount(self) -> Optional[float]:
        """Amount as a number, or None if the text is not parseable."""
        return parse_amount(self.amount)

    @property
    def signed_amount(self) -> Optional[float]:
        """Amount signed negative for expenses, positive for income."""
        amount = self.parsed_amount
        if amount is None:
            return None
        return -amount if self.type == TransactionType.EXPENSE else amount


class CategoryBookState(BaseModel):
    """Category lists per transaction type plus the last one used."""

    expense: list[str] = Field(default_factory=list)
    income: list[str] = Field(default_factory=list)
    last_category: Optional[str] = None

    def for_type(self, transaction_type: TransactionType) -> list[str]:
        if transaction_type == TransactionType.EXPENSE:
            return self.expense
        return self.income


# =============================================================================
# ACCOUNTS
# =============================================================================

class Currency(BaseModel):
    """Display currency with an illustrative conversion rate from NT$."""
    model_config = ConfigDict(frozen=True)

    symbol: str
    rate: float = Field(gt=0)


# Illustrative only: these rates are not kept current.
CURRENCIES: tuple[Currency, ...] = (
    Currency(symbol="NT$", rate=1.0),
    Currency(symbol="USD$", rate=0.033),
    Currency(symbol="JPY¥", rate=3.65),
)


class Account(BaseModel):
    """A cash, card or bank account tracked by balance."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(default_factory=new_id, min_length=1)
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Account name"
    )
    balance: float = Field(
        ...,
        description="Current balance in the base currency"
    )
    credit_limit: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("credit_limit", "creditLimit"),
        description="Credit limit for card accounts"
    )
    icon: AccountIcon = AccountIcon.CASH
    currency: str = Field(
        default=CURRENCIES[0].symbol,
        description="Currency symbol the account was created with"
    )

    @field_validator('balance', 'credit_limit')
    @classmethod
    def must_be_finite(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not math.isfinite(v):
            raise ValueError("Amount must be a finite number")
        return v


# =============================================================================
# GROUPS
# =============================================================================

class Group(BaseModel):
    """A named group identified by a shareable join code."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(default_factory=new_id, min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(
        ...,
        pattern=r"^[A-Z0-9]+$",
        description="Upper-case alphanumeric join code"
    )


# =============================================================================
# EXPENSE SPLITTING
# =============================================================================

class SplitMember(BaseModel):
    """A participant that can take part in a split."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(default_factory=new_id, min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    selected: bool = True


class SplitShare(BaseModel):
    """What one member owes for a split."""

    member_id: str
    member_name: str
    amount: float

    def describe(self) -> str:
        return f"{self.member_name} owes {self.amount:g}"


class SplitHistoryEntry(BaseModel):
    """A past split calculation."""

    id: str = Field(default_factory=new_id, min_length=1)
    created_at: datetime
    amount: float
    shares: list[SplitShare] = Field(default_factory=list)

    @property
    def participant_count(self) -> int:
        return len(self.shares)
