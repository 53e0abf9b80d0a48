"""
Report Models for Pocketbook

The reporting engine takes a list of TransactionRecord plus a ReportQuery
and produces either a ReportResult or Unresolved.

CRITICAL: ReportQuery is transient view state. It is passed into every
computation explicitly and never persisted.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)

from pocketbook.models.ledger import TransactionRecord, TransactionType


# =============================================================================
# ENUMS
# =============================================================================

class ReportTab(str, Enum):
    """Which records count in a report and how the total is signed."""
    EXPENSE = "expense"
    INCOME = "income"
    BALANCE = "balance"

    def includes(self, transaction_type: TransactionType) -> bool:
        if self == ReportTab.BALANCE:
            return True
        return self.value == transaction_type.value


class RangeMode(str, Enum):
    """Granularity of the reporting window."""
    MONTH = "month"
    LAST_SIX_MONTHS = "last_six_months"
    YEAR = "year"
    CUSTOM = "custom"

    @property
    def is_navigable(self) -> bool:
        return self in (RangeMode.MONTH, RangeMode.YEAR)


class NavigationDirection(str, Enum):
    """Direction for the previous/next window controls."""
    PREVIOUS = "previous"
    NEXT = "next"

    @property
    def step(self) -> int:
        return -1 if self == NavigationDirection.PREVIOUS else 1


# =============================================================================
# WINDOWS
# =============================================================================

class DateWindow(BaseModel):
    """Inclusive start/end calendar-day pair."""
    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @model_validator(mode='after')
    def validate_order(self) -> 'DateWindow':
        if self.end < self.start:
            raise ValueError("Window end cannot be before start")
        return self

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def describe(self) -> str:
        return f"{self.start.strftime('%Y/%m/%d')} ~ {self.end.strftime('%Y/%m/%d')}"


class Unresolved(BaseModel):
    """
    The query does not describe a window yet.

    Not an error: the caller shows a prompt (e.g. "pick a start and end
    date") instead of a chart.
    """
    model_config = ConfigDict(frozen=True)

    reason: str = "Select a start and end date"


class RangeShift(BaseModel):
    """Outcome of moving a window one step."""
    model_config = ConfigDict(frozen=True)

    mode: RangeMode
    window: DateWindow
    shifted: bool


# =============================================================================
# QUERY
# =============================================================================

class ReportQuery(BaseModel):
    """
    Everything the report screen lets the user choose.

    navigation_unit remembers which navigable mode produced the current
    custom window so previous/next keep stepping by that unit.
    """
    model_config = ConfigDict(frozen=True)

    tab: ReportTab = ReportTab.EXPENSE
    range_mode: RangeMode = RangeMode.MONTH
    custom_start: Optional[date] = None
    custom_end: Optional[date] = None
    navigation_unit: Optional[RangeMode] = None

    @model_validator(mode='after')
    def validate_custom_bounds(self) -> 'ReportQuery':
        if self.custom_start and self.custom_end:
            if self.custom_end < self.custom_start:
                raise ValueError("Custom end cannot be before custom start")
        if self.navigation_unit is not None and not self.navigation_unit.is_navigable:
            raise ValueError(
                f"Navigation unit must be month or year, got {self.navigation_unit.value}"
            )
        return self

    def with_tab(self, tab: ReportTab) -> 'ReportQuery':
        return self.model_copy(update={"tab": tab})

    def with_range_mode(self, range_mode: RangeMode) -> 'ReportQuery':
        """Pick a range mode; custom bounds are kept for when CUSTOM is chosen again."""
        return self.model_copy(
            update={"range_mode": range_mode, "navigation_unit": None}
        )

    def with_custom_start(self, start: date) -> 'ReportQuery':
        end = self.custom_end if self.custom_end and self.custom_end >= start else None
        return ReportQuery(
            tab=self.tab,
            range_mode=RangeMode.CUSTOM,
            custom_start=start,
            custom_end=end,
        )

    def with_custom_end(self, end: date) -> 'ReportQuery':
        start = self.custom_start if self.custom_start and self.custom_start <= end else None
        return ReportQuery(
            tab=self.tab,
            range_mode=RangeMode.CUSTOM,
            custom_start=start,
            custom_end=end,
        )


# =============================================================================
# RESULT
# =============================================================================

class CategorySlice(BaseModel):
    """One category's share of a report, ready for a chart legend."""
    model_config = ConfigDict(frozen=True)

    name: str
    amount: float = Field(ge=0, description="Absolute per-category sum")
    percentage: Optional[float] = Field(
        default=None,
        description="Share of the summed magnitudes; None when there are none"
    )


class ReportResult(BaseModel):
    """
    Aggregated view of one tab over one window.

    by_category holds signed sums in first-seen order; slices expose the
    absolute magnitudes used for proportions.
    """

    window_start: date
    window_end: date
    filtered: list[TransactionRecord] = Field(default_factory=list)
    by_category: dict[str, float] = Field(default_factory=dict)
    total: float = 0.0
    skipped_ids: list[str] = Field(
        default_factory=list,
        description="Filtered records whose amount could not be parsed"
    )

    @property
    def window(self) -> DateWindow:
        return DateWindow(start=self.window_start, end=self.window_end)

    @property
    def has_data(self) -> bool:
        return len(self.by_category) > 0

    @property
    def slices(self) -> list[CategorySlice]:
        """Per-category magnitudes with their share of magnitude_sum."""
        magnitude_total = self.magnitude_sum
        slices = []
        for name, amount in self.by_category.items():
            magnitude = abs(amount)
            percentage = None
            if magnitude_total != 0:
                percentage = magnitude / magnitude_total * 100
            slices.append(CategorySlice(name=name, amount=magnitude, percentage=percentage))
        return slices

    @property
    def magnitude_sum(self) -> float:
        """Sum of absolute per-category sums."""
        return sum(abs(amount) for amount in self.by_category.values())
