"""
Date-Range Resolution and Navigation

resolve_range turns a range mode into a concrete window; shift_range
moves a month or year window one step and hands it back as CUSTOM.

Both are pure: "today" is always passed in by the caller.
"""

import calendar
from datetime import date
from typing import Optional, Union

import structlog

from pocketbook.models.report import (
    DateWindow,
    NavigationDirection,
    RangeMode,
    RangeShift,
    Unresolved,
)

logger = structlog.get_logger("pocketbook.reporting")

INCOMPLETE_SELECTION = Unresolved(reason="Select a start and end date")


def month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def add_months(day: date, months: int) -> date:
    """Move a date by whole months, clamping the day to the target month."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def _coerce_mode(range_mode: Union[RangeMode, str]) -> Optional[RangeMode]:
    if isinstance(range_mode, RangeMode):
        return range_mode
    try:
        return RangeMode(range_mode)
    except ValueError:
        return None


def resolve_range(
    range_mode: Union[RangeMode, str],
    reference_date: date,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
) -> Union[DateWindow, Unresolved]:
    """
    Resolve a range mode to an inclusive window.

    Args:
        range_mode: Month, last six months, year or custom
        reference_date: "Today" for the non-custom modes
        custom_start: Start bound, used only for CUSTOM
        custom_end: End bound, used only for CUSTOM

    Returns:
        The window, or Unresolved when custom bounds are incomplete
        or the mode is not recognized
    """
    mode = _coerce_mode(range_mode)

    if mode == RangeMode.MONTH:
        return DateWindow(
            start=reference_date.replace(day=1),
            end=month_end(reference_date.year, reference_date.month),
        )

    if mode == RangeMode.LAST_SIX_MONTHS:
        # Open trailing window: ends today, not at month end
        return DateWindow(
            start=add_months(reference_date.replace(day=1), -5),
            end=reference_date,
        )

    if mode == RangeMode.YEAR:
        return DateWindow(
            start=date(reference_date.year, 1, 1),
            end=date(reference_date.year, 12, 31),
        )

    if mode == RangeMode.CUSTOM:
        if custom_start is None or custom_end is None:
            return INCOMPLETE_SELECTION
        if custom_end < custom_start:
            return Unresolved(reason="End date is before start date")
        return DateWindow(start=custom_start, end=custom_end)

    logger.warning("unknown_range_mode", range_mode=str(range_mode))
    return Unresolved(reason=f"Unknown range mode: {range_mode}")


def shift_range(
    mode: RangeMode,
    window: DateWindow,
    direction: NavigationDirection,
) -> RangeShift:
    """
    Move a month or year window one step back or forward.

    A shifted window is returned with mode CUSTOM so it stays put instead
    of snapping back to the current month. Last-six-months and custom
    windows are returned unchanged.
    """
    step = direction.step

    if mode == RangeMode.MONTH:
        start = add_months(window.start, step)
        return RangeShift(
            mode=RangeMode.CUSTOM,
            window=DateWindow(start=start, end=month_end(start.year, start.month)),
            shifted=True,
        )

    if mode == RangeMode.YEAR:
        year = window.start.year + step
        return RangeShift(
            mode=RangeMode.CUSTOM,
            window=DateWindow(start=date(year, 1, 1), end=date(year, 12, 31)),
            shifted=True,
        )

    return RangeShift(mode=mode, window=window, shifted=False)
