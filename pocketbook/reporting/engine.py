"""
Report Engine

DESIGN DECISION: Report computation is DETERMINISTIC.
compute_report depends only on its arguments: the transaction snapshot,
the query and the reference time. No clock reads, no stored state.

shift_query applies previous/next navigation to a query. A navigated
window becomes an explicit CUSTOM range; the query remembers the unit it
was stepped by so repeated presses keep moving it.
"""

from datetime import date, datetime
from typing import Iterable, Union

from pocketbook.models.ledger import TransactionRecord
from pocketbook.models.report import (
    DateWindow,
    NavigationDirection,
    RangeMode,
    ReportQuery,
    ReportResult,
    Unresolved,
)
from pocketbook.reporting.aggregator import aggregate
from pocketbook.reporting.ranges import resolve_range, shift_range


def _as_date(now: Union[date, datetime]) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def resolve_query(
    query: ReportQuery,
    now: Union[date, datetime],
) -> Union[DateWindow, Unresolved]:
    """Window selected by a query, with `now` as the reference day."""
    return resolve_range(
        query.range_mode,
        _as_date(now),
        custom_start=query.custom_start,
        custom_end=query.custom_end,
    )


def compute_report(
    transactions: Iterable[TransactionRecord],
    query: ReportQuery,
    now: Union[date, datetime],
) -> Union[ReportResult, Unresolved]:
    """
    Compute the report for a query.

    Returns Unresolved (no aggregation attempted) when the query does
    not describe a window yet.
    """
    window = resolve_query(query, now)
    if isinstance(window, Unresolved):
        return window
    return aggregate(transactions, query.tab, window)


def shift_query(
    query: ReportQuery,
    direction: NavigationDirection,
    now: Union[date, datetime],
) -> ReportQuery:
    """
    Step the query's window one unit back or forward.

    Month and year windows (including custom windows produced by earlier
    steps) move; last-six-months and hand-picked custom windows do not,
    and the query is returned unchanged.
    """
    mode = query.navigation_unit or query.range_mode
    if not mode.is_navigable:
        return query

    window = resolve_query(query, now)
    if isinstance(window, Unresolved):
        return query
    shift = shift_range(mode, window, direction)
    if not shift.shifted:
        return query

    return ReportQuery(
        tab=query.tab,
        range_mode=shift.mode,
        custom_start=shift.window.start,
        custom_end=shift.window.end,
        navigation_unit=mode,
    )
