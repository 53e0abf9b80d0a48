"""Report computation package."""

from pocketbook.reporting.aggregator import aggregate, filter_transactions
from pocketbook.reporting.engine import compute_report, resolve_query, shift_query
from pocketbook.reporting.ranges import add_months, month_end, resolve_range, shift_range

__all__ = [
    "add_months",
    "aggregate",
    "compute_report",
    "filter_transactions",
    "month_end",
    "resolve_query",
    "resolve_range",
    "shift_query",
    "shift_range",
]
