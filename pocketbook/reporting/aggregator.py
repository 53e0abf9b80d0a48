"""
Report Aggregation

Filters transactions by tab and window, then sums them per category
and overall.

Sign convention: expenses count negative, income positive.
- BALANCE total is the signed net sum (may be negative)
- EXPENSE / INCOME totals sum absolute values (never negative)

Records with unparseable amounts stay in the filtered list but
contribute nothing; their ids are reported in skipped_ids.
"""

from typing import Iterable

from pocketbook.models.ledger import TransactionRecord
from pocketbook.models.report import DateWindow, ReportResult, ReportTab


def filter_transactions(
    transactions: Iterable[TransactionRecord],
    tab: ReportTab,
    window: DateWindow,
) -> list[TransactionRecord]:
    """Records counted by the tab whose day falls inside the window."""
    return [
        record for record in transactions
        if tab.includes(record.type) and window.contains(record.date)
    ]


def aggregate(
    transactions: Iterable[TransactionRecord],
    tab: ReportTab,
    window: DateWindow,
) -> ReportResult:
    """
    Aggregate a snapshot of transactions for one tab and window.

    Never raises for representable input; an empty selection yields an
    empty breakdown with a zero total.
    """
    filtered = filter_transactions(transactions, tab, window)

    by_category: dict[str, float] = {}
    skipped_ids: list[str] = []
    total = 0.0

    for record in filtered:
        signed = record.signed_amount
        if signed is None:
            skipped_ids.append(record.id)
            continue

        by_category[record.category] = by_category.get(record.category, 0.0) + signed

        if tab == ReportTab.BALANCE:
            total += signed
        else:
            total += abs(signed)

    return ReportResult(
        window_start=window.start,
        window_end=window.end,
        filtered=filtered,
        by_category=by_category,
        total=total,
        skipped_ids=skipped_ids,
    )
