"""
Main Orchestrator for Pocketbook

Ties the store, the books and the report engine together, and holds the
report screen's session state.

DESIGN DECISION: The report flow owns the only mutable report state (the
current ReportQuery and the loaded transaction snapshot). Every report is
recomputed from scratch through compute_report, with "now" supplied by the
caller.
"""

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Union

import structlog

from pocketbook.audit import AuditLogger, configure_logging
from pocketbook.models.audit import AuditEventBuilder
from pocketbook.models.ledger import TransactionRecord
from pocketbook.models.report import (
    NavigationDirection,
    RangeMode,
    ReportQuery,
    ReportResult,
    ReportTab,
    Unresolved,
)
from pocketbook.ledger import AccountBook, GroupBook, SplitCalculator, TransactionBook
from pocketbook.reporting import compute_report, shift_query
from pocketbook.services.storage import (
    JsonFileKeyValueStore,
    KeyValueAuditStorage,
    KeyValueStoreInterface,
    transaction_store,
)

logger = structlog.get_logger("pocketbook.orchestrator")


class ReportFlow:
    """
    Session state for the report screen.

    Flow:
    1. refresh() loads the transaction snapshot from storage
    2. The user picks tab / range / custom dates or steps previous/next
    3. current(now) recomputes the report for the current query
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        query: Optional[ReportQuery] = None,
    ):
        self._transaction_store = transaction_store(store)
        self._audit_logger = audit_logger
        self._query = query or ReportQuery()
        self._transactions: list[TransactionRecord] = []

    @property
    def query(self) -> ReportQuery:
        return self._query

    @property
    def transactions(self) -> list[TransactionRecord]:
        return list(self._transactions)

    async def refresh(self) -> int:
        """Reload transactions from storage. Returns how many were loaded."""
        self._transactions = await self._transaction_store.load()
        return len(self._transactions)

    def use_transactions(self, transactions: list[TransactionRecord]) -> None:
        """Replace the snapshot, e.g. with a book's in-memory list."""
        self._transactions = list(transactions)

    def select_tab(self, tab: ReportTab) -> ReportQuery:
        self._query = self._query.with_tab(tab)
        return self._query

    def select_range(self, range_mode: RangeMode) -> ReportQuery:
        self._query = self._query.with_range_mode(range_mode)
        return self._query

    def set_custom_start(self, start: date) -> ReportQuery:
        self._query = self._query.with_custom_start(start)
        return self._query

    def set_custom_end(self, end: date) -> ReportQuery:
        self._query = self._query.with_custom_end(end)
        return self._query

    def shift(
        self,
        direction: NavigationDirection,
        now: Union[date, datetime],
    ) -> ReportQuery:
        """Step the window back or forward (no-op for non-navigable ranges)."""
        self._query = shift_query(self._query, direction, now)
        return self._query

    async def current(
        self,
        now: Union[date, datetime],
    ) -> Union[ReportResult, Unresolved]:
        """Compute the report for the current query and snapshot."""
        result = compute_report(self._transactions, self._query, now)

        if self._audit_logger:
            window = None
            count = 0
            if isinstance(result, ReportResult):
                window = result.window.describe()
                count = len(result.filtered)
            # Views go to the local log only
            await self._audit_logger.log(
                AuditEventBuilder.report_viewed(
                    tab=self._query.tab.value,
                    range_mode=self._query.range_mode.value,
                    window=window,
                    record_count=count,
                ),
                persist=False,
            )
        return result


@dataclass
class AppComponents:
    """Everything a front end needs, wired to one store."""

    store: KeyValueStoreInterface
    audit_logger: AuditLogger
    transactions: TransactionBook
    accounts: AccountBook
    groups: GroupBook
    splits: SplitCalculator
    reports: ReportFlow

    async def load_all(self) -> None:
        """Load every book and the report snapshot from storage."""
        await self.transactions.load()
        await self.accounts.load()
        await self.groups.load()
        await self.splits.load()
        await self.reports.refresh()


def create_app_components(
    store: Optional[KeyValueStoreInterface] = None,
    data_path: Optional[Path] = None,
    use_audit_storage: bool = True,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        store: Key-value store to use. Defaults to the JSON file
               configured in settings (or at data_path).
        data_path: Override for the JSON file location.
        use_audit_storage: Persist audit events in the store as well
               as logging them locally.
    """
    configure_logging()

    if store is None:
        store = JsonFileKeyValueStore(path=data_path)
        logger.info("store_opened", path=str(store.path))

    audit_logger = AuditLogger(KeyValueAuditStorage(store) if use_audit_storage else None)

    return AppComponents(
        store=store,
        audit_logger=audit_logger,
        transactions=TransactionBook(store, audit_logger),
        accounts=AccountBook(store, audit_logger),
        groups=GroupBook(store, audit_logger),
        splits=SplitCalculator(store, audit_logger),
        reports=ReportFlow(store, audit_logger),
    )
