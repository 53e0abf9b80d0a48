"""
Data Models Package

This package contains all Pydantic models used in Pocketbook.
Everything read from or written to the store conforms to these schemas.
"""

from pocketbook.models.ledger import (
    CURRENCIES,
    Account,
    AccountIcon,
    CategoryBookState,
    Currency,
    Group,
    JoinOutcome,
    SplitHistoryEntry,
    SplitMember,
    SplitShare,
    TransactionRecord,
    TransactionType,
    new_id,
    parse_amount,
)
from pocketbook.models.report import (
    CategorySlice,
    DateWindow,
    NavigationDirection,
    RangeMode,
    RangeShift,
    ReportQuery,
    ReportResult,
    ReportTab,
    Unresolved,
)
from pocketbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "CURRENCIES",
    "Account",
    "AccountIcon",
    "CategoryBookState",
    "Currency",
    "Group",
    "JoinOutcome",
    "SplitHistoryEntry",
    "SplitMember",
    "SplitShare",
    "TransactionRecord",
    "TransactionType",
    "new_id",
    "parse_amount",
    # Report models
    "CategorySlice",
    "DateWindow",
    "NavigationDirection",
    "RangeMode",
    "RangeShift",
    "ReportQuery",
    "ReportResult",
    "ReportTab",
    "Unresolved",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
