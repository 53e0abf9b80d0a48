"""
Audit Models for Pocketbook

Every change to stored state is recorded as an AuditEvent.
This provides:
1. A history of what was added, edited and removed
2. Debugging information when a write to the store fails

DESIGN DECISION: Audit logs are append-only. Events are never modified;
only the oldest ones are dropped once the configured history limit is hit.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTIONS_CLEARED = "transactions_cleared"

    # Categories
    CATEGORY_ADDED = "category_added"
    CATEGORY_DELETED = "category_deleted"

    # Accounts
    ACCOUNT_SAVED = "account_saved"
    ACCOUNT_DELETED = "account_deleted"

    # Groups
    GROUP_CREATED = "group_created"
    GROUP_DELETED = "group_deleted"

    # Splitting
    SPLIT_CALCULATED = "split_calculated"

    # Reports
    REPORT_VIEWED = "report_viewed"

    # System events
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every state change creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'account', 'group')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(record)
        event = AuditEventBuilder.storage_error("transactions", "disk full")
    """

    @staticmethod
    def transaction_added(
        transaction_id: str,
        transaction_type: str,
        category: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Logged {transaction_type} of {amount} in {category}",
            details={
                "type": transaction_type,
                "category": category,
                "amount": amount,
            },
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
        )

    @staticmethod
    def transactions_cleared(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_CLEARED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            description=f"All transactions cleared ({count} removed)",
            details={"removed": count},
        )

    @staticmethod
    def category_changed(
        transaction_type: str,
        name: str,
        added: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.CATEGORY_ADDED if added else AuditEventType.CATEGORY_DELETED
            ),
            entity_type="category",
            description=f"{'Added' if added else 'Deleted'} {transaction_type} category {name}",
            details={"type": transaction_type, "name": name},
        )

    @staticmethod
    def account_saved(account_id: str, name: str, is_new: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_SAVED,
            entity_type="account",
            entity_id=account_id,
            description=f"Account {'created' if is_new else 'updated'}: {name}",
            details={"name": name, "is_new": is_new},
        )

    @staticmethod
    def account_deleted(account_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_DELETED,
            entity_type="account",
            entity_id=account_id,
            description="Account deleted",
        )

    @staticmethod
    def group_created(group_id: str, name: str, code: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GROUP_CREATED,
            entity_type="group",
            entity_id=group_id,
            description=f"Group created: {name}",
            details={"name": name, "code": code},
        )

    @staticmethod
    def group_deleted(group_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GROUP_DELETED,
            entity_type="group",
            entity_id=group_id,
            description="Group deleted",
        )

    @staticmethod
    def split_calculated(
        entry_id: str,
        amount: float,
        participants: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_CALCULATED,
            entity_type="split",
            entity_id=entry_id,
            description=f"Split {amount:g} between {participants} members",
            details={"amount": amount, "participants": participants},
        )

    @staticmethod
    def report_viewed(
        tab: str,
        range_mode: str,
        window: Optional[str],
        record_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_VIEWED,
            severity=AuditSeverity.DEBUG,
            entity_type="report",
            description=f"Viewed {tab} report ({range_mode})",
            details={
                "tab": tab,
                "range_mode": range_mode,
                "window": window,
                "record_count": record_count,
            },
        )

    @staticmethod
    def storage_error(collection: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            description=f"Could not write {collection}",
            details={"collection": collection},
            error_message=error_message,
        )
