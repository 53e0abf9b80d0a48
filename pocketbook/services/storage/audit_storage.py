"""
Key-Value Audit Storage

Keeps the most recent audit events as a JSON array under one key.
The oldest events are dropped once the configured limit is reached.
"""

import json
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from pocketbook.config import get_settings
from pocketbook.models.audit import AuditEvent
from pocketbook.services.storage.interface import (
    AuditStorageInterface,
    CorruptDataError,
    KeyValueStoreInterface,
)

AUDIT_LOG_KEY = "auditLog"

_events_adapter = TypeAdapter(list[AuditEvent])


class KeyValueAuditStorage(AuditStorageInterface):
    """Audit log kept in the same key-value store as the ledger data."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        history_limit: Optional[int] = None,
    ):
        self._store = store
        self._history_limit = history_limit or get_settings().app.audit_history_limit

    async def _read(self) -> list[AuditEvent]:
        raw = await self._store.get_item(AUDIT_LOG_KEY)
        if raw is None:
            return []
        try:
            return _events_adapter.validate_json(raw)
        except (ValidationError, json.JSONDecodeError) as e:
            raise CorruptDataError(f"Audit log cannot be decoded: {e}")

    async def append_event(self, event: AuditEvent) -> bool:
        try:
            events = await self._read()
        except CorruptDataError:
            # Start a fresh log rather than refusing every future event
            events = []
        events.append(event)
        events = events[-self._history_limit:]
        await self._store.set_item(
            AUDIT_LOG_KEY,
            _events_adapter.dump_json(events).decode("utf-8"),
        )
        return True

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        events = await self._read()
        return list(reversed(events))[:limit]
