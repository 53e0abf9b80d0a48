"""
Expense Splitting

Splits a total evenly between the selected members and keeps a history
of past calculations. Members and history are both persisted.

Each share is total / selected_count rounded half-up to the configured
number of decimals (whole units by default), so shares may not add up
to the total exactly.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pocketbook.audit import AuditLogger
from pocketbook.config import get_settings
from pocketbook.ledger.errors import EntryNotFoundError, NoMembersSelectedError
from pocketbook.models.audit import AuditEventBuilder
from pocketbook.models.ledger import (
    SplitHistoryEntry,
    SplitMember,
    SplitShare,
    parse_amount,
)
from pocketbook.services.storage import (
    KeyValueStoreInterface,
    split_history_store,
    split_member_store,
)


def default_members() -> list[SplitMember]:
    return [
        SplitMember(id="1", name="Alex", selected=True),
        SplitMember(id="2", name="Sam", selected=True),
    ]


def even_share(total: float, count: int, decimals: int) -> float:
    """total / count rounded half-up to `decimals` places."""
    quantum = Decimal(1).scaleb(-decimals)
    share = (Decimal(str(total)) / Decimal(count)).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(share)


class SplitCalculator:
    """Members, split calculation and history."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        share_decimals: Optional[int] = None,
    ):
        self._member_store = split_member_store(store)
        self._history_store = split_history_store(store)
        self._audit_logger = audit_logger
        if share_decimals is None:
            share_decimals = get_settings().app.split_share_decimals
        self._share_decimals = share_decimals
        self._members: list[SplitMember] = []
        self._history: list[SplitHistoryEntry] = []

    async def load(self) -> None:
        """Load members (defaults when none are stored) and history."""
        members = await self._member_store.load()
        self._members = members or default_members()
        self._history = await self._history_store.load()

    @property
    def members(self) -> list[SplitMember]:
        return list(self._members)

    @property
    def selected_members(self) -> list[SplitMember]:
        return [member for member in self._members if member.selected]

    @property
    def history(self) -> list[SplitHistoryEntry]:
        """Past calculations, newest first."""
        return list(self._history)

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    async def add_member(self, name: str) -> Optional[SplitMember]:
        """Add a selected member. Blank names are ignored (returns None)."""
        trimmed = (name or "").strip()
        if not trimmed:
            return None
        member = SplitMember(name=trimmed, selected=True)
        self._members.append(member)
        await self._persist_members()
        return member

    async def remove_member(self, member_id: str) -> SplitMember:
        index = self._member_index(member_id)
        member = self._members.pop(index)
        await self._persist_members()
        return member

    async def toggle_member(self, member_id: str) -> SplitMember:
        """Flip whether a member takes part in the next split."""
        index = self._member_index(member_id)
        current = self._members[index]
        toggled = current.model_copy(update={"selected": not current.selected})
        self._members[index] = toggled
        await self._persist_members()
        return toggled

    def _member_index(self, member_id: str) -> int:
        for index, member in enumerate(self._members):
            if member.id == member_id:
                return index
        raise EntryNotFoundError(f"Member not found: {member_id}")

    # -------------------------------------------------------------------------
    # Calculation
    # -------------------------------------------------------------------------

    async def calculate(
        self,
        total_text: str,
        now: Optional[datetime] = None,
    ) -> Optional[SplitHistoryEntry]:
        """
        Split a total evenly between the selected members.

        Returns:
            The new history entry, or None if the total is empty or
            not a number

        Raises:
            NoMembersSelectedError: If no member is selected
        """
        total = parse_amount(total_text)
        if total is None:
            return None

        selected = self.selected_members
        if not selected:
            raise NoMembersSelectedError("Select at least one member")

        share = even_share(total, len(selected), self._share_decimals)
        entry = SplitHistoryEntry(
            created_at=now or datetime.now(),
            amount=total,
            shares=[
                SplitShare(member_id=member.id, member_name=member.name, amount=share)
                for member in selected
            ],
        )

        self._history.insert(0, entry)
        await self._persist_history()
        if self._audit_logger:
            await self._audit_logger.log(
                AuditEventBuilder.split_calculated(entry.id, total, len(selected))
            )
        return entry

    async def delete_history_entry(self, entry_id: str) -> SplitHistoryEntry:
        for index, entry in enumerate(self._history):
            if entry.id == entry_id:
                del self._history[index]
                await self._persist_history()
                return entry
        raise EntryNotFoundError(f"History entry not found: {entry_id}")

    async def _persist_members(self) -> bool:
        saved = await self._member_store.save(self._members)
        if not saved and self._audit_logger:
            await self._audit_logger.log_storage_error(
                self._member_store.key, "Split members could not be saved"
            )
        return saved

    async def _persist_history(self) -> bool:
        saved = await self._history_store.save(self._history)
        if not saved and self._audit_logger:
            await self._audit_logger.log_storage_error(
                self._history_store.key, "Split history could not be saved"
            )
        return saved
