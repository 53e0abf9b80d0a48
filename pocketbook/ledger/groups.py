"""
Group Book

Groups are identified by a short upper-case join code that can be
shared with others. Joining only checks the locally known groups;
there is no server to look codes up on.
"""

import secrets
import string
from typing import Optional

from pocketbook.audit import AuditLogger
from pocketbook.config import get_settings
from pocketbook.ledger.errors import EntryNotFoundError, InvalidGroupError
from pocketbook.models.audit import AuditEventBuilder
from pocketbook.models.ledger import Group, JoinOutcome
from pocketbook.services.storage import KeyValueStoreInterface, group_store


CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_code(length: Optional[int] = None) -> str:
    length = length or get_settings().app.group_code_length
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


class GroupBook:
    """Group list backed by the key-value store, newest first."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = group_store(store)
        self._audit_logger = audit_logger
        self._groups: list[Group] = []

    async def load(self) -> None:
        self._groups = await self._store.load()

    @property
    def groups(self) -> list[Group]:
        return list(self._groups)

    async def create_group(self, name: str) -> Group:
        """
        Create a group with a fresh join code.

        Raises:
            InvalidGroupError: If the name is blank
        """
        trimmed = (name or "").strip()
        if not trimmed:
            raise InvalidGroupError("Group name cannot be empty")

        existing = {group.code for group in self._groups}
        code = generate_code()
        while code in existing:
            code = generate_code()

        group = Group(name=trimmed, code=code)
        self._groups.insert(0, group)
        await self._persist()
        if self._audit_logger:
            await self._audit_logger.log(
                AuditEventBuilder.group_created(group.id, group.name, group.code)
            )
        return group

    def join_group(self, code: str) -> JoinOutcome:
        """Check a join code against the locally known groups."""
        normalized = normalize_code(code)
        if not normalized:
            return JoinOutcome.EMPTY_CODE
        if any(group.code == normalized for group in self._groups):
            return JoinOutcome.ALREADY_JOINED
        return JoinOutcome.NOT_FOUND

    async def delete_group(self, group_id: str) -> Group:
        for index, group in enumerate(self._groups):
            if group.id == group_id:
                del self._groups[index]
                await self._persist()
                if self._audit_logger:
                    await self._audit_logger.log(AuditEventBuilder.group_deleted(group_id))
                return group
        raise EntryNotFoundError(f"Group not found: {group_id}")

    async def _persist(self) -> bool:
        saved = await self._store.save(self._groups)
        if not saved and self._audit_logger:
            await self._audit_logger.log_storage_error(
                self._store.key, "Groups could not be saved"
            )
        return saved
