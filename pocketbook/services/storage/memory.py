"""
In-Memory Storage Implementation

Used by tests and by sessions that should not touch the disk.
"""

from typing import Optional

from pocketbook.services.storage.interface import KeyValueStoreInterface, StorageError


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """
    Dict-backed key-value store.

    Set fail_reads / fail_writes to simulate a broken backend.
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self.fail_reads = False
        self.fail_writes = False

    @property
    def data(self) -> dict[str, str]:
        return self._data

    async def get_item(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StorageError(f"Simulated read failure for {key}")
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageError(f"Simulated write failure for {key}")
        self._data[key] = value

    async def remove_item(self, key: str) -> None:
        if self.fail_writes:
            raise StorageError(f"Simulated write failure for {key}")
        self._data.pop(key, None)

    async def keys(self) -> list[str]:
        return list(self._data.keys())
