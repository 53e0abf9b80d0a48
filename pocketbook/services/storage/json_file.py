"""
JSON File Storage Implementation

DESIGN DECISION: The whole store is one JSON object on disk mapping each
key to its serialized text blob, mirroring how a mobile key-value store
lays data out.

TRADEOFFS:
- Every write rewrites the file (fine for personal-ledger volumes)
- No cross-key transactions (callers save one collection at a time)

Writes go to a temporary file that replaces the original, so a crash
mid-write leaves the previous contents intact.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from pocketbook.config import get_settings
from pocketbook.services.storage.interface import (
    CorruptDataError,
    KeyValueStoreInterface,
    StorageConnectionError,
    StorageError,
)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value store persisted as a single JSON file.

    The file is read lazily on first access and cached in memory;
    every write flushes the full mapping back to disk.
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        write_retries: Optional[int] = None,
    ):
        settings = get_settings().storage
        self._path = Path(path) if path is not None else settings.data_path
        self._write_retries = write_retries or settings.write_retries
        self._data: Optional[dict[str, str]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        """Read the backing file into memory (once)."""
        if self._data is not None:
            return self._data

        if not self._path.exists():
            self._data = {}
            return self._data

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageConnectionError(f"Cannot read store file {self._path}: {e}")

        if not raw.strip():
            self._data = {}
            return self._data

        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Store file {self._path} is not valid JSON: {e}")

        if not isinstance(decoded, dict):
            raise CorruptDataError(f"Store file {self._path} must hold a JSON object")

        self._data = {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in decoded.items()}
        return self._data

    def _flush(self, data: dict[str, str]) -> None:
        """Write the mapping to disk, retrying transient OS errors."""
        write = retry(
            stop=stop_after_attempt(self._write_retries),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )(self._write_file)
        try:
            write(data)
        except OSError as e:
            raise StorageError(f"Failed to write store file {self._path}: {e}")

    def _write_file(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    async def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    async def set_item(self, key: str, value: str) -> None:
        data = dict(self._load())
        data[key] = value
        self._flush(data)
        self._data = data

    async def remove_item(self, key: str) -> None:
        data = dict(self._load())
        if key not in data:
            return
        del data[key]
        self._flush(data)
        self._data = data

    async def keys(self) -> list[str]:
        return list(self._load().keys())
