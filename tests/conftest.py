"""
Shared fixtures.

Settings are pointed at a per-test temporary store file so no test can
touch a real ledger, and the settings cache is cleared around each test.
"""

import os
from datetime import date
from pathlib import Path

import pytest

from pocketbook.config import get_settings
from pocketbook.models.ledger import TransactionRecord, TransactionType
from pocketbook.services.storage import InMemoryKeyValueStore


@pytest.fixture(autouse=True)
def _isolate_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("POCKETBOOK_STORAGE_DATA_PATH", os.fspath(tmp_path / "store.json"))
    monkeypatch.delenv("POCKETBOOK_LOG_LEVEL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def make_record():
    """Build a TransactionRecord with short positional arguments."""
    def _make(amount, type_, category, day: date, record_id=None):
        fields = {
            "amount": amount,
            "type": type_,
            "category": category,
            "date": day,
        }
        if record_id is not None:
            fields["id"] = record_id
        return TransactionRecord(**fields)
    return _make


@pytest.fixture
def march_records(make_record):
    return [
        make_record("100", TransactionType.EXPENSE, "Food", date(2024, 3, 5), "food-1"),
        make_record("50", TransactionType.INCOME, "Bonus", date(2024, 3, 10), "bonus-1"),
    ]
