"""
Tests for the storage layer.

The JSON-file store runs against a temporary directory; everything else
uses the in-memory store, with fail_reads / fail_writes standing in for
a broken backend.
"""

import asyncio
import json

import pytest

from pocketbook.audit import AuditLogger
from pocketbook.models.audit import AuditEventBuilder, AuditEventType
from pocketbook.models.ledger import (
    Account,
    CategoryBookState,
    TransactionRecord,
    TransactionType,
)
from pocketbook.services.storage import (
    AUDIT_LOG_KEY,
    EXPENSE_CATEGORIES_KEY,
    LAST_CATEGORY_KEY,
    TRANSACTIONS_KEY,
    CategoryStore,
    CorruptDataError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueAuditStorage,
    account_store,
    transaction_store,
)


class TestJsonFileStore:
    """Tests for JsonFileKeyValueStore."""

    def test_missing_file_is_empty(self, tmp_path):
        """Test missing file is empty."""
        store = JsonFileKeyValueStore(path=tmp_path / "store.json")
        assert asyncio.run(store.get_item("transactions")) is None
        assert asyncio.run(store.keys()) == []

    def test_values_survive_a_new_instance(self, tmp_path):
        """Test values survive a new instance."""
        path = tmp_path / "nested" / "store.json"
        asyncio.run(JsonFileKeyValueStore(path=path).set_item("lastCategory", "食物"))

        reopened = JsonFileKeyValueStore(path=path)
        assert asyncio.run(reopened.get_item("lastCategory")) == "食物"
        assert json.loads(path.read_text(encoding="utf-8")) == {"lastCategory": "食物"}

    def test_remove_item(self, tmp_path):
        """Test removing present and missing keys."""
        store = JsonFileKeyValueStore(path=tmp_path / "store.json")
        asyncio.run(store.set_item("a", "1"))
        asyncio.run(store.set_item("b", "2"))
        asyncio.run(store.remove_item("a"))
        asyncio.run(store.remove_item("missing"))
        assert asyncio.run(store.keys()) == ["b"]

    def test_no_temp_files_left_behind(self, tmp_path):
        """Test no temp files left behind."""
        store = JsonFileKeyValueStore(path=tmp_path / "store.json")
        asyncio.run(store.set_item("a", "1"))
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    def test_invalid_json_is_corrupt(self, tmp_path):
        """Test invalid json is corrupt."""
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonFileKeyValueStore(path=path)
        with pytest.raises(CorruptDataError):
            asyncio.run(store.get_item("transactions"))

    def test_non_object_is_corrupt(self, tmp_path):
        """Test non object is corrupt."""
        path = tmp_path / "store.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(CorruptDataError):
            asyncio.run(JsonFileKeyValueStore(path=path).keys())

    def test_default_path_comes_from_settings(self, tmp_path):
        """Test default path comes from settings."""
        store = JsonFileKeyValueStore()
        assert store.path == tmp_path / "store.json"


class TestCollectionStore:
    """Tests for the typed collection stores."""

    def test_round_trip(self, store):
        """Test saving and loading a collection."""
        records = [
            TransactionRecord(amount="12", type=TransactionType.EXPENSE, category="Food", date="2024-03-05"),
        ]
        collection = transaction_store(store)
        assert asyncio.run(collection.save(records)) is True
        assert asyncio.run(collection.load()) == records

    def test_missing_key_loads_empty(self, store):
        """Test missing key loads empty."""
        assert asyncio.run(transaction_store(store).load()) == []

    def test_loads_legacy_blob(self):
        """Test loads legacy blob."""
        legacy = [
            {"id": "1", "amount": "120", "type": "支出", "category": "食物",
             "note": "", "date": "2024-03-05"},
            {"id": "2", "amount": 3000, "type": "收入", "category": "薪資",
             "note": "March", "date": "2024-03-01"},
        ]
        store = InMemoryKeyValueStore({TRANSACTIONS_KEY: json.dumps(legacy, ensure_ascii=False)})
        loaded = asyncio.run(transaction_store(store).load())
        assert [r.type for r in loaded] == [TransactionType.EXPENSE, TransactionType.INCOME]
        assert loaded[0].note is None
        assert loaded[1].amount == "3000"

    def test_loads_legacy_account_keys(self):
        """Test loads legacy account keys."""
        legacy = [{"id": "1", "name": "Card", "balance": 500, "creditLimit": 20000,
                   "icon": "credit-card", "currency": "NT$"}]
        store = InMemoryKeyValueStore({"accounts": json.dumps(legacy)})
        loaded = asyncio.run(account_store(store).load())
        assert loaded == [Account(id="1", name="Card", balance=500, credit_limit=20000,
                                  icon="credit-card", currency="NT$")]

    def test_invalid_items_are_skipped(self):
        """Test invalid items are skipped."""
        blob = [
            {"id": "ok", "amount": "1", "type": "expense", "category": "Food", "date": "2024-03-05"},
            {"id": "bad", "amount": "1", "type": "transfer", "category": "Food"},
            "not an object",
        ]
        store = InMemoryKeyValueStore({TRANSACTIONS_KEY: json.dumps(blob)})
        loaded = asyncio.run(transaction_store(store).load())
        assert [r.id for r in loaded] == ["ok"]

    @pytest.mark.parametrize("raw", ["{broken", '{"a": 1}'])
    def test_undecodable_collection_loads_empty(self, raw):
        """Test undecodable collection loads empty."""
        store = InMemoryKeyValueStore({TRANSACTIONS_KEY: raw})
        assert asyncio.run(transaction_store(store).load()) == []

    def test_read_failure_loads_empty(self, store):
        """Test read failure loads empty."""
        store.fail_reads = True
        assert asyncio.run(transaction_store(store).load()) == []

    def test_write_failure_returns_false(self, store):
        """Test write failure returns false."""
        store.fail_writes = True
        record = TransactionRecord(amount="1", type="expense", category="Food")
        assert asyncio.run(transaction_store(store).save([record])) is False
        assert TRANSACTIONS_KEY not in store.data


class TestCategoryStore:
    """Tests for CategoryStore."""

    def test_defaults_when_nothing_stored(self, store):
        """Test defaults when nothing stored."""
        defaults = CategoryBookState(expense=["Food"], income=["Salary"])
        state = asyncio.run(CategoryStore(store).load(defaults))
        assert state == defaults

    def test_saved_lists_and_last_category(self, store):
        """Test saved lists and last category."""
        categories = CategoryStore(store)
        state = CategoryBookState(expense=["食物", "Pets"], income=["Salary"])
        asyncio.run(categories.save_lists(state))
        asyncio.run(categories.save_last_category("Pets"))

        assert json.loads(store.data[EXPENSE_CATEGORIES_KEY]) == ["食物", "Pets"]
        assert store.data[LAST_CATEGORY_KEY] == "Pets"

        loaded = asyncio.run(categories.load(CategoryBookState(expense=["x"], income=["y"])))
        assert loaded.expense == ["食物", "Pets"]
        assert loaded.income == ["Salary"]
        assert loaded.last_category == "Pets"

    def test_empty_stored_list_falls_back_to_defaults(self):
        """Test empty stored list falls back to defaults."""
        store = InMemoryKeyValueStore({EXPENSE_CATEGORIES_KEY: "[]"})
        state = asyncio.run(CategoryStore(store).load(CategoryBookState(expense=["Food"], income=["Salary"])))
        assert state.expense == ["Food"]


class TestAuditStorage:
    """Tests for KeyValueAuditStorage."""

    def test_recent_events_newest_first(self, store):
        """Test recent events newest first."""
        storage = KeyValueAuditStorage(store)
        for transaction_id in ("a", "b", "c"):
            asyncio.run(storage.append_event(AuditEventBuilder.transaction_deleted(transaction_id)))
        events = asyncio.run(storage.get_recent_events(limit=2))
        assert [e.entity_id for e in events] == ["c", "b"]

    def test_history_is_capped(self, store):
        """Test history is capped."""
        storage = KeyValueAuditStorage(store, history_limit=3)
        for index in range(5):
            asyncio.run(storage.append_event(AuditEventBuilder.transactions_cleared(index)))
        events = asyncio.run(storage.get_recent_events())
        assert len(events) == 3
        assert all(e.event_type == AuditEventType.TRANSACTIONS_CLEARED for e in events)
        assert len(json.loads(store.data[AUDIT_LOG_KEY])) == 3

    def test_logger_can_skip_storage(self, store):
        """Test that events logged with persist=False are not stored."""
        audit_logger = AuditLogger(KeyValueAuditStorage(store))
        event = AuditEventBuilder.report_viewed("expense", "month", None, 0)
        assert asyncio.run(audit_logger.log(event, persist=False)) is True
        assert AUDIT_LOG_KEY not in store.data

    def test_corrupt_log_is_replaced(self):
        """Test corrupt log is replaced."""
        store = InMemoryKeyValueStore({AUDIT_LOG_KEY: "garbage"})
        storage = KeyValueAuditStorage(store)
        with pytest.raises(CorruptDataError):
            asyncio.run(storage.get_recent_events())
        asyncio.run(storage.append_event(AuditEventBuilder.transaction_deleted("x")))
        assert len(asyncio.run(storage.get_recent_events())) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
