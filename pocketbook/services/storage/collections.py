"""
Typed Collection Stores

Each stored collection (transactions, accounts, groups, ...) is a JSON
array kept under one key of the key-value store.

CRITICAL: Storage failures never escape from here. Loads fall back to
an empty collection and saves report False; both are logged. The caller's
in-memory state stays authoritative for the session.
"""

import json
from typing import Generic, Optional, TypeVar

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from pocketbook.models.ledger import (
    Account,
    CategoryBookState,
    Group,
    SplitHistoryEntry,
    SplitMember,
    TransactionRecord,
)
from pocketbook.services.storage.interface import KeyValueStoreInterface, StorageError


# Keys used by the original mobile build, kept so existing data loads as-is
TRANSACTIONS_KEY = "transactions"
ACCOUNTS_KEY = "accounts"
GROUPS_KEY = "groups"
SPLIT_MEMBERS_KEY = "@split_expense_members"
SPLIT_HISTORY_KEY = "@split_expense_history"
EXPENSE_CATEGORIES_KEY = "expenseCategories"
INCOME_CATEGORIES_KEY = "incomeCategories"
LAST_CATEGORY_KEY = "lastCategory"

ModelT = TypeVar("ModelT", bound=BaseModel)

logger = structlog.get_logger("pocketbook.storage")


class CollectionStore(Generic[ModelT]):
    """
    Loads and saves a list of one model type under one key.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        key: str,
        model: type[ModelT],
    ):
        self._store = store
        self._key = key
        self._model = model

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> list[ModelT]:
        """
        Load the collection.

        A missing key is an empty collection. Items that fail validation
        are skipped individually so one bad row does not hide the rest.
        """
        try:
            raw = await self._store.get_item(self._key)
        except StorageError as e:
            logger.error("collection_load_failed", key=self._key, error=str(e))
            return []

        if raw is None:
            return []

        try:
            items = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("collection_decode_failed", key=self._key, error=str(e))
            return []

        if not isinstance(items, list):
            logger.error("collection_not_a_list", key=self._key)
            return []

        loaded = []
        for index, item in enumerate(items):
            try:
                loaded.append(self._model.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    "collection_item_skipped",
                    key=self._key,
                    index=index,
                    error=str(e),
                )
        return loaded

    async def save(self, items: list[ModelT]) -> bool:
        """
        Replace the stored collection.

        Returns True on success, False (logged) on failure.
        """
        adapter = TypeAdapter(list[self._model])
        payload = adapter.dump_json(list(items)).decode("utf-8")
        try:
            await self._store.set_item(self._key, payload)
        except StorageError as e:
            logger.error(
                "collection_save_failed",
                key=self._key,
                count=len(items),
                error=str(e),
            )
            return False
        return True


class CategoryStore:
    """
    Persists the per-type category lists and the last used category.

    Lists are JSON arrays of strings; the last category is stored as
    plain text, matching the original key layout.
    """

    def __init__(self, store: KeyValueStoreInterface):
        self._store = store

    async def _load_list(self, key: str) -> Optional[list[str]]:
        try:
            raw = await self._store.get_item(key)
        except StorageError as e:
            logger.error("categories_load_failed", key=key, error=str(e))
            return None
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("categories_decode_failed", key=key, error=str(e))
            return None
        if not isinstance(value, list):
            logger.error("categories_not_a_list", key=key)
            return None
        return [str(item).strip() for item in value if str(item).strip()]

    async def load(self, defaults: CategoryBookState) -> CategoryBookState:
        """Load stored lists, falling back to the given defaults per list."""
        expense = await self._load_list(EXPENSE_CATEGORIES_KEY)
        income = await self._load_list(INCOME_CATEGORIES_KEY)

        last_category = None
        try:
            last_category = await self._store.get_item(LAST_CATEGORY_KEY)
        except StorageError as e:
            logger.error("last_category_load_failed", error=str(e))

        return CategoryBookState(
            expense=expense or list(defaults.expense),
            income=income or list(defaults.income),
            last_category=last_category or None,
        )

    async def save_lists(self, state: CategoryBookState) -> bool:
        try:
            await self._store.set_item(EXPENSE_CATEGORIES_KEY, json.dumps(state.expense, ensure_ascii=False))
            await self._store.set_item(INCOME_CATEGORIES_KEY, json.dumps(state.income, ensure_ascii=False))
        except StorageError as e:
            logger.error("categories_save_failed", error=str(e))
            return False
        return True

    async def save_last_category(self, category: str) -> bool:
        try:
            await self._store.set_item(LAST_CATEGORY_KEY, category)
        except StorageError as e:
            logger.error("last_category_save_failed", error=str(e))
            return False
        return True


def transaction_store(store: KeyValueStoreInterface) -> CollectionStore[TransactionRecord]:
    return CollectionStore(store, TRANSACTIONS_KEY, TransactionRecord)


def account_store(store: KeyValueStoreInterface) -> CollectionStore[Account]:
    return CollectionStore(store, ACCOUNTS_KEY, Account)


def group_store(store: KeyValueStoreInterface) -> CollectionStore[Group]:
    return CollectionStore(store, GROUPS_KEY, Group)


def split_member_store(store: KeyValueStoreInterface) -> CollectionStore[SplitMember]:
    return CollectionStore(store, SPLIT_MEMBERS_KEY, SplitMember)


def split_history_store(store: KeyValueStoreInterface) -> CollectionStore[SplitHistoryEntry]:
    return CollectionStore(store, SPLIT_HISTORY_KEY, SplitHistoryEntry)
