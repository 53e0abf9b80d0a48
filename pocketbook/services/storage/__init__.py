"""
Storage Services Package

Provides the abstract key-value interface, its implementations and the
typed collection stores built on top of it.
"""

from pocketbook.services.storage.interface import (
    AuditStorageInterface,
    CorruptDataError,
    KeyValueStoreInterface,
    StorageConnectionError,
    StorageError,
)
from pocketbook.services.storage.json_file import JsonFileKeyValueStore
from pocketbook.services.storage.memory import InMemoryKeyValueStore
from pocketbook.services.storage.audit_storage import AUDIT_LOG_KEY, KeyValueAuditStorage
from pocketbook.services.storage.collections import (
    ACCOUNTS_KEY,
    EXPENSE_CATEGORIES_KEY,
    GROUPS_KEY,
    INCOME_CATEGORIES_KEY,
    LAST_CATEGORY_KEY,
    SPLIT_HISTORY_KEY,
    SPLIT_MEMBERS_KEY,
    TRANSACTIONS_KEY,
    CategoryStore,
    CollectionStore,
    account_store,
    group_store,
    split_history_store,
    split_member_store,
    transaction_store,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStoreInterface",
    # Exceptions
    "CorruptDataError",
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueAuditStorage",
    # Collections
    "CategoryStore",
    "CollectionStore",
    "account_store",
    "group_store",
    "split_history_store",
    "split_member_store",
    "transaction_store",
    # Keys
    "ACCOUNTS_KEY",
    "AUDIT_LOG_KEY",
    "EXPENSE_CATEGORIES_KEY",
    "GROUPS_KEY",
    "INCOME_CATEGORIES_KEY",
    "LAST_CATEGORY_KEY",
    "SPLIT_HISTORY_KEY",
    "SPLIT_MEMBERS_KEY",
    "TRANSACTIONS_KEY",
]
