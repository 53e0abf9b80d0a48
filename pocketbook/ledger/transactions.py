"""
Transaction Book

Logging of income and expenses plus the per-type category lists.

Flow for a new entry:
1. Validate amount (must parse to a positive number)
2. Pick the category (given, last used, or first of the type)
3. Prepend the record (newest first) and persist
4. Remember the category for next time
"""

from datetime import date
from typing import Optional

from pocketbook.audit import AuditLogger
from pocketbook.ledger.errors import (
    DuplicateCategoryError,
    EntryNotFoundError,
    InvalidAmountError,
    InvalidCategoryError,
    LastCategoryError,
)
from pocketbook.models.audit import AuditEventBuilder
from pocketbook.models.ledger import (
    CategoryBookState,
    TransactionRecord,
    TransactionType,
    parse_amount,
)
from pocketbook.services.storage import (
    CategoryStore,
    KeyValueStoreInterface,
    transaction_store,
)


DEFAULT_EXPENSE_CATEGORIES = ["Food", "Transport", "Rent", "Entertainment", "Shopping", "Education"]
DEFAULT_INCOME_CATEGORIES = ["Salary", "Bonus", "Investment", "Other"]


def default_categories() -> CategoryBookState:
    return CategoryBookState(
        expense=list(DEFAULT_EXPENSE_CATEGORIES),
        income=list(DEFAULT_INCOME_CATEGORIES),
    )


class TransactionBook:
    """
    In-memory transaction list backed by the key-value store.

    The in-memory list is authoritative for the session; a failed save
    is logged and the list keeps the change.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._transaction_store = transaction_store(store)
        self._category_store = CategoryStore(store)
        self._audit_logger = audit_logger
        self._records: list[TransactionRecord] = []
        self._categories = default_categories()

    async def load(self) -> None:
        """Load transactions and categories from storage."""
        self._records = await self._transaction_store.load()
        self._categories = await self._category_store.load(default_categories())

    @property
    def transactions(self) -> list[TransactionRecord]:
        """Snapshot of all records, newest first."""
        return list(self._records)

    @property
    def last_category(self) -> Optional[str]:
        return self._categories.last_category

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    async def add_transaction(
        self,
        amount: str,
        transaction_type: TransactionType,
        category: Optional[str] = None,
        note: Optional[str] = None,
        on: Optional[date] = None,
    ) -> TransactionRecord:
        """
        Log a new transaction.

        Raises:
            InvalidAmountError: If the amount is empty, not a number,
                or not greater than zero
        """
        text = str(amount).strip() if amount is not None else ""
        if not text:
            raise InvalidAmountError("Please enter an amount")
        value = parse_amount(text)
        if value is None:
            raise InvalidAmountError(f"Amount is not a number: {text}")
        if value <= 0:
            raise InvalidAmountError("Amount must be greater than zero")

        chosen = (category or "").strip() or self.default_category(transaction_type)

        fields = {
            "amount": text,
            "type": transaction_type,
            "category": chosen,
            "note": note,
        }
        if on is not None:
            fields["date"] = on
        record = TransactionRecord(**fields)

        self._records.insert(0, record)
        await self._save_transactions()

        self._categories.last_category = chosen
        await self._category_store.save_last_category(chosen)

        if self._audit_logger:
            await self._audit_logger.log(AuditEventBuilder.transaction_added(
                transaction_id=record.id,
                transaction_type=record.type.value,
                category=record.category,
                amount=record.amount,
            ))
        return record

    async def delete_transaction(self, transaction_id: str) -> TransactionRecord:
        """
        Remove one transaction.

        Raises:
            EntryNotFoundError: If no transaction has that id
        """
        for index, record in enumerate(self._records):
            if record.id == transaction_id:
                del self._records[index]
                await self._save_transactions()
                if self._audit_logger:
                    await self._audit_logger.log(
                        AuditEventBuilder.transaction_deleted(transaction_id)
                    )
                return record
        raise EntryNotFoundError(f"Transaction not found: {transaction_id}")

    async def clear_all(self) -> int:
        """Remove every transaction. Returns how many were removed."""
        removed = len(self._records)
        self._records = []
        await self._save_transactions()
        if self._audit_logger:
            await self._audit_logger.log(AuditEventBuilder.transactions_cleared(removed))
        return removed

    async def _save_transactions(self) -> bool:
        saved = await self._transaction_store.save(self._records)
        if not saved and self._audit_logger:
            await self._audit_logger.log_storage_error(
                self._transaction_store.key, "Transactions could not be saved"
            )
        return saved

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def categories_for(self, transaction_type: TransactionType) -> list[str]:
        return list(self._categories.for_type(transaction_type))

    def default_category(self, transaction_type: TransactionType) -> str:
        """Last used category if it belongs to this type, else the first one."""
        categories = self._categories.for_type(transaction_type)
        last = self._categories.last_category
        if last and last in categories:
            return last
        return categories[0]

    async def add_category(self, transaction_type: TransactionType, name: str) -> str:
        """
        Add a category for a transaction type.

        Raises:
            InvalidCategoryError: If the name is blank
            DuplicateCategoryError: If the type already has it
        """
        trimmed = (name or "").strip()
        if not trimmed:
            raise InvalidCategoryError("Category name cannot be empty")

        categories = self._categories.for_type(transaction_type)
        if trimmed in categories:
            raise DuplicateCategoryError(f"Category already exists: {trimmed}")

        categories.append(trimmed)
        await self._category_store.save_lists(self._categories)
        if self._audit_logger:
            await self._audit_logger.log(AuditEventBuilder.category_changed(
                transaction_type.value, trimmed, added=True,
            ))
        return trimmed

    async def delete_category(self, transaction_type: TransactionType, name: str) -> str:
        """
        Delete a category. Existing transactions keep their label.

        Returns:
            The category that becomes the default selection

        Raises:
            EntryNotFoundError: If the type has no such category
            LastCategoryError: If it is the type's only category
        """
        categories = self._categories.for_type(transaction_type)
        if name not in categories:
            raise EntryNotFoundError(f"Category not found: {name}")
        if len(categories) == 1:
            raise LastCategoryError("At least one category is required")

        categories.remove(name)
        if self._categories.last_category == name:
            self._categories.last_category = None
        await self._category_store.save_lists(self._categories)
        if self._audit_logger:
            await self._audit_logger.log(AuditEventBuilder.category_changed(
                transaction_type.value, name, added=False,
            ))
        return categories[0]
