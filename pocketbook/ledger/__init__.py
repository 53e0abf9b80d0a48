"""
Ledger Package

The books behind each part of the app: transactions and categories,
accounts, groups and expense splitting.
"""

from pocketbook.ledger.accounts import AccountBook
from pocketbook.ledger.errors import (
    AccountValidationError,
    DuplicateCategoryError,
    EntryNotFoundError,
    InvalidAmountError,
    InvalidCategoryError,
    InvalidGroupError,
    LastCategoryError,
    LedgerError,
    NoMembersSelectedError,
)
from pocketbook.ledger.groups import GroupBook, generate_code, normalize_code
from pocketbook.ledger.splitting import SplitCalculator, even_share
from pocketbook.ledger.transactions import (
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_INCOME_CATEGORIES,
    TransactionBook,
)

__all__ = [
    # Books
    "AccountBook",
    "GroupBook",
    "SplitCalculator",
    "TransactionBook",
    # Helpers
    "DEFAULT_EXPENSE_CATEGORIES",
    "DEFAULT_INCOME_CATEGORIES",
    "even_share",
    "generate_code",
    "normalize_code",
    # Errors
    "AccountValidationError",
    "DuplicateCategoryError",
    "EntryNotFoundError",
    "InvalidAmountError",
    "InvalidCategoryError",
    "InvalidGroupError",
    "LastCategoryError",
    "LedgerError",
    "NoMembersSelectedError",
]
