"""
Ledger Errors

Raised for user input the ledger refuses to record. Storage problems are
never raised from the ledger; they are logged by the collection stores.
"""


class LedgerError(Exception):
    """Base exception for rejected ledger operations."""
    pass


class InvalidAmountError(LedgerError):
    """Amount is missing, not a number, or not positive."""
    pass


class InvalidCategoryError(LedgerError):
    """Category name is empty."""
    pass


class DuplicateCategoryError(LedgerError):
    """Category already exists for that transaction type."""
    pass


class LastCategoryError(LedgerError):
    """Refused to delete the only remaining category of a type."""
    pass


class AccountValidationError(LedgerError):
    """Account name or balance missing or invalid."""
    pass


class InvalidGroupError(LedgerError):
    """Group name is empty."""
    pass


class NoMembersSelectedError(LedgerError):
    """A split needs at least one selected member."""
    pass


class EntryNotFoundError(LedgerError):
    """No stored entry has the given id."""
    pass
