"""
Account Book

Tracks account balances, converts the overview total into a display
currency and exports the account list as CSV text.

The currency table is illustrative; conversion results are not meant
to be accurate.
"""

import csv
import io
from typing import Optional, Union

from pocketbook.audit import AuditLogger
from pocketbook.ledger.errors import AccountValidationError, EntryNotFoundError
from pocketbook.models.audit import AuditEventBuilder
from pocketbook.models.ledger import (
    CURRENCIES,
    Account,
    AccountIcon,
    Currency,
    parse_amount,
)
from pocketbook.services.storage import KeyValueStoreInterface, account_store


CSV_HEADER = ["name", "balance", "credit_limit", "icon", "currency"]


def _format_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)


class AccountBook:
    """Account list backed by the key-value store."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = account_store(store)
        self._audit_logger = audit_logger
        self._accounts: list[Account] = []
        self._currency_index = 0

    async def load(self) -> None:
        self._accounts = await self._store.load()

    @property
    def accounts(self) -> list[Account]:
        return list(self._accounts)

    @property
    def currency(self) -> Currency:
        """Currency the overview is currently displayed in."""
        return CURRENCIES[self._currency_index]

    def next_currency(self) -> Currency:
        """Cycle the display currency."""
        self._currency_index = (self._currency_index + 1) % len(CURRENCIES)
        return self.currency

    def get(self, account_id: str) -> Account:
        return self._accounts[self._index_of(account_id)]

    async def save_account(
        self,
        name: str,
        balance: Union[str, float],
        credit_limit: Union[str, float, None] = None,
        icon: AccountIcon = AccountIcon.CASH,
        account_id: Optional[str] = None,
    ) -> Account:
        """
        Create an account, or replace an existing one when account_id is given.

        Raises:
            AccountValidationError: If name or balance is missing or invalid
            EntryNotFoundError: If account_id does not exist
        """
        trimmed = (name or "").strip()
        if not trimmed or balance is None or str(balance).strip() == "":
            raise AccountValidationError("Please fill in the name and balance")

        parsed_balance = parse_amount(balance)
        if parsed_balance is None:
            raise AccountValidationError(f"Balance is not a number: {balance}")

        parsed_limit = None
        if credit_limit is not None and str(credit_limit).strip() != "":
            parsed_limit = parse_amount(credit_limit)
            if parsed_limit is None:
                raise AccountValidationError(f"Credit limit is not a number: {credit_limit}")

        if account_id is not None:
            index = self._index_of(account_id)
            existing = self._accounts[index]
            account = Account(
                id=existing.id,
                name=trimmed,
                balance=parsed_balance,
                credit_limit=parsed_limit,
                icon=icon,
                currency=existing.currency,
            )
            self._accounts[index] = account
        else:
            account = Account(
                name=trimmed,
                balance=parsed_balance,
                credit_limit=parsed_limit,
                icon=icon,
                currency=CURRENCIES[0].symbol,
            )
            self._accounts.append(account)

        await self._persist()
        if self._audit_logger:
            await self._audit_logger.log(AuditEventBuilder.account_saved(
                account.id, account.name, is_new=account_id is None,
            ))
        return account

    async def delete_account(self, account_id: str) -> Account:
        index = self._index_of(account_id)
        account = self._accounts.pop(index)
        await self._persist()
        if self._audit_logger:
            await self._audit_logger.log(AuditEventBuilder.account_deleted(account_id))
        return account

    def sorted_by_balance(self) -> list[Account]:
        """Accounts ordered from highest to lowest balance."""
        return sorted(self._accounts, key=lambda account: account.balance, reverse=True)

    def convert(self, amount: float, currency: Optional[Currency] = None) -> float:
        currency = currency or self.currency
        return amount * currency.rate

    def total_balance(self, currency: Optional[Currency] = None) -> float:
        """Sum of all balances in the given (or current display) currency."""
        currency = currency or self.currency
        return sum(account.balance * currency.rate for account in self._accounts)

    def to_csv(self) -> str:
        """Account list as CSV text."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for account in self._accounts:
            writer.writerow([
                account.name,
                _format_number(account.balance),
                _format_number(account.credit_limit) if account.credit_limit is not None else "",
                account.icon.value,
                account.currency,
            ])
        return buffer.getvalue()

    def _index_of(self, account_id: str) -> int:
        for index, account in enumerate(self._accounts):
            if account.id == account_id:
                return index
        raise EntryNotFoundError(f"Account not found: {account_id}")

    async def _persist(self) -> bool:
        saved = await self._store.save(self._accounts)
        if not saved and self._audit_logger:
            await self._audit_logger.log_storage_error(
                self._store.key, "Accounts could not be saved"
            )
        return saved
