"""Account store owning the mutable set of accounts and their balances."""

import copy
import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from decimal import Decimal

from treasury_sim.exceptions import (
    AccountNotFoundError,
    DuplicateAccountError,
    InsufficientFundsError,
    InvalidEntityStateError,
)
from treasury_sim.models import Account, Currency
from treasury_sim.store.seed import default_accounts


@dataclass
class AccountStore:
    """In-memory account store.

    Behaves as a read-only mapping of account id to ``Account`` (``store[id]``,
    ``id in store``, iteration over ids) so it can be handed straight to the
    validator. Ids are normalised with ``str()``.
    """

    accounts: dict[str, Account] = field(default_factory=dict)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    @classmethod
    def with_defaults(cls) -> "AccountStore":
        """Create a store holding the seed accounts."""
        return cls.from_accounts(default_accounts())

    @classmethod
    def from_accounts(cls, accounts: Iterable[Account]) -> "AccountStore":
        """Create a store from an ordered collection of accounts."""
        store = cls()
        for account in accounts:
            store.add_account(account)
        return store

    def add_account(self, account: Account) -> None:
        """Add an account to the store."""
        account_id = str(account.account_id)
        if account_id in self.accounts:
            raise DuplicateAccountError(f"Account {account_id} already exists")
        if account.balance < 0:
            raise InvalidEntityStateError(f"Account {account_id} has a negative balance")
        self.accounts[account_id] = account

    def get(self, account_id: str | int) -> Account:
        """Get an account by id.

        Raises
        ------
        AccountNotFoundError
            If no account has that id.
        """
        account = self.find(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account {account_id} not found")
        return account

    def find(self, account_id: str | int | None) -> Account | None:
        """Get an account by id, or None if it does not exist."""
        if account_id is None:
            return None
        return self.accounts.get(str(account_id))

    def list_accounts(self) -> list[Account]:
        """Return all accounts in insertion (seed) order."""
        return list(self.accounts.values())

    def snapshot(self) -> dict[str, Account]:
        """Return deep copies of all accounts keyed by id."""
        with self.lock:
            return copy.deepcopy(self.accounts)

    def apply_debit_credit(
        self,
        from_id: str | int,
        amount: Decimal,
        to_id: str | int,
        converted_amount: Decimal,
    ) -> None:
        """Debit ``from_id`` by ``amount`` and credit ``to_id`` by ``converted_amount``.

        Every check runs before either balance is touched, so a failure leaves
        both accounts unchanged.

        Raises
        ------
        AccountNotFoundError
            If either account id is unknown.
        InsufficientFundsError
            If the debit would make the source balance negative.
        """
        with self.lock:
            source = self.get(from_id)
            destination = self.get(to_id)
            if source is destination:
                raise InvalidEntityStateError("Cannot debit and credit the same account")
            if amount <= 0 or converted_amount < 0:
                raise InvalidEntityStateError("Transfer amounts must be positive")
            if source.balance < amount:
                raise InsufficientFundsError(
                    f"Account {source.account_id} balance {source.balance} is below {amount}"
                )

            source.balance -= amount
            destination.balance += converted_amount

    def totals_by_currency(self) -> dict[Currency, Decimal]:
        """Sum balances per currency. Recomputed on every call."""
        totals = {currency: Decimal("0") for currency in Currency}
        for account in self.accounts.values():
            totals[account.currency] += account.balance
        return totals

    # Mapping protocol, used by the validator
    def __getitem__(self, account_id: str | int) -> Account:
        account = self.find(account_id)
        if account is None:
            raise KeyError(account_id)
        return account

    def __contains__(self, account_id: object) -> bool:
        return account_id is not None and str(account_id) in self.accounts

    def __iter__(self) -> Iterator[str]:
        return iter(self.accounts)

    def __len__(self) -> int:
        return len(self.accounts)
