"""Account model for the treasury domain."""

from dataclasses import dataclass
from decimal import Decimal

from treasury_sim.models.enums import AccountType, Currency


@dataclass
class Account:
    """Virtual account holding a balance in a single currency.

    Balances only change through ``AccountStore.apply_debit_credit``.
    """

    account_id: str
    name: str  # e.g. Mpesa_KES_1
    currency: Currency
    balance: Decimal
    account_type: AccountType = AccountType.BANK_ACCOUNT
