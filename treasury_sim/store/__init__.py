"""In-memory stores for accounts and the transaction ledger."""

from treasury_sim.store.accounts import AccountStore
from treasury_sim.store.ledger import LedgerView, TransactionLedger
from treasury_sim.store.seed import default_accounts

__all__ = ["AccountStore", "LedgerView", "TransactionLedger", "default_accounts"]
