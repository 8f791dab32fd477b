"""Pytest configuration and fixtures."""

from datetime import datetime
from decimal import Decimal

import pytest

from treasury_sim.config import DEFAULT_FX_RATES
from treasury_sim.engine import FXConverter, TransferExecutor
from treasury_sim.models import Currency, TransactionRecord, TransferStatus
from treasury_sim.store import AccountStore, TransactionLedger

FIXED_NOW = datetime(2025, 1, 15, 12, 0, 0)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def fixed_now() -> datetime:
    """Frozen 'current time' shared by validator and executor."""
    return FIXED_NOW


@pytest.fixture
def clock(fixed_now: datetime):
    """Clock callable returning ``fixed_now``."""
    return lambda: fixed_now


@pytest.fixture
def store() -> AccountStore:
    """Fresh store holding the ten seed accounts."""
    return AccountStore.with_defaults()


@pytest.fixture
def ledger() -> TransactionLedger:
    """Empty ledger."""
    return TransactionLedger()


@pytest.fixture
def fx() -> FXConverter:
    """Converter over the default rate table, anchored on USD."""
    return FXConverter(DEFAULT_FX_RATES, anchor=Currency.USD)


@pytest.fixture
def executor(
    store: AccountStore, ledger: TransactionLedger, fx: FXConverter, clock
) -> TransferExecutor:
    """Executor wired to the seeded store with a frozen clock."""
    return TransferExecutor(store, ledger, fx, now=clock)


def make_record(
    transaction_id: str = "txn-001",
    from_name: str = "Mpesa_KES_1",
    to_name: str = "Bank_USD_1",
    from_currency: Currency = Currency.KES,
    to_currency: Currency = Currency.USD,
    amount: str = "1000.00",
    converted: str = "6.70",
    rate: str = "0.0067",
    timestamp: datetime = FIXED_NOW,
    status: TransferStatus = TransferStatus.COMPLETED,
    note: str = "",
    from_id: str = "1",
    to_id: str = "2",
    settles: str | None = None,
) -> TransactionRecord:
    """Build a ledger record with sensible defaults."""
    return TransactionRecord(
        transaction_id=transaction_id,
        from_account_id=from_id,
        to_account_id=to_id,
        from_account_name=from_name,
        to_account_name=to_name,
        from_currency=from_currency,
        to_currency=to_currency,
        amount=Decimal(amount),
        converted_amount=Decimal(converted),
        fx_rate=Decimal(rate),
        note=note,
        timestamp=timestamp,
        status=status,
        settles=settles,
    )


@pytest.fixture
def record_factory():
    """Factory building ledger records, see ``make_record``."""
    return make_record
