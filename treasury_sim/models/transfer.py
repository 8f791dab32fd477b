"""Transfer request, ledger record and query filter models."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from treasury_sim.models.enums import Currency, TransferStatus


@dataclass
class TransferRequest:
    """A request to move funds between two accounts.

    ``amount`` is expressed in the source account's currency. It may be given
    as typed by a user (``"1000.50"``); the validator parses it.
    ``scheduled_for`` marks the transfer as scheduled when set.
    """

    from_account_id: str | int | None
    to_account_id: str | int | None
    amount: Decimal | str | int | float | None
    note: str = ""
    scheduled_for: datetime | str | None = None


@dataclass(frozen=True)
class TransactionRecord:
    """Immutable ledger entry for a completed or scheduled transfer."""

    transaction_id: str
    from_account_id: str
    to_account_id: str
    from_account_name: str
    to_account_name: str
    from_currency: Currency
    to_currency: Currency
    amount: Decimal  # debited, source currency
    converted_amount: Decimal  # credited, destination currency
    fx_rate: Decimal
    note: str
    timestamp: datetime  # effective date
    status: TransferStatus
    settles: str | None = None  # id of the scheduled record this completes

    @property
    def is_scheduled(self) -> bool:
        return self.status == TransferStatus.SCHEDULED


@dataclass(frozen=True)
class TransferRejection:
    """Batch of reasons a transfer request was not accepted."""

    reasons: tuple[str, ...]

    @property
    def message(self) -> str:
        return ". ".join(self.reasons)


@dataclass
class TransactionFilter:
    """Conjunction of optional ledger filters.

    - account: substring of either leg's account name
    - currency: exact match on either leg's currency
    - date_from / date_to: inclusive bounds on the record timestamp; a plain
      ``date`` bound compares against the timestamp's calendar day
    """

    account: str | None = None
    currency: Currency | str | None = None
    date_from: datetime | date | None = None
    date_to: datetime | date | None = None

    def matches(self, record: TransactionRecord) -> bool:
        """Return True if the record satisfies every set criterion."""
        if self.account and (
            self.account not in record.from_account_name
            and self.account not in record.to_account_name
        ):
            return False
        # Currency is a str enum, so plain codes compare equal too
        if self.currency and (
            record.from_currency != self.currency and record.to_currency != self.currency
        ):
            return False
        if self.date_from is not None and _before(record.timestamp, self.date_from):
            return False
        if self.date_to is not None and _after(record.timestamp, self.date_to):
            return False
        return True


def align_to(moment: datetime, reference: datetime) -> datetime:
    """Return ``moment`` with the same tz-awareness as ``reference`` so they compare.

    Naive values are taken as local time.
    """
    if reference.tzinfo is not None and moment.tzinfo is None:
        return moment.astimezone(reference.tzinfo)
    if reference.tzinfo is None and moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def _before(timestamp: datetime, bound: datetime | date) -> bool:
    if isinstance(bound, datetime):
        return timestamp < align_to(bound, timestamp)
    return timestamp.date() < bound


def _after(timestamp: datetime, bound: datetime | date) -> bool:
    if isinstance(bound, datetime):
        return timestamp > align_to(bound, timestamp)
    return timestamp.date() > bound
