"""Append-only transaction ledger with filtered, re-iterable queries."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from treasury_sim.exceptions import DuplicateTransactionError, TransactionNotFoundError
from treasury_sim.models import TransactionFilter, TransactionRecord, TransferStatus


class LedgerView:
    """Lazy, finite view over the ledger, newest first.

    The view is bounded to the records present when it was created, so later
    appends do not leak into it and iterating it twice yields the same
    sequence.
    """

    def __init__(
        self,
        records: list[TransactionRecord],
        criteria: TransactionFilter | None = None,
    ) -> None:
        self._records = records
        self._end = len(records)
        self._criteria = criteria

    def __iter__(self) -> Iterator[TransactionRecord]:
        for index in range(self._end - 1, -1, -1):
            record = self._records[index]
            if self._criteria is None or self._criteria.matches(record):
                yield record

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return any(True for _ in self)

    def to_list(self) -> list[TransactionRecord]:
        return list(self)


@dataclass
class TransactionLedger:
    """Append-only history of transfer records.

    Insertion order is the source of truth; consumers get newest first.
    """

    _records: list[TransactionRecord] = field(default_factory=list)
    _index: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_records(cls, records: Iterable[TransactionRecord]) -> "TransactionLedger":
        """Rebuild a ledger from records in insertion (oldest first) order."""
        ledger = cls()
        for record in records:
            ledger.append(record)
        return ledger

    def append(self, record: TransactionRecord) -> None:
        """Add a record to the end of the history."""
        if record.transaction_id in self._index:
            raise DuplicateTransactionError(
                f"Transaction {record.transaction_id} already recorded"
            )
        self._index[record.transaction_id] = len(self._records)
        self._records.append(record)

    def get(self, transaction_id: str) -> TransactionRecord:
        """Get a record by transaction id."""
        idx = self._index.get(transaction_id)
        if idx is None:
            raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
        return self._records[idx]

    def records(self) -> list[TransactionRecord]:
        """All records, newest first."""
        return list(reversed(self._records))

    def in_insertion_order(self) -> list[TransactionRecord]:
        """All records, oldest first (the persisted order)."""
        return list(self._records)

    def query(self, criteria: TransactionFilter | None = None) -> LedgerView:
        """Return a filtered view; no filter matches everything."""
        return LedgerView(self._records, criteria)

    def settled_ids(self) -> set[str]:
        """Ids of scheduled records that already have a settlement record."""
        return {r.settles for r in self._records if r.settles is not None}

    def pending_scheduled(self) -> list[TransactionRecord]:
        """Scheduled records with no settlement, oldest first."""
        settled = self.settled_ids()
        return [
            r
            for r in self._records
            if r.status == TransferStatus.SCHEDULED and r.transaction_id not in settled
        ]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TransactionRecord]:
        return iter(self.records())
