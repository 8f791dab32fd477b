"""Core-facing API consumed by presentation and tooling layers."""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Protocol

from treasury_sim.config import TreasuryConfig
from treasury_sim.engine import FXConverter, TransferExecutor, TransferOutcome
from treasury_sim.exceptions import SinkError, SnapshotError
from treasury_sim.models import (
    Account,
    Currency,
    TransactionFilter,
    TransactionRecord,
    TransferRequest,
)
from treasury_sim.sinks import CsvExportSink, JsonSnapshotSink
from treasury_sim.store import AccountStore, TransactionLedger

logger = logging.getLogger(__name__)


class RecordPublisher(Protocol):
    def publish(self, record: TransactionRecord) -> None: ...


class TreasuryService:
    """Owns the account store and ledger and routes every mutation through
    the transfer executor.

    Parameters
    ----------
    config : TreasuryConfig | None
        Application configuration; defaults are used when omitted.
    accounts : AccountStore | None
        Account store; the seed accounts when omitted.
    ledger : TransactionLedger | None
        Existing ledger; empty when omitted.
    publishers : Iterable[RecordPublisher]
        Best-effort consumers of committed records (e.g. ``KafkaSink``).
    snapshot_sink : JsonSnapshotSink | None
        When set, a snapshot is written after every committed change.
    now : Callable[[], datetime]
        Clock for timestamps and schedule checks.
    """

    def __init__(
        self,
        config: TreasuryConfig | None = None,
        accounts: AccountStore | None = None,
        ledger: TransactionLedger | None = None,
        publishers: Iterable[RecordPublisher] = (),
        snapshot_sink: JsonSnapshotSink | None = None,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config or TreasuryConfig()
        self.accounts = accounts if accounts is not None else AccountStore.with_defaults()
        self.ledger = ledger if ledger is not None else TransactionLedger()
        self.fx = FXConverter.from_config(self.config.fx)
        self.executor = TransferExecutor(self.accounts, self.ledger, self.fx, now=now)
        self.publishers = list(publishers)
        self.snapshot_sink = snapshot_sink

        missing = self.fx.missing_pairs({a.currency for a in self.accounts.list_accounts()})
        if missing:
            logger.warning(
                "FX table has no path for %s",
                ", ".join(f"{a.value}-{b.value}" for a, b in missing),
            )

    @classmethod
    def from_snapshot(
        cls,
        directory: str | Path,
        config: TreasuryConfig | None = None,
        **kwargs,
    ) -> "TreasuryService":
        """Restore a service from a JSON snapshot; seeds accounts if none exists."""
        sink = JsonSnapshotSink(directory)
        if not sink.exists():
            logger.info("No snapshot in %s, starting from seed accounts", directory)
            return cls(config=config, **kwargs)
        accounts = AccountStore.from_accounts(sink.read_accounts())
        ledger = TransactionLedger.from_records(sink.read_transactions())
        logger.info(
            "Loaded snapshot from %s: %d accounts, %d transactions",
            directory,
            len(accounts),
            len(ledger),
        )
        return cls(config=config, accounts=accounts, ledger=ledger, **kwargs)

    def submit_transfer(self, request: TransferRequest) -> TransferOutcome:
        """Validate and execute one transfer request."""
        outcome = self.executor.execute(request)
        if isinstance(outcome, TransactionRecord):
            self._after_commit([outcome])
        return outcome

    def settle_due_transfers(self, now: datetime | None = None) -> dict[str, TransferOutcome]:
        """Apply scheduled transfers that have come due."""
        outcomes = self.executor.settle_due(now)
        committed = [o for o in outcomes.values() if isinstance(o, TransactionRecord)]
        if committed:
            self._after_commit(committed)
        return outcomes

    def list_accounts(self) -> list[Account]:
        return self.accounts.list_accounts()

    def get_account(self, account_id: str | int) -> Account:
        return self.accounts.get(account_id)

    def portfolio_totals(self) -> dict[Currency, Decimal]:
        return self.accounts.totals_by_currency()

    def list_transactions(self, criteria: TransactionFilter | None = None) -> list[TransactionRecord]:
        """Ledger records matching ``criteria``, newest first."""
        return self.ledger.query(criteria).to_list()

    def export_csv(
        self, path: str | Path | None = None, criteria: TransactionFilter | None = None
    ) -> Path:
        """Export filtered transactions as CSV."""
        target = Path(path) if path is not None else self.config.output.export_path
        return CsvExportSink().write(self.ledger.query(criteria), target)

    def save_snapshot(self, directory: str | Path | None = None) -> None:
        """Write accounts and transactions to JSON."""
        if directory is not None:
            sink = JsonSnapshotSink(directory, pretty=self.config.output.pretty_json)
        elif self.snapshot_sink is not None:
            sink = self.snapshot_sink
        else:
            sink = JsonSnapshotSink(
                self.config.output.snapshot_dir, pretty=self.config.output.pretty_json
            )
        with self.accounts.lock:
            accounts = self.accounts.snapshot()
            records = self.ledger.in_insertion_order()
        sink.write_accounts(list(accounts.values()))
        sink.write_transactions(records)

    def _after_commit(self, records: list[TransactionRecord]) -> None:
        # Runs outside the executor's critical section; failures never undo a transfer.
        for record in records:
            for publisher in self.publishers:
                try:
                    publisher.publish(record)
                except SinkError:
                    logger.exception("Failed to publish transaction %s", record.transaction_id)
        if self.snapshot_sink is not None:
            try:
                self.save_snapshot()
            except SnapshotError:
                logger.exception("Failed to write snapshot to %s", self.snapshot_sink.output_dir)
