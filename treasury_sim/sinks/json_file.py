"""JSON snapshot sink for accounts and the transaction ledger."""

import json
import logging
from pathlib import Path
from typing import Any

from treasury_sim.exceptions import SnapshotError
from treasury_sim.models import Account, TransactionRecord
from treasury_sim.sinks.serialization import account_from_dict, record_from_dict, to_dict_fast

logger = logging.getLogger(__name__)

ACCOUNTS_FILE = "treasury-accounts.json"
TRANSACTIONS_FILE = "treasury-transactions.json"


class JsonSnapshotSink:
    """Persist accounts and transactions as two independent JSON collections.

    Snapshots are best-effort and taken outside the transfer path.
    """

    def __init__(self, output_dir: str | Path, pretty: bool = False) -> None:
        """Initialize JSON snapshot sink.

        Parameters
        ----------
        output_dir : str | Path
            Directory holding the snapshot files.
        pretty : bool
            Pretty-print JSON output.
        """
        self.output_dir = Path(output_dir)
        self.pretty = pretty
        self._counts: dict[str, int] = {}

    @property
    def accounts_path(self) -> Path:
        return self.output_dir / ACCOUNTS_FILE

    @property
    def transactions_path(self) -> Path:
        return self.output_dir / TRANSACTIONS_FILE

    def exists(self) -> bool:
        """Whether an accounts snapshot is present."""
        return self.accounts_path.is_file()

    def write_accounts(self, accounts: list[Account]) -> None:
        """Write the ordered account list."""
        self._write(self.accounts_path, [to_dict_fast(a) for a in accounts])
        self._counts["accounts"] = len(accounts)

    def write_transactions(self, records: list[TransactionRecord]) -> None:
        """Write transactions in insertion (oldest first) order."""
        self._write(self.transactions_path, [to_dict_fast(r) for r in records])
        self._counts["transactions"] = len(records)

    def read_accounts(self) -> list[Account]:
        """Load accounts; a missing file yields an empty list."""
        return [account_from_dict(item) for item in self._read(self.accounts_path)]

    def read_transactions(self) -> list[TransactionRecord]:
        """Load transactions; a missing file yields an empty list."""
        return [record_from_dict(item) for item in self._read(self.transactions_path)]

    def close(self) -> None:
        """Log a summary of what was written."""
        for entity_type, count in self._counts.items():
            logger.info("Snapshot %s: %d records in %s", entity_type, count, self.output_dir)

    def _write(self, file_path: Path, data: list[dict[str, Any]]) -> None:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with open(file_path, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                else:
                    json.dump(data, f, ensure_ascii=False)
        except OSError as exc:
            raise SnapshotError(f"Cannot write snapshot {file_path}: {exc}") from exc

    def _read(self, file_path: Path) -> list[dict[str, Any]]:
        if not file_path.is_file():
            return []
        try:
            with open(file_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise SnapshotError(f"Cannot read snapshot {file_path}: {exc}") from exc
        if not isinstance(data, list):
            raise SnapshotError(f"Snapshot {file_path} must contain a JSON list")
        return data
