"""CSV export of ledger query results."""

import csv
import io
import logging
from collections.abc import Iterable
from pathlib import Path

from treasury_sim.exceptions import SinkError
from treasury_sim.models import TransactionRecord

CSV_HEADER = [
    "Timestamp",
    "FromAccount",
    "ToAccount",
    "Amount",
    "FromCurrency",
    "ToCurrency",
    "ConvertedAmount",
    "FXRate",
    "Note",
    "Status",
]

DEFAULT_EXPORT_NAME = "treasury_transactions.csv"

logger = logging.getLogger(__name__)


def record_to_row(record: TransactionRecord) -> list[str]:
    """Render one record in export column order."""
    return [
        record.timestamp.isoformat(),
        record.from_account_name,
        record.to_account_name,
        str(record.amount),
        record.from_currency.value,
        record.to_currency.value,
        str(record.converted_amount),
        str(record.fx_rate),
        record.note,
        record.status.value,
    ]


class CsvExportSink:
    """Write transaction records as comma-separated values."""

    def __init__(self, header: bool = True) -> None:
        self.header = header

    def render(self, records: Iterable[TransactionRecord]) -> str:
        """Render records to a CSV string."""
        buffer = io.StringIO()
        self._write_rows(buffer, records)
        return buffer.getvalue()

    def write(self, records: Iterable[TransactionRecord], path: str | Path) -> Path:
        """Write records to ``path``; a directory gets the default file name."""
        file_path = Path(path)
        if file_path.is_dir():
            file_path = file_path / DEFAULT_EXPORT_NAME
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, "w", encoding="utf-8", newline="") as f:
                count = self._write_rows(f, records)
        except OSError as exc:
            raise SinkError(f"Cannot write CSV export {file_path}: {exc}") from exc
        logger.info("Exported %d transactions to %s", count, file_path)
        return file_path

    def _write_rows(self, stream, records: Iterable[TransactionRecord]) -> int:
        writer = csv.writer(stream, lineterminator="\n")
        if self.header:
            writer.writerow(CSV_HEADER)
        count = 0
        for record in records:
            writer.writerow(record_to_row(record))
            count += 1
        return count
