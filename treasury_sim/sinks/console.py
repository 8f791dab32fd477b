"""Console sink for debugging and the simulation script."""

import json
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from treasury_sim.models import Account, TransactionRecord
from treasury_sim.sinks.serialization import to_dict


class ConsoleSink:
    """Output accounts, totals and ledger records to stdout."""

    def __init__(self, pretty: bool = True, max_records: int | None = None) -> None:
        """Initialize console sink.

        Parameters
        ----------
        pretty : bool
            Pretty-print JSON output for ``write_batch``.
        max_records : int | None
            Maximum records to print per batch (None for all).
        """
        self.pretty = pretty
        self.max_records = max_records
        self._counts: dict[str, int] = {}

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Print a batch of arbitrary records as JSON, one per record."""
        self._banner(f"{entity_type.capitalize()} ({len(records)})")
        indent = 2 if self.pretty else None
        for record in self._head(records):
            print(json.dumps(to_dict(record), indent=indent, ensure_ascii=False, default=str))
        self._print_remainder(records)
        self._counts[entity_type] = self._counts.get(entity_type, 0) + len(records)

    def write_accounts(self, accounts: Iterable[Account]) -> None:
        """Print one line per account."""
        accounts = list(accounts)
        self._banner(f"Accounts ({len(accounts)})")
        for account in accounts:
            print(
                f"  {account.account_id:>3}  {account.name:<16} "
                f"{account.currency.value} {account.balance:>18,.2f}  "
                f"{account.account_type.value}"
            )
        self._counts["accounts"] = len(accounts)

    def write_totals(self, totals: Mapping[Any, Decimal]) -> None:
        """Print per-currency portfolio totals."""
        self._banner("Portfolio totals")
        for currency, total in totals.items():
            code = getattr(currency, "value", currency)
            print(f"  {code} {total:>18,.2f}")

    def write_transactions(self, records: Iterable[TransactionRecord]) -> None:
        """Print ledger records, newest first as given."""
        records = list(records)
        self._banner(f"Transactions ({len(records)})")
        for record in self._head(records):
            if record.from_currency != record.to_currency:
                amounts = (
                    f"{record.from_currency.value} {record.amount:,.2f} -> "
                    f"{record.to_currency.value} {record.converted_amount:,.2f} "
                    f"(Rate: {record.fx_rate:.4f})"
                )
            else:
                amounts = f"{record.from_currency.value} {record.amount:,.2f}"
            print(
                f"  {record.timestamp:%Y-%m-%d %H:%M:%S}  {record.status.value:<9} "
                f"{record.from_account_name} -> {record.to_account_name}  {amounts}"
            )
            if record.note:
                print(f"      Note: {record.note}")
        self._print_remainder(records)
        self._counts["transactions"] = self._counts.get("transactions", 0) + len(records)

    def close(self) -> None:
        """Print summary and close."""
        self._banner("Console Sink Summary")
        for entity_type, count in self._counts.items():
            print(f"  {entity_type}: {count} records")

    @staticmethod
    def _banner(title: str) -> None:
        print(f"\n{'='*60}")
        print(title)
        print("=" * 60)

    def _head(self, records: list[Any]) -> list[Any]:
        return records[: self.max_records] if self.max_records else records

    def _print_remainder(self, records: list[Any]) -> None:
        if self.max_records and len(records) > self.max_records:
            print(f"... and {len(records) - self.max_records} more records")
