#!/usr/bin/env python3
"""Run a treasury simulation and report the resulting state.

Submits randomly generated transfers across the seed accounts, optionally
settles scheduled transfers that have come due, prints accounts, portfolio
totals and the ledger, and can export the ledger to CSV, persist a JSON
snapshot and publish committed records to Kafka.

Examples::

    python scripts/simulate.py --transfers 100 --seed 42
    python scripts/simulate.py --snapshot-dir output --export output/ledger.csv
    python scripts/simulate.py --currency USD --account Mpesa
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from treasury_sim.config import TreasuryConfig
from treasury_sim.exceptions import TreasuryError
from treasury_sim.logging import setup_logging
from treasury_sim.models import TransactionFilter
from treasury_sim.scenarios import TreasurySimulationScenario
from treasury_sim.service import TreasuryService
from treasury_sim.sinks import ConsoleSink, JsonSnapshotSink
from treasury_sim.sinks.kafka import KafkaSink, ProducerConfig

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Treasury movement simulator")
    parser.add_argument("--transfers", type=int, help="Number of transfers to submit")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--scheduled-rate", type=float, help="Share of scheduled transfers")
    parser.add_argument("--poison-pill-rate", type=float, help="Share of invalid requests")
    parser.add_argument("--snapshot-dir", type=Path, help="Load and save JSON snapshots here")
    parser.add_argument("--export", type=Path, help="Write the filtered ledger as CSV")
    parser.add_argument("--settle", action="store_true", help="Settle due scheduled transfers")
    parser.add_argument("--kafka", action="store_true", help="Publish records to Kafka")
    parser.add_argument("--account", help="Filter ledger by account name substring")
    parser.add_argument("--currency", help="Filter ledger by currency code")
    parser.add_argument("--date-from", type=date.fromisoformat, help="Inclusive start date")
    parser.add_argument("--date-to", type=date.fromisoformat, help="Inclusive end date")
    parser.add_argument("--max-records", type=int, default=20, help="Ledger rows to print")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> TreasuryConfig:
    """Environment config with command-line overrides applied."""
    config = TreasuryConfig.from_env()
    if args.transfers is not None:
        config.simulation.num_transfers = args.transfers
    if args.scheduled_rate is not None:
        config.simulation.scheduled_rate = args.scheduled_rate
    if args.poison_pill_rate is not None:
        config.simulation.poison_pill_rate = args.poison_pill_rate
    if args.seed is not None:
        config.seed = args.seed
    if args.snapshot_dir is not None:
        config.output.snapshot_dir = args.snapshot_dir
    if args.log_level:
        config.log_level = args.log_level
    return config


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        config = build_config(args)
    except TreasuryError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    setup_logging(level=config.log_level, format_type="json" if args.json_logs else "standard")

    publishers = []
    if args.kafka:
        publishers.append(
            KafkaSink(ProducerConfig.from_kafka_config(config.kafka), topic=config.kafka.topic)
        )

    try:
        if args.snapshot_dir is not None:
            service = TreasuryService.from_snapshot(
                args.snapshot_dir, config=config, publishers=publishers
            )
        else:
            service = TreasuryService(config=config, publishers=publishers)

        if args.settle:
            outcomes = service.settle_due_transfers()
            logger.info("Settlement sweep processed %d due transfers", len(outcomes))

        scenario = TreasurySimulationScenario.from_config(config, service=service)
        summary = scenario.run()

        criteria = TransactionFilter(
            account=args.account,
            currency=args.currency.upper() if args.currency else None,
            date_from=args.date_from,
            date_to=args.date_to,
        )

        console = ConsoleSink(max_records=args.max_records)
        console.write_accounts(service.list_accounts())
        console.write_totals(service.portfolio_totals())
        console.write_transactions(service.list_transactions(criteria))
        rejections = scenario.get_rejections()
        if rejections:
            console.write_batch("rejections", rejections)
        console.close()

        print(
            f"\nCompleted: {summary.completed}  Scheduled: {summary.scheduled}  "
            f"Rejected: {summary.rejected}"
        )
        for reason, count in sorted(summary.rejection_reasons.items()):
            print(f"  {count:>4}  {reason}")

        if args.export is not None:
            path = service.export_csv(args.export, criteria)
            print(f"Ledger exported to: {path}")
        if args.snapshot_dir is not None:
            service.save_snapshot(args.snapshot_dir)
            print(f"Snapshot written to: {args.snapshot_dir}")
    except TreasuryError as exc:
        logger.error("Simulation failed: %s", exc)
        return 1
    finally:
        for publisher in publishers:
            publisher.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
