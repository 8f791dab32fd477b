"""Output sinks for persisting, exporting and publishing treasury data."""

from treasury_sim.sinks.console import ConsoleSink
from treasury_sim.sinks.csv_file import CsvExportSink
from treasury_sim.sinks.json_file import JsonSnapshotSink
from treasury_sim.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "CsvExportSink", "JsonSnapshotSink", "KafkaSink"]
