"""Structured logging configuration for treasury-sim."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers pinned to WARNING whatever the package level is
QUIET_LOGGERS = ("confluent_kafka", "faker")


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
) -> None:
    """Configure logging for treasury-sim.

    Replaces any handlers on the root logger with a single stdout handler.

    Parameters
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Unknown names
        fall back to INFO.
    format_type : str
        Format type: "standard" or "json".
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("treasury_sim").setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Fields passed as ``extra={"extra": {...}}`` (see ``transfer_context``)
    are merged into the top-level object.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra"):
            log_data.update(record.extra)

        return json.dumps(log_data, default=str)


def transfer_context(record: Any) -> dict[str, Any]:
    """Build the ``extra`` argument describing a ledger record.

    Parameters
    ----------
    record : TransactionRecord
        Record whose identifiers and amounts should travel with the log line.

    Returns
    -------
    dict[str, Any]
        ``{"extra": {...}}`` ready to pass as ``logger.info(..., extra=...)``.
    """
    return {
        "extra": {
            "transaction_id": record.transaction_id,
            "from_account_id": record.from_account_id,
            "to_account_id": record.to_account_id,
            "amount": str(record.amount),
            "from_currency": record.from_currency.value,
            "converted_amount": str(record.converted_amount),
            "to_currency": record.to_currency.value,
            "status": record.status.value,
        }
    }


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name (usually ``__name__``)."""
    return logging.getLogger(name)
