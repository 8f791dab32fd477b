"""Tests for config and logging."""

import json
import logging
import os
import sys
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from treasury_sim.config import (
    DEFAULT_FX_RATES,
    FXConfig,
    KafkaConfig,
    OutputConfig,
    SimulationConfig,
    TreasuryConfig,
    parse_rate_table,
)
from treasury_sim.exceptions import ConfigurationError
from treasury_sim.logging import JsonFormatter, get_logger, setup_logging, transfer_context
from treasury_sim.models import Currency


class TestParseRateTable:
    """Tests for parse_rate_table."""

    def test_parses_pairs(self) -> None:
        table = parse_rate_table({"KES-USD": "0.0067", "usd-ngn": 385.5})

        assert table == {
            (Currency.KES, Currency.USD): Decimal("0.0067"),
            (Currency.USD, Currency.NGN): Decimal("385.5"),
        }

    @pytest.mark.parametrize(
        "raw, message",
        [
            ({"KESUSD": 1}, "expected FROM-TO"),
            ({"KES-EUR": 1}, "Unknown currency"),
            ({"KES-USD": "abc"}, "not a number"),
            ({"KES-USD": 0}, "must be positive"),
            ({"KES-USD": -2}, "must be positive"),
        ],
    )
    def test_invalid_entries(self, raw: dict, message: str) -> None:
        with pytest.raises(ConfigurationError, match=message):
            parse_rate_table(raw)


class TestConfigDefaults:
    """Tests for config dataclass defaults."""

    def test_fx_defaults(self) -> None:
        config = FXConfig()

        assert config.anchor_currency == Currency.USD
        assert config.rates == DEFAULT_FX_RATES
        assert config.rates is not DEFAULT_FX_RATES
        assert config.strict is False

    def test_output_defaults(self) -> None:
        config = OutputConfig()

        assert config.snapshot_dir == Path("output")
        assert config.export_path == Path("treasury_transactions.csv")
        assert config.pretty_json is False

    def test_kafka_to_dict(self) -> None:
        result = KafkaConfig(bootstrap_servers="kafka:9092", acks="1").to_dict()

        assert result["bootstrap.servers"] == "kafka:9092"
        assert result["acks"] == "1"
        assert result["compression.type"] == "snappy"

    def test_simulation_defaults(self) -> None:
        config = SimulationConfig()

        assert config.num_transfers == 50
        assert config.scheduled_rate == 0.1

    def test_treasury_defaults(self) -> None:
        config = TreasuryConfig()

        assert config.seed is None
        assert config.log_level == "INFO"
        assert config.kafka.topic == "treasury.transactions"


class TestFromEnv:
    """Tests for TreasuryConfig.from_env."""

    def test_from_env_default(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = TreasuryConfig.from_env()

        assert config.fx.rates == DEFAULT_FX_RATES
        assert config.fx.anchor_currency == Currency.USD
        assert config.seed is None
        assert config.simulation.num_transfers == 50

    def test_from_env_custom(self) -> None:
        env = {
            "FX_RATES": '{"KES-USD": "0.007"}',
            "FX_ANCHOR": "kes",
            "FX_STRICT": "true",
            "SNAPSHOT_DIR": "/tmp/snap",
            "EXPORT_PATH": "/tmp/out.csv",
            "PRETTY_JSON": "true",
            "KAFKA_BOOTSTRAP_SERVERS": "kafka:9092",
            "KAFKA_TOPIC": "ledger",
            "SIM_TRANSFERS": "10",
            "SIM_SCHEDULED_RATE": "0.5",
            "SEED": "7",
            "LOG_LEVEL": "DEBUG",
        }
        with patch.dict(os.environ, env, clear=True):
            config = TreasuryConfig.from_env()

        assert config.fx.rates == {(Currency.KES, Currency.USD): Decimal("0.007")}
        assert config.fx.anchor_currency == Currency.KES
        assert config.fx.strict is True
        assert config.output.snapshot_dir == Path("/tmp/snap")
        assert config.output.export_path == Path("/tmp/out.csv")
        assert config.output.pretty_json is True
        assert config.kafka.bootstrap_servers == "kafka:9092"
        assert config.kafka.topic == "ledger"
        assert config.simulation.num_transfers == 10
        assert config.simulation.scheduled_rate == 0.5
        assert config.seed == 7
        assert config.log_level == "DEBUG"

    def test_invalid_rates_json(self) -> None:
        with patch.dict(os.environ, {"FX_RATES": "{oops"}, clear=True):
            with pytest.raises(ConfigurationError, match="not valid JSON"):
                TreasuryConfig.from_env()

    def test_kafka_settings_from_env(self) -> None:
        env = {
            "KAFKA_BOOTSTRAP_SERVERS": "broker:9092",
            "KAFKA_ACKS": "1",
            "KAFKA_BATCH_SIZE": "1",
            "KAFKA_LINGER_MS": "0",
            "KAFKA_COMPRESSION": "lz4",
            "KAFKA_RETRIES": "10",
            "KAFKA_TOPIC": "ledger",
        }
        with patch.dict(os.environ, env, clear=True):
            kafka = TreasuryConfig.from_env().kafka

        assert kafka == KafkaConfig(
            bootstrap_servers="broker:9092",
            acks="1",
            batch_size=1,
            linger_ms=0,
            compression="lz4",
            retries=10,
            topic="ledger",
        )

    @pytest.mark.parametrize(
        "name, value",
        [
            ("SIM_TRANSFERS", "ten"),
            ("SIM_SCHEDULED_RATE", "often"),
            ("SIM_POISON_PILL_RATE", ""),
            ("SEED", "abc"),
            ("KAFKA_BATCH_SIZE", "big"),
            ("KAFKA_RETRIES", "1.5"),
        ],
    )
    def test_malformed_numbers_raise_configuration_error(self, name: str, value: str) -> None:
        with patch.dict(os.environ, {name: value}, clear=True):
            with pytest.raises(ConfigurationError, match=name):
                TreasuryConfig.from_env()

    def test_empty_seed_means_unseeded(self) -> None:
        with patch.dict(os.environ, {"SEED": ""}, clear=True):
            assert TreasuryConfig.from_env().seed is None

    def test_unknown_anchor(self) -> None:
        with patch.dict(os.environ, {"FX_ANCHOR": "EUR"}, clear=True):
            with pytest.raises(ConfigurationError, match="anchor"):
                TreasuryConfig.from_env()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default(self) -> None:
        setup_logging()

        assert logging.getLogger("treasury_sim").level == logging.INFO

    def test_setup_logging_debug(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_invalid_level(self) -> None:
        """Unknown level names fall back to INFO."""
        setup_logging(level="INVALID")

        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_json_format(self) -> None:
        setup_logging(format_type="json")

        logger = logging.getLogger()
        assert any(isinstance(h.formatter, JsonFormatter) for h in logger.handlers)

    def test_setup_logging_replaces_handlers(self) -> None:
        logger = logging.getLogger()
        logger.addHandler(logging.StreamHandler())
        logger.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(logger.handlers) == 1

    def test_external_loggers_quieted(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger("confluent_kafka").level == logging.WARNING
        assert logging.getLogger("faker").level == logging.WARNING


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    @staticmethod
    def _record(**kwargs) -> logging.LogRecord:
        values = {
            "name": "treasury_sim.engine.executor",
            "level": logging.INFO,
            "pathname": "/path/to/file.py",
            "lineno": 42,
            "msg": "Transfer %s completed",
            "args": ("abc",),
            "exc_info": None,
        }
        values.update(kwargs)
        return logging.LogRecord(**values)

    def test_format_basic(self) -> None:
        data = json.loads(JsonFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "treasury_sim.engine.executor"
        assert data["message"] == "Transfer abc completed"
        assert "timestamp" in data

    def test_format_with_exception(self) -> None:
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(
            JsonFormatter().format(self._record(level=logging.ERROR, exc_info=exc_info))
        )

        assert data["level"] == "ERROR"
        assert "ValueError" in data["exception"]

    def test_format_with_extra(self) -> None:
        record = self._record()
        record.extra = {"amount": Decimal("10.00"), "currency": "KES"}

        data = json.loads(JsonFormatter().format(record))

        assert data["amount"] == "10.00"
        assert data["currency"] == "KES"

    def test_transfer_context_fields(self, record_factory) -> None:
        record = self._record()
        record.extra = transfer_context(record_factory("txn-9"))["extra"]

        data = json.loads(JsonFormatter().format(record))

        assert data["transaction_id"] == "txn-9"
        assert data["from_currency"] == "KES"
        assert data["converted_amount"] == "6.70"
        assert data["status"] == "Completed"

    def test_executor_logs_carry_transfer_context(
        self, executor, caplog: pytest.LogCaptureFixture
    ) -> None:
        from treasury_sim.models import TransferRequest

        with caplog.at_level(logging.INFO, logger="treasury_sim.engine.executor"):
            outcome = executor.execute(TransferRequest("1", "2", "1000"))

        logged = [r for r in caplog.records if hasattr(r, "extra")]
        assert logged[-1].extra["transaction_id"] == outcome.transaction_id


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger(self) -> None:
        logger = get_logger("treasury_sim.test")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "treasury_sim.test"
        assert get_logger("treasury_sim.test") is logger


class TestPackageInit:
    """Tests for treasury_sim __init__.py."""

    def test_version_exported(self) -> None:
        from treasury_sim import __version__

        assert isinstance(__version__, str)
