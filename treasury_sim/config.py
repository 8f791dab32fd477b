"""Configuration management for treasury-sim."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from treasury_sim.exceptions import ConfigurationError
from treasury_sim.models.enums import Currency

# Static reference rates; there is no live feed.
DEFAULT_FX_RATES: dict[tuple[Currency, Currency], Decimal] = {
    (Currency.KES, Currency.USD): Decimal("0.0067"),
    (Currency.USD, Currency.KES): Decimal("149.25"),
    (Currency.KES, Currency.NGN): Decimal("2.58"),
    (Currency.NGN, Currency.KES): Decimal("0.387"),
    (Currency.USD, Currency.NGN): Decimal("385.5"),
    (Currency.NGN, Currency.USD): Decimal("0.0026"),
}


def parse_rate_table(raw: dict[str, Any]) -> dict[tuple[Currency, Currency], Decimal]:
    """Parse a ``{"FROM-TO": rate}`` mapping into a rate table.

    Parameters
    ----------
    raw : dict[str, Any]
        Pair keys joined by a dash, e.g. ``"KES-USD"``.

    Returns
    -------
    dict[tuple[Currency, Currency], Decimal]
        Rates keyed by ordered currency pair.

    Raises
    ------
    ConfigurationError
        If a key is malformed, names an unknown currency or a rate is not
        a positive number.
    """
    table: dict[tuple[Currency, Currency], Decimal] = {}
    for key, value in raw.items():
        parts = key.split("-")
        if len(parts) != 2:
            raise ConfigurationError(f"Invalid FX pair key {key!r}, expected FROM-TO")
        try:
            pair = (Currency(parts[0].strip().upper()), Currency(parts[1].strip().upper()))
        except ValueError as exc:
            raise ConfigurationError(f"Unknown currency in FX pair {key!r}") from exc
        try:
            rate = Decimal(str(value))
        except InvalidOperation as exc:
            raise ConfigurationError(f"FX rate for {key} is not a number: {value!r}") from exc
        if not rate.is_finite() or rate <= 0:
            raise ConfigurationError(f"FX rate for {key} must be positive, got {value!r}")
        table[pair] = rate
    return table


def _parse_number(name: str, raw: str | None, kind: type) -> Any:
    """Convert an environment value with ``kind`` (int or float); None passes through."""
    if raw is None:
        return None
    try:
        return kind(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be {kind.__name__}, got {raw!r}") from exc


@dataclass
class FXConfig:
    """FX rate table configuration."""

    anchor_currency: Currency = Currency.USD
    rates: dict[tuple[Currency, Currency], Decimal] = field(
        default_factory=lambda: dict(DEFAULT_FX_RATES)
    )
    strict: bool = False  # reject unresolvable pairs instead of using 1


@dataclass
class OutputConfig:
    """Output configuration."""

    snapshot_dir: Path = field(default_factory=lambda: Path("output"))
    export_path: Path = field(default_factory=lambda: Path("treasury_transactions.csv"))
    pretty_json: bool = False


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    topic: str = "treasury.transactions"

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class SimulationConfig:
    """Configuration for simulated transfer traffic."""

    num_transfers: int = 50
    scheduled_rate: float = 0.1
    poison_pill_rate: float = 0.05


@dataclass
class TreasuryConfig:
    """Main configuration for treasury-sim."""

    fx: FXConfig = field(default_factory=FXConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "TreasuryConfig":
        """Create config from environment variables."""
        import json
        import os

        rates_str = os.getenv("FX_RATES")
        if rates_str:
            try:
                rates = parse_rate_table(json.loads(rates_str))
            except json.JSONDecodeError as exc:
                raise ConfigurationError("FX_RATES is not valid JSON") from exc
        else:
            rates = dict(DEFAULT_FX_RATES)

        anchor_str = os.getenv("FX_ANCHOR", "USD").upper()
        try:
            anchor = Currency(anchor_str)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown anchor currency {anchor_str!r}") from exc

        fx = FXConfig(
            anchor_currency=anchor,
            rates=rates,
            strict=os.getenv("FX_STRICT", "false").lower() == "true",
        )

        output = OutputConfig(
            snapshot_dir=Path(os.getenv("SNAPSHOT_DIR", "output")),
            export_path=Path(os.getenv("EXPORT_PATH", "treasury_transactions.csv")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        def number(name: str, default: str, kind: type) -> Any:
            return _parse_number(name, os.getenv(name, default), kind)

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            batch_size=number("KAFKA_BATCH_SIZE", "16384", int),
            linger_ms=number("KAFKA_LINGER_MS", "5", int),
            compression=os.getenv("KAFKA_COMPRESSION", "snappy"),
            retries=number("KAFKA_RETRIES", "3", int),
            topic=os.getenv("KAFKA_TOPIC", "treasury.transactions"),
        )

        simulation = SimulationConfig(
            num_transfers=number("SIM_TRANSFERS", "50", int),
            scheduled_rate=number("SIM_SCHEDULED_RATE", "0.1", float),
            poison_pill_rate=number("SIM_POISON_PILL_RATE", "0.05", float),
        )

        return cls(
            fx=fx,
            output=output,
            kafka=kafka,
            simulation=simulation,
            seed=_parse_number("SEED", os.getenv("SEED") or None, int),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
