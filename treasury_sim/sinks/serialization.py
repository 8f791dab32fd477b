"""Shared serialization utilities for sinks."""

from dataclasses import asdict, fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from treasury_sim.exceptions import SnapshotError
from treasury_sim.models import (
    Account,
    AccountType,
    Currency,
    TransactionRecord,
    TransferStatus,
)


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return obj
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def to_dict_fast(obj: Any) -> dict:
    """Convert a flat dataclass without the deep copy ``asdict`` makes.

    Parameters
    ----------
    obj : Any
        A dataclass instance.

    Returns
    -------
    dict
        Serialized dictionary.
    """
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output.

    Decimals become strings so balances survive the round trip exactly.
    """
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def account_from_dict(data: dict[str, Any]) -> Account:
    """Rebuild an ``Account`` from its serialized form."""
    try:
        return Account(
            account_id=str(data["account_id"]),
            name=data["name"],
            currency=Currency(data["currency"]),
            balance=Decimal(str(data["balance"])),
            account_type=AccountType(data.get("account_type", AccountType.BANK_ACCOUNT)),
        )
    except (KeyError, ValueError, InvalidOperation) as exc:
        raise SnapshotError(f"Malformed account entry: {data!r}") from exc


def record_from_dict(data: dict[str, Any]) -> TransactionRecord:
    """Rebuild a ``TransactionRecord``; the ISO timestamp becomes a datetime."""
    try:
        return TransactionRecord(
            transaction_id=str(data["transaction_id"]),
            from_account_id=str(data["from_account_id"]),
            to_account_id=str(data["to_account_id"]),
            from_account_name=data["from_account_name"],
            to_account_name=data["to_account_name"],
            from_currency=Currency(data["from_currency"]),
            to_currency=Currency(data["to_currency"]),
            amount=Decimal(str(data["amount"])),
            converted_amount=Decimal(str(data["converted_amount"])),
            fx_rate=Decimal(str(data["fx_rate"])),
            note=data.get("note") or "",
            timestamp=datetime.fromisoformat(data["timestamp"]),
            status=TransferStatus(data["status"]),
            settles=data.get("settles"),
        )
    except (KeyError, TypeError, ValueError, InvalidOperation) as exc:
        raise SnapshotError(f"Malformed transaction entry: {data!r}") from exc
