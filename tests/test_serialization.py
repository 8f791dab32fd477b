"""Tests for shared serialization utilities."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from treasury_sim.exceptions import SnapshotError
from treasury_sim.models import Account, AccountType, Currency, TransferStatus
from treasury_sim.sinks.serialization import (
    account_from_dict,
    dataclass_to_dict,
    record_from_dict,
    serialize_value,
    to_dict,
    to_dict_fast,
)


class TestToDict:
    """Tests for to_dict function."""

    def test_record(self, record_factory) -> None:
        result = to_dict(record_factory())

        assert result["amount"] == "1000.00"
        assert result["from_currency"] == "KES"
        assert result["timestamp"] == "2025-01-15T12:00:00"
        assert result["status"] == "Completed"
        assert result["settles"] is None

    def test_dict_passthrough(self) -> None:
        d = {"key": "value"}
        assert to_dict(d) == d

    def test_other_type(self) -> None:
        assert to_dict(42) == {"value": "42"}


class TestSerializeValue:
    """Tests for serialize_value function."""

    def test_decimal_keeps_precision(self) -> None:
        assert serialize_value(Decimal("2500000.50")) == "2500000.50"

    def test_datetime(self) -> None:
        assert serialize_value(datetime(2024, 6, 15, 10, 30, 0)) == "2024-06-15T10:30:00"

    def test_date(self) -> None:
        assert serialize_value(date(2024, 6, 15)) == "2024-06-15"

    def test_enum(self) -> None:
        assert serialize_value(AccountType.MOBILE_MONEY) == "Mobile Money"

    def test_nested(self) -> None:
        data = {"amounts": [Decimal("10.00")], "info": {"date": datetime(2024, 1, 1)}}
        result = serialize_value(data)

        assert result["amounts"] == ["10.00"]
        assert result["info"]["date"] == "2024-01-01T00:00:00"

    def test_passthrough(self) -> None:
        assert serialize_value("hello") == "hello"
        assert serialize_value(42) == 42
        assert serialize_value(None) is None


class TestToDictFast:
    """Tests for to_dict_fast function."""

    def test_matches_to_dict(self, record_factory) -> None:
        record = record_factory(settles="abc")
        assert to_dict_fast(record) == dataclass_to_dict(record)

    def test_account(self) -> None:
        account = Account("1", "Mpesa_KES_1", Currency.KES, Decimal("10.50"))

        result = to_dict_fast(account)

        assert result == {
            "account_id": "1",
            "name": "Mpesa_KES_1",
            "currency": "KES",
            "balance": "10.50",
            "account_type": "Bank Account",
        }


class TestFromDict:
    """Tests for rebuilding models from serialized data."""

    def test_account_round_trip(self) -> None:
        account = Account("9", "ABSA_KES_4", Currency.KES, Decimal("1200000.00"))
        assert account_from_dict(to_dict_fast(account)) == account

    def test_account_type_defaults_to_bank(self) -> None:
        account = account_from_dict(
            {"account_id": 3, "name": "X", "currency": "USD", "balance": 5}
        )

        assert account.account_id == "3"
        assert account.balance == Decimal("5")
        assert account.account_type == AccountType.BANK_ACCOUNT

    def test_record_round_trip(self, record_factory) -> None:
        record = record_factory(status=TransferStatus.SCHEDULED, note="Q1 rent")
        assert record_from_dict(to_dict_fast(record)) == record

    def test_record_missing_note(self, record_factory) -> None:
        data = to_dict_fast(record_factory())
        data["note"] = None

        assert record_from_dict(data).note == ""

    @pytest.mark.parametrize(
        "field, value",
        [("amount", "lots"), ("timestamp", "yesterday"), ("status", "Pending")],
    )
    def test_record_malformed(self, record_factory, field: str, value: str) -> None:
        data = to_dict_fast(record_factory())
        data[field] = value

        with pytest.raises(SnapshotError):
            record_from_dict(data)

    def test_account_missing_field(self) -> None:
        with pytest.raises(SnapshotError):
            account_from_dict({"account_id": "1"})
