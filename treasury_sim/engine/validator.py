"""Business-rule validation for transfer requests."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_DOWN, Decimal, InvalidOperation

from treasury_sim.models import Account, TransferRequest
from treasury_sim.models.transfer import align_to

CENT = Decimal("0.01")

MSG_NO_SOURCE = "Please select a source account"
MSG_NO_DESTINATION = "Please select a destination account"
MSG_INVALID_AMOUNT = "Please enter a valid amount greater than 0"
MSG_NO_SCHEDULE_DATE = "Please select a schedule date"
MSG_INVALID_SCHEDULE_DATE = "Schedule date is not a valid date"
MSG_PAST_SCHEDULE_DATE = "Schedule date must be in the future"
MSG_SAME_ACCOUNT = "Cannot transfer to the same account"
MSG_INSUFFICIENT_BALANCE = "Insufficient balance in source account"


@dataclass
class ValidationResult:
    """Outcome of validating a single request.

    ``amount`` and ``scheduled_for`` hold the parsed values when they were
    valid, so the executor does not parse the request a second time.
    """

    reasons: list[str] = field(default_factory=list)
    amount: Decimal | None = None
    scheduled_for: datetime | None = None
    source: Account | None = None
    destination: Account | None = None

    @property
    def accepted(self) -> bool:
        return not self.reasons


def parse_amount(value: Decimal | str | int | float | None) -> Decimal | None:
    """Parse a user-supplied amount, truncated to cents.

    Sub-cent digits are dropped, so ``"0.005"`` parses to ``0.00`` and the
    validator then refuses it as not positive. Returns None when the value
    is missing or not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount.quantize(CENT, rounding=ROUND_DOWN)


def parse_schedule(value: datetime | str) -> datetime | None:
    """Parse a schedule date given as a datetime or ISO-8601 string."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


class TransferValidator:
    """Apply transfer business rules against an account snapshot.

    Every rule is evaluated so the caller gets the whole batch of problems
    at once. The validator never mutates the accounts it is given.

    Parameters
    ----------
    now : Callable[[], datetime]
        Clock used for the future-date rule.
    """

    def __init__(self, now: Callable[[], datetime] = datetime.now) -> None:
        self.now = now

    def validate(
        self, request: TransferRequest, accounts: Mapping[str, Account]
    ) -> ValidationResult:
        """Check a request and collect every failing rule."""
        result = ValidationResult()

        source = self._lookup(accounts, request.from_account_id)
        if source is None:
            result.reasons.append(self._missing_message(request.from_account_id, "Source"))
        destination = self._lookup(accounts, request.to_account_id)
        if destination is None:
            result.reasons.append(
                self._missing_message(request.to_account_id, "Destination")
            )
        result.source = source
        result.destination = destination

        amount = parse_amount(request.amount)
        if amount is None or amount <= 0:
            result.reasons.append(MSG_INVALID_AMOUNT)
        else:
            result.amount = amount

        if request.scheduled_for is not None:
            self._check_schedule(request.scheduled_for, result)

        if (
            request.from_account_id is not None
            and request.to_account_id is not None
            and str(request.from_account_id) == str(request.to_account_id)
        ):
            result.reasons.append(MSG_SAME_ACCOUNT)

        # Compared in the source currency, before any conversion
        if source is not None and result.amount is not None:
            if source.balance < result.amount:
                result.reasons.append(MSG_INSUFFICIENT_BALANCE)

        return result

    def _check_schedule(self, value: datetime | str, result: ValidationResult) -> None:
        if isinstance(value, str) and not value.strip():
            result.reasons.append(MSG_NO_SCHEDULE_DATE)
            return
        scheduled_for = parse_schedule(value)
        if scheduled_for is None:
            result.reasons.append(MSG_INVALID_SCHEDULE_DATE)
            return
        if scheduled_for <= align_to(self.now(), scheduled_for):
            result.reasons.append(MSG_PAST_SCHEDULE_DATE)
            return
        result.scheduled_for = scheduled_for

    @staticmethod
    def _lookup(accounts: Mapping[str, Account], account_id: str | int | None) -> Account | None:
        if account_id is None or account_id == "":
            return None
        key = str(account_id)
        return accounts[key] if key in accounts else None

    @staticmethod
    def _missing_message(account_id: str | int | None, leg: str) -> str:
        if account_id is None or account_id == "":
            return MSG_NO_SOURCE if leg == "Source" else MSG_NO_DESTINATION
        return f"{leg} account {account_id} not found"
