"""Transfer executor: validate, price, mutate and record as one step."""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime

from treasury_sim.engine.fx import FXConverter, round_money
from treasury_sim.engine.validator import TransferValidator
from treasury_sim.exceptions import FXRateNotFoundError
from treasury_sim.logging import transfer_context
from treasury_sim.models import (
    TransactionRecord,
    TransferRejection,
    TransferRequest,
    TransferStatus,
)
from treasury_sim.models.transfer import align_to
from treasury_sim.store import AccountStore, TransactionLedger

logger = logging.getLogger(__name__)

TransferOutcome = TransactionRecord | TransferRejection


class TransferExecutor:
    """Process transfer requests against an account store and ledger.

    Validation, balance mutation and the ledger append all happen while
    holding the account store lock, so no reader sees a half-applied
    transfer and two callers cannot both spend the same balance.

    Parameters
    ----------
    accounts : AccountStore
        Store whose balances are mutated.
    ledger : TransactionLedger
        Ledger receiving one record per accepted request.
    fx : FXConverter
        Rate resolver.
    now : Callable[[], datetime]
        Clock used for timestamps and the future-date rule.
    """

    def __init__(
        self,
        accounts: AccountStore,
        ledger: TransactionLedger,
        fx: FXConverter,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.accounts = accounts
        self.ledger = ledger
        self.fx = fx
        self.now = now
        self.validator = TransferValidator(now=now)

    def execute(self, request: TransferRequest) -> TransferOutcome:
        """Run one request to completion or rejection.

        Returns
        -------
        TransactionRecord | TransferRejection
            The appended record, or every reason the request was refused.
        """
        with self.accounts.lock:
            result = self.validator.validate(request, self.accounts)
            if not result.accepted:
                logger.warning("Transfer rejected: %s", "; ".join(result.reasons))
                return TransferRejection(tuple(result.reasons))

            source, destination = result.source, result.destination
            amount = result.amount
            try:
                rate = self.fx.rate(source.currency, destination.currency)
            except FXRateNotFoundError as exc:
                logger.warning("Transfer rejected: %s", exc)
                return TransferRejection((str(exc),))
            converted_amount = round_money(amount * rate)

            if result.scheduled_for is None:
                self.accounts.apply_debit_credit(
                    source.account_id, amount, destination.account_id, converted_amount
                )
                status = TransferStatus.COMPLETED
                timestamp = self.now()
            else:
                status = TransferStatus.SCHEDULED
                timestamp = result.scheduled_for

            record = TransactionRecord(
                transaction_id=uuid.uuid4().hex,
                from_account_id=source.account_id,
                to_account_id=destination.account_id,
                from_account_name=source.name,
                to_account_name=destination.name,
                from_currency=source.currency,
                to_currency=destination.currency,
                amount=amount,
                converted_amount=converted_amount,
                fx_rate=rate,
                note=request.note or "",
                timestamp=timestamp,
                status=status,
            )
            self.ledger.append(record)

        logger.info(
            "Transfer %s %s: %s %s -> %s %s (rate %s)",
            record.transaction_id,
            status.value.lower(),
            record.from_currency.value,
            record.amount,
            record.to_currency.value,
            record.converted_amount,
            record.fx_rate,
            extra=transfer_context(record),
        )
        return record

    def settle_due(self, now: datetime | None = None) -> dict[str, TransferOutcome]:
        """Apply scheduled transfers whose effective date has arrived.

        Each due, unsettled scheduled record is re-validated as an immediate
        transfer at its recorded amount and rate. Success appends a Completed
        record whose ``settles`` points at the scheduled one. A rejection
        leaves the scheduled record pending for a later sweep.

        Parameters
        ----------
        now : datetime | None
            Cut-off time; defaults to the executor clock.

        Returns
        -------
        dict[str, TransactionRecord | TransferRejection]
            Outcome per scheduled transaction id.
        """
        outcomes: dict[str, TransferOutcome] = {}
        with self.accounts.lock:
            cutoff = now if now is not None else self.now()
            for scheduled in self.ledger.pending_scheduled():
                if scheduled.timestamp > align_to(cutoff, scheduled.timestamp):
                    continue
                outcomes[scheduled.transaction_id] = self._settle(scheduled)
        return outcomes

    def _settle(self, scheduled: TransactionRecord) -> TransferOutcome:
        request = TransferRequest(
            from_account_id=scheduled.from_account_id,
            to_account_id=scheduled.to_account_id,
            amount=scheduled.amount,
            note=scheduled.note,
        )
        result = self.validator.validate(request, self.accounts)
        if not result.accepted:
            logger.warning(
                "Scheduled transfer %s not settled: %s",
                scheduled.transaction_id,
                "; ".join(result.reasons),
            )
            return TransferRejection(tuple(result.reasons))

        self.accounts.apply_debit_credit(
            scheduled.from_account_id,
            scheduled.amount,
            scheduled.to_account_id,
            scheduled.converted_amount,
        )
        record = TransactionRecord(
            transaction_id=uuid.uuid4().hex,
            from_account_id=scheduled.from_account_id,
            to_account_id=scheduled.to_account_id,
            from_account_name=scheduled.from_account_name,
            to_account_name=scheduled.to_account_name,
            from_currency=scheduled.from_currency,
            to_currency=scheduled.to_currency,
            amount=scheduled.amount,
            converted_amount=scheduled.converted_amount,
            fx_rate=scheduled.fx_rate,
            note=scheduled.note,
            timestamp=self.now(),
            status=TransferStatus.COMPLETED,
            settles=scheduled.transaction_id,
        )
        self.ledger.append(record)
        logger.info(
            "Scheduled transfer %s settled as %s",
            scheduled.transaction_id,
            record.transaction_id,
            extra=transfer_context(record),
        )
        return record
