"""Transfer request generator for simulated treasury traffic."""

from collections.abc import Callable, Iterator, Sequence
from datetime import datetime, timedelta
from decimal import ROUND_DOWN, Decimal

from treasury_sim.generators.base import BaseGenerator
from treasury_sim.models import Account, TransferRequest

CENT = Decimal("0.01")


class TransferRequestGenerator(BaseGenerator):
    """Generate synthetic transfer requests between existing accounts.

    Amounts are a small share of the source balance so most requests pass
    validation. A fraction of requests can be scheduled into the future, and
    a fraction can be deliberately invalid ("poison pills") to exercise the
    rejection path.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    scheduled_rate : float
        Share of requests carrying a future ``scheduled_for``.
    poison_pill_rate : float
        Share of requests built to fail validation.
    now : Callable[[], datetime]
        Clock used to place schedule dates in the future.
    """

    MAX_BALANCE_SHARE = 0.05
    POISON_PILLS = (
        "negative_amount",
        "zero_amount",
        "same_account",
        "unknown_account",
        "overdraft",
        "past_schedule",
        "not_a_number",
    )

    def __init__(
        self,
        seed: int | None = None,
        scheduled_rate: float = 0.1,
        poison_pill_rate: float = 0.0,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(seed)
        self.scheduled_rate = scheduled_rate
        self.poison_pill_rate = poison_pill_rate
        self.now = now

    def generate(self, accounts: Sequence[Account]) -> TransferRequest:
        """Generate a single request between two of ``accounts``.

        Parameters
        ----------
        accounts : Sequence[Account]
            Candidate accounts; at least two are required.

        Returns
        -------
        TransferRequest
            Generated request.
        """
        if len(accounts) < 2:
            raise ValueError("At least two accounts are required to generate transfers")

        if self.rng.random() < self.poison_pill_rate:
            return self.generate_poison_pill(accounts)

        source, destination = self.rng.sample(list(accounts), 2)
        scheduled_for = None
        if self.rng.random() < self.scheduled_rate:
            scheduled_for = self.now() + timedelta(
                days=self.rng.randint(1, 30),
                hours=self.rng.randint(0, 23),
            )

        return TransferRequest(
            from_account_id=source.account_id,
            to_account_id=destination.account_id,
            amount=self._amount_for(source),
            note=self._note(),
            scheduled_for=scheduled_for,
        )

    def generate_batch(self, accounts: Sequence[Account], count: int) -> Iterator[TransferRequest]:
        """Generate ``count`` requests."""
        for _ in range(count):
            yield self.generate(accounts)

    def generate_poison_pill(
        self, accounts: Sequence[Account], kind: str | None = None
    ) -> TransferRequest:
        """Generate a request that must be rejected.

        Parameters
        ----------
        accounts : Sequence[Account]
            Candidate accounts.
        kind : str | None
            One of ``POISON_PILLS``; random when omitted.
        """
        kind = kind or self.rng.choice(self.POISON_PILLS)
        source, destination = self.rng.sample(list(accounts), 2)
        request = TransferRequest(
            from_account_id=source.account_id,
            to_account_id=destination.account_id,
            amount=self._amount_for(source),
            note=f"[{kind}] {self._note()}",
        )

        if kind == "negative_amount":
            request.amount = -request.amount
        elif kind == "zero_amount":
            request.amount = Decimal("0")
        elif kind == "same_account":
            request.to_account_id = source.account_id
        elif kind == "unknown_account":
            request.to_account_id = f"missing-{self.fake.bothify('####')}"
        elif kind == "overdraft":
            request.amount = source.balance + Decimal(self.rng.randint(1, 1000))
        elif kind == "past_schedule":
            request.scheduled_for = self.now() - timedelta(days=self.rng.randint(1, 30))
        elif kind == "not_a_number":
            request.amount = self.fake.word()
        else:
            raise ValueError(f"Unknown poison pill kind {kind!r}")
        return request

    def _amount_for(self, source: Account) -> Decimal:
        share = Decimal(str(self.rng.uniform(0.001, self.MAX_BALANCE_SHARE)))
        amount = (source.balance * share).quantize(CENT, rounding=ROUND_DOWN)
        return max(amount, CENT)

    def _note(self) -> str:
        # Most treasury movements carry no note
        if self.rng.random() < 0.3:
            return ""
        return self.fake.sentence(nb_words=4).rstrip(".")
