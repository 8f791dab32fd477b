"""Treasury simulation scenario: random transfers through the service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from treasury_sim.config import SimulationConfig, TreasuryConfig
from treasury_sim.generators import TransferRequestGenerator
from treasury_sim.models import TransactionRecord, TransferRejection, TransferStatus
from treasury_sim.service import TreasuryService

logger = logging.getLogger(__name__)


@dataclass
class SimulationSummary:
    """Outcome counts for one scenario run."""

    completed: int = 0
    scheduled: int = 0
    rejected: int = 0
    rejection_reasons: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.completed + self.scheduled + self.rejected


class TreasurySimulationScenario:
    """Submit generated transfer requests to a ``TreasuryService``.

    Parameters
    ----------
    num_transfers : int
        Number of requests to submit.
    scheduled_rate : float
        Share of requests scheduled for a future date.
    poison_pill_rate : float
        Share of requests built to fail validation.
    seed : int | None
        Random seed for reproducibility.
    service : TreasuryService | None
        Service to drive; a fresh seeded service when omitted.
    now : Callable[[], datetime]
        Clock shared by the generator and a service created here.
    """

    def __init__(
        self,
        num_transfers: int = 50,
        scheduled_rate: float = 0.1,
        poison_pill_rate: float = 0.05,
        seed: int | None = None,
        service: TreasuryService | None = None,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.num_transfers = num_transfers
        self.service = service or TreasuryService(now=now)
        self._generator = TransferRequestGenerator(
            seed=seed,
            scheduled_rate=scheduled_rate,
            poison_pill_rate=poison_pill_rate,
            now=now,
        )
        self.summary = SimulationSummary()
        self._rejections: list[TransferRejection] = []

    @classmethod
    def from_config(
        cls, config: TreasuryConfig, service: TreasuryService | None = None
    ) -> "TreasurySimulationScenario":
        """Build a scenario from ``TreasuryConfig.simulation``."""
        sim: SimulationConfig = config.simulation
        return cls(
            num_transfers=sim.num_transfers,
            scheduled_rate=sim.scheduled_rate,
            poison_pill_rate=sim.poison_pill_rate,
            seed=config.seed,
            service=service or TreasuryService(config=config),
        )

    def run(self) -> SimulationSummary:
        """Submit all requests and return outcome counts."""
        logger.info("Starting treasury simulation: %d transfers", self.num_transfers)

        for _ in range(self.num_transfers):
            # Regenerated each time so amounts track current balances
            request = self._generator.generate(self.service.list_accounts())
            outcome = self.service.submit_transfer(request)
            self._record(outcome)

        logger.info(
            "Simulation complete: completed=%d, scheduled=%d, rejected=%d",
            self.summary.completed,
            self.summary.scheduled,
            self.summary.rejected,
        )
        return self.summary

    def get_rejections(self) -> list[TransferRejection]:
        """Rejections collected during the run, in submission order."""
        return list(self._rejections)

    def _record(self, outcome: TransactionRecord | TransferRejection) -> None:
        if isinstance(outcome, TransferRejection):
            self.summary.rejected += 1
            self._rejections.append(outcome)
            for reason in outcome.reasons:
                self.summary.rejection_reasons[reason] = (
                    self.summary.rejection_reasons.get(reason, 0) + 1
                )
        elif outcome.status == TransferStatus.SCHEDULED:
            self.summary.scheduled += 1
        else:
            self.summary.completed += 1
