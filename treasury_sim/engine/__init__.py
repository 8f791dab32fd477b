"""Transfer engine: FX resolution, validation and execution."""

from treasury_sim.engine.executor import TransferExecutor, TransferOutcome
from treasury_sim.engine.fx import FXConverter, round_money
from treasury_sim.engine.validator import TransferValidator, ValidationResult

__all__ = [
    "FXConverter",
    "TransferExecutor",
    "TransferOutcome",
    "TransferValidator",
    "ValidationResult",
    "round_money",
]
