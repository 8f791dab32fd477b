"""Scenarios driving simulated traffic through the treasury service."""

from treasury_sim.scenarios.simulation import SimulationSummary, TreasurySimulationScenario

__all__ = ["SimulationSummary", "TreasurySimulationScenario"]
