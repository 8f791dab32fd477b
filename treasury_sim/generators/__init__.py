"""Generators for simulated transfer traffic."""

from treasury_sim.generators.transfer import TransferRequestGenerator

__all__ = ["TransferRequestGenerator"]
