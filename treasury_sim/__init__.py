"""Multi-currency treasury movement simulator."""

__version__ = "0.1.0"
