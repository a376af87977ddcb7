"""PharosBet core — market data, pricing, reconciliation and wallet session."""

__version__ = "0.1.0"
