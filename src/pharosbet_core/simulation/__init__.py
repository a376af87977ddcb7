"""Offline trade simulation against the demo markets."""

from pharosbet_core.simulation.runner import SimulatedTrade, format_trades, simulate_trades

__all__ = ["SimulatedTrade", "format_trades", "simulate_trades"]
