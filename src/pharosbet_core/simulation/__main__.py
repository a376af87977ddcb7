"""Allow running the simulator as: python -m pharosbet_core.simulation."""

from pharosbet_core.simulation.runner import main

main()
