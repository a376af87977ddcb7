"""Allow running the API server as: python -m pharosbet_core.api [--config path]."""

import argparse

from pharosbet_core.api.runner import main

parser = argparse.ArgumentParser(description="PharosBet API server")
parser.add_argument("--config", default=None, help="Path to config.yaml")
args = parser.parse_args()
main(config_path=args.config)
