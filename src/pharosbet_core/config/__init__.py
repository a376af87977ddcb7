"""Configuration system."""

from pharosbet_core.config.loader import load_config
from pharosbet_core.config.schema import AppConfig

__all__ = ["AppConfig", "load_config"]
