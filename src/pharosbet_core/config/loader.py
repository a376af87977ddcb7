"""Config loader — reads YAML, applies PHAROSBET_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from pharosbet_core.config.schema import AppConfig

# env var -> (section, key)
_ENV_OVERRIDES = {
    "PHAROSBET_RPC_URL": ("chain", "rpc_url"),
    "PHAROSBET_FACTORY_ADDRESS": ("chain", "factory_address"),
    "PHAROSBET_WALLET_URL": ("wallet", "rpc_url"),
    "PHAROSBET_LOG_LEVEL": ("logging", "level"),
    "PHAROSBET_LOG_FORMAT": ("logging", "format"),
}


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        PHAROSBET_RPC_URL          -> chain.rpc_url
        PHAROSBET_FACTORY_ADDRESS  -> chain.factory_address
        PHAROSBET_WALLET_URL       -> wallet.rpc_url
        PHAROSBET_LOG_LEVEL        -> logging.level
        PHAROSBET_LOG_FORMAT       -> logging.format
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data.setdefault(section, {})[key] = value

    return AppConfig.model_validate(data)
