"""Tests for configuration loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pharosbet_core.config import AppConfig, load_config
from pharosbet_core.config.schema import ReconciliationConfig


class TestAppConfig:
    def test_defaults(self):
        cfg = AppConfig()
        assert cfg.chain.chain_id == 688888
        assert cfg.chain.rpc_url == "https://testnet.dplabs-internal.com"
        assert cfg.chain.factory_address == "0x438D2864035e9FBec492762b0D01121E843073c5"
        assert cfg.reconciliation.page_size == 50
        assert cfg.wallet.rpc_url is None
        assert cfg.logging.level == "INFO"
        assert cfg.logging.format == "json"

    def test_chain_id_hex(self):
        assert AppConfig().chain.chain_id_hex == "0xa82f8"

    def test_page_size_capped(self):
        with pytest.raises(ValidationError):
            ReconciliationConfig(page_size=51)


class TestLoadConfig:
    def test_load_example_config(self):
        cfg = load_config("config.yaml.example")
        assert cfg.chain.chain_name == "Pharos Testnet"
        assert cfg.chain.native_currency.symbol == "PHAR"
        assert cfg.reconciliation.poll_interval_s == 60
        assert cfg.simulation.users == 15
        assert cfg.demo_markets is True

    def test_load_nonexistent_file_returns_defaults(self):
        cfg = load_config("/tmp/nonexistent_config_12345.yaml")
        assert cfg.chain.chain_id == 688888

    def test_load_none_returns_defaults(self):
        cfg = load_config(None)
        assert cfg.api.port == 8000

    def test_env_override_rpc_url(self, monkeypatch):
        monkeypatch.setenv("PHAROSBET_RPC_URL", "http://localhost:8545")
        cfg = load_config(None)
        assert cfg.chain.rpc_url == "http://localhost:8545"

    def test_env_override_wallet_url(self, monkeypatch):
        monkeypatch.setenv("PHAROSBET_WALLET_URL", "http://localhost:9000")
        cfg = load_config(None)
        assert cfg.wallet.rpc_url == "http://localhost:9000"

    def test_env_override_log_level(self, monkeypatch):
        monkeypatch.setenv("PHAROSBET_LOG_LEVEL", "DEBUG")
        cfg = load_config(None)
        assert cfg.logging.level == "DEBUG"

    def test_env_override_log_format(self, monkeypatch):
        monkeypatch.setenv("PHAROSBET_LOG_FORMAT", "console")
        cfg = load_config(None)
        assert cfg.logging.format == "console"

    def test_env_overrides_yaml_values(self, monkeypatch):
        monkeypatch.setenv("PHAROSBET_FACTORY_ADDRESS", "0x" + "12" * 20)
        cfg = load_config("config.yaml.example")
        assert cfg.chain.factory_address == "0x" + "12" * 20
        # Non-overridden values preserved
        assert cfg.chain.rpc_url == "https://testnet.dplabs-internal.com"

    def test_load_minimal_yaml(self, tmp_path):
        p = tmp_path / "minimal.yaml"
        p.write_text("chain:\n  chain_id: 688689\ndemo_markets: false\n")
        cfg = load_config(p)
        assert cfg.chain.chain_id == 688689
        assert cfg.demo_markets is False
        # Defaults still apply for unspecified sections
        assert cfg.reconciliation.page_size == 50
