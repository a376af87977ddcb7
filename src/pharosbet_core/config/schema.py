"""Configuration schema — Pydantic models for config.yaml."""

from __future__ import annotations

from pydantic import BaseModel, Field


class NativeCurrency(BaseModel):
    name: str = "PHAR"
    symbol: str = "PHAR"
    decimals: int = 18


class ChainConfig(BaseModel):
    chain_id: int = 688888
    chain_name: str = "Pharos Testnet"
    rpc_url: str = "https://testnet.dplabs-internal.com"
    block_explorer: str = "https://testnet.pharosscan.xyz"
    native_currency: NativeCurrency = Field(default_factory=NativeCurrency)
    factory_address: str = "0x438D2864035e9FBec492762b0D01121E843073c5"
    oracle_address: str = "0x2A079770f114a0D99799Dc81b172670a28a5c094"
    timeout_s: float = 15.0

    @property
    def chain_id_hex(self) -> str:
        return hex(self.chain_id)

    def add_chain_params(self) -> dict:
        """Parameters for ``wallet_addEthereumChain``."""
        return {
            "chainId": self.chain_id_hex,
            "chainName": self.chain_name,
            "rpcUrls": [self.rpc_url],
            "blockExplorerUrls": [self.block_explorer],
            "nativeCurrency": self.native_currency.model_dump(),
        }


class ReconciliationConfig(BaseModel):
    page_size: int = Field(default=50, ge=1, le=50)
    poll_interval_s: int = 60


class WalletConfig(BaseModel):
    # JSON-RPC endpoint of the wallet bridge; None means no wallet available
    rpc_url: str | None = None
    timeout_s: float = 60.0


class ApiConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000


class SimulationConfig(BaseModel):
    users: int = 15
    min_bet: float = 0.01
    max_bet: float = 0.5
    yes_bias: float = Field(default=0.6, ge=0.0, le=1.0)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class AppConfig(BaseModel):
    chain: ChainConfig = Field(default_factory=ChainConfig)
    reconciliation: ReconciliationConfig = Field(default_factory=ReconciliationConfig)
    wallet: WalletConfig = Field(default_factory=WalletConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    demo_markets: bool = True
