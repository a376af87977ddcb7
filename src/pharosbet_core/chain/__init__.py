"""Chain access — JSON-RPC transport, contract encoding, gateway and reconciliation."""

from pharosbet_core.chain.contracts import MarketInfo
from pharosbet_core.chain.gateway import ChainGateway, RpcChainGateway
from pharosbet_core.chain.reconcile import ReconciliationService, normalize_market_info
from pharosbet_core.chain.rpc import JsonRpcClient

__all__ = [
    "ChainGateway",
    "JsonRpcClient",
    "MarketInfo",
    "ReconciliationService",
    "RpcChainGateway",
    "normalize_market_info",
]
