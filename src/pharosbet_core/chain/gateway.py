"""Chain gateway — read access to the market factory and market contracts."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pharosbet_core.chain.contracts import (
    GET_MARKET_COUNT,
    GET_MARKET_INFO,
    GET_MARKETS,
    MarketInfo,
    decode_market_info,
    decode_result,
    encode_call,
)
from pharosbet_core.chain.rpc import JsonRpcClient
from pharosbet_core.config.schema import ChainConfig

MAX_PAGE_SIZE = 50


class ChainGateway(ABC):
    """Read boundary to the registry (factory) and per-market contracts."""

    @abstractmethod
    async def market_count(self) -> int:
        ...

    @abstractmethod
    async def market_addresses(self, offset: int, limit: int) -> list[str]:
        """Registry addresses in creation order; *limit* is capped at 50."""
        ...

    @abstractmethod
    async def market_info(self, address: str) -> MarketInfo:
        ...

    async def close(self) -> None:
        return None


class RpcChainGateway(ChainGateway):
    """ChainGateway over JSON-RPC ``eth_call``."""

    def __init__(self, rpc: JsonRpcClient, factory_address: str):
        self.rpc = rpc
        self.factory_address = factory_address

    @classmethod
    def from_config(cls, config: ChainConfig) -> RpcChainGateway:
        return cls(JsonRpcClient(config.rpc_url, timeout_s=config.timeout_s), config.factory_address)

    async def _call(self, to: str, data: str) -> str:
        return await self.rpc.request("eth_call", [{"to": to, "data": data}, "latest"])

    async def chain_id(self) -> int:
        return int(await self.rpc.request("eth_chainId"), 16)

    async def market_count(self) -> int:
        raw = await self._call(self.factory_address, encode_call(GET_MARKET_COUNT))
        (count,) = decode_result(["uint256"], raw)
        return count

    async def market_addresses(self, offset: int, limit: int) -> list[str]:
        limit = min(limit, MAX_PAGE_SIZE)
        data = encode_call(GET_MARKETS, ["uint256", "uint256"], [offset, limit])
        raw = await self._call(self.factory_address, data)
        (addresses,) = decode_result(["address[]"], raw)
        return list(addresses)

    async def market_info(self, address: str) -> MarketInfo:
        raw = await self._call(address, encode_call(GET_MARKET_INFO))
        return decode_market_info(raw)

    async def close(self) -> None:
        await self.rpc.close()
