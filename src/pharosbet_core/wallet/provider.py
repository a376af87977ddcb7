"""Wallet provider boundary — EIP-1193 style requests plus account/chain events."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Callable
from typing import Any

import structlog

from pharosbet_core.chain.rpc import JsonRpcClient
from pharosbet_core.config.schema import WalletConfig

log = structlog.get_logger("wallet_provider")

ACCOUNTS_CHANGED = "accountsChanged"
CHAIN_CHANGED = "chainChanged"
EVENTS = (ACCOUNTS_CHANGED, CHAIN_CHANGED)


class WalletSigner:
    """Signing capability bound to one account of a provider."""

    def __init__(self, provider: WalletProvider, address: str) -> None:
        self.provider = provider
        self.address = address

    async def send_transaction(self, to: str, data: str = "0x", value_wei: int = 0) -> str:
        """Ask the wallet to sign and broadcast; returns the transaction hash."""
        tx = {"from": self.address, "to": to, "data": data, "value": hex(value_wei)}
        return await self.provider.send_transaction(tx)


class WalletProvider(ABC):
    """A user's wallet: account access, balances, network control, signing.

    Event handlers registered with :meth:`on` are called synchronously from
    :meth:`emit`, in registration order.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable[[Any], None]]] = defaultdict(list)

    @abstractmethod
    async def request_accounts(self) -> list[str]:
        ...

    @abstractmethod
    async def get_balance(self, address: str) -> int:
        """Balance in wei."""
        ...

    @abstractmethod
    async def get_network(self) -> int:
        """Active chain id."""
        ...

    @abstractmethod
    async def switch_chain(self, chain_id: int) -> None:
        ...

    @abstractmethod
    async def add_chain(self, params: dict) -> None:
        ...

    @abstractmethod
    async def send_transaction(self, tx: dict) -> str:
        ...

    def get_signer(self, address: str) -> WalletSigner:
        return WalletSigner(self, address)

    # ── Events ────────────────────────────────────────────────

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        if event not in EVENTS:
            raise ValueError(f"Unknown wallet event {event!r}")
        self._listeners[event].append(handler)

    def remove_listener(self, event: str, handler: Callable[[Any], None]) -> None:
        try:
            self._listeners[event].remove(handler)
        except ValueError:
            pass

    def emit(self, event: str, payload: Any) -> None:
        """Deliver a wallet event pushed by the host bridge."""
        for handler in list(self._listeners.get(event, ())):
            try:
                handler(payload)
            except Exception:
                log.exception("wallet_event_handler_failed", wallet_event=event)


class Eip1193Provider(WalletProvider):
    """WalletProvider speaking the EIP-1193 JSON-RPC methods to a wallet bridge."""

    def __init__(self, transport: JsonRpcClient) -> None:
        super().__init__()
        self.transport = transport

    @classmethod
    def from_config(cls, config: WalletConfig) -> Eip1193Provider | None:
        if not config.rpc_url:
            return None
        return cls(JsonRpcClient(config.rpc_url, timeout_s=config.timeout_s))

    async def request_accounts(self) -> list[str]:
        return list(await self.transport.request("eth_requestAccounts"))

    async def get_balance(self, address: str) -> int:
        return int(await self.transport.request("eth_getBalance", [address, "latest"]), 16)

    async def get_network(self) -> int:
        return int(await self.transport.request("eth_chainId"), 16)

    async def switch_chain(self, chain_id: int) -> None:
        await self.transport.request("wallet_switchEthereumChain", [{"chainId": hex(chain_id)}])

    async def add_chain(self, params: dict) -> None:
        await self.transport.request("wallet_addEthereumChain", [params])

    async def send_transaction(self, tx: dict) -> str:
        return await self.transport.request("eth_sendTransaction", [tx])

    async def close(self) -> None:
        await self.transport.close()
