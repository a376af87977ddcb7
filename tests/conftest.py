"""Shared test fixtures and doubles for the chain and the wallet."""

from __future__ import annotations

import time

import pytest

from pharosbet_core.chain.contracts import MarketInfo
from pharosbet_core.chain.gateway import ChainGateway
from pharosbet_core.market.demo import demo_markets
from pharosbet_core.market.repository import MarketRepository
from pharosbet_core.models import Market
from pharosbet_core.wallet.provider import WalletProvider

NOW_MS = int(time.time() * 1000)
DAY_MS = 86_400_000

ADDR_A = "0x" + "a1" * 20
ADDR_B = "0x" + "b2" * 20
ADDR_C = "0x" + "c3" * 20
CREATOR = "0x" + "ee" * 20


def make_info(**overrides) -> MarketInfo:
    fields = dict(
        question="Will PHAR flip ETH?",
        description="Resolves YES on a flippening.",
        category="crypto",
        creator=CREATOR,
        end_time=(NOW_MS + 30 * DAY_MS) // 1000,
        yes_price=40,
        no_price=60,
        total_volume_wei=3 * 10**18,
        participant_count=12,
        status_code=0,
        outcome_code=0,
    )
    fields.update(overrides)
    return MarketInfo(**fields)


def make_market(**overrides) -> Market:
    fields = dict(
        id="m-1",
        question="Will it rain?",
        end_date=NOW_MS + DAY_MS,
        yes_price=50,
        no_price=50,
    )
    fields.update(overrides)
    return Market(**fields)


class FakeGateway(ChainGateway):
    """In-memory registry: address -> MarketInfo or an exception to raise."""

    def __init__(
        self,
        infos: dict[str, MarketInfo | Exception] | None = None,
        count: int | None = None,
        count_error: Exception | None = None,
        addresses_error: Exception | None = None,
    ) -> None:
        self.infos = dict(infos or {})
        self.count = count
        self.count_error = count_error
        self.addresses_error = addresses_error
        self.requested: list[tuple[int, int]] = []
        self.on_info = None
        self.closed = False

    async def market_count(self) -> int:
        if self.count_error:
            raise self.count_error
        return self.count if self.count is not None else len(self.infos)

    async def market_addresses(self, offset: int, limit: int) -> list[str]:
        self.requested.append((offset, limit))
        if self.addresses_error:
            raise self.addresses_error
        return list(self.infos)[offset:offset + limit]

    async def market_info(self, address: str) -> MarketInfo:
        if self.on_info is not None:
            self.on_info(address)
        value = self.infos[address]
        if isinstance(value, Exception):
            raise value
        return value

    async def close(self) -> None:
        self.closed = True


class FakeWallet(WalletProvider):
    """Scriptable wallet; records every request it receives."""

    def __init__(
        self,
        accounts: list[str] | None = None,
        chain_id: int = 688888,
        balance_wei: int = 10**18,
        accounts_error: Exception | None = None,
        switch_error: Exception | None = None,
        add_error: Exception | None = None,
        send_error: Exception | None = None,
    ) -> None:
        super().__init__()
        self.accounts = ["0xabc"] if accounts is None else accounts
        self.chain_id = chain_id
        self.balance_wei = balance_wei
        self.accounts_error = accounts_error
        self.switch_error = switch_error
        self.add_error = add_error
        self.send_error = send_error
        self.calls: list[tuple] = []

    async def request_accounts(self) -> list[str]:
        self.calls.append(("request_accounts",))
        if self.accounts_error:
            raise self.accounts_error
        return list(self.accounts)

    async def get_balance(self, address: str) -> int:
        self.calls.append(("get_balance", address))
        return self.balance_wei

    async def get_network(self) -> int:
        self.calls.append(("get_network",))
        return self.chain_id

    async def switch_chain(self, chain_id: int) -> None:
        self.calls.append(("switch_chain", chain_id))
        if self.switch_error:
            raise self.switch_error

    async def add_chain(self, params: dict) -> None:
        self.calls.append(("add_chain", params))
        if self.add_error:
            raise self.add_error

    async def send_transaction(self, tx: dict) -> str:
        self.calls.append(("send_transaction", tx))
        if self.send_error:
            raise self.send_error
        return "0x" + "f" * 64

    def called(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def repository() -> MarketRepository:
    return MarketRepository(demo_markets(now_ms=NOW_MS))


@pytest.fixture
def wallet() -> FakeWallet:
    return FakeWallet()
