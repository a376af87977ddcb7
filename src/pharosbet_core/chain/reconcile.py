"""Reconciliation — merge on-chain market discovery with the off-chain set.

Discovery is polling-based: the factory's market count, one page of
addresses, then one ``getMarketInfo()`` per address. Raw contract codes are
decoded here into the closed model types; nothing past this module sees them.
"""

from __future__ import annotations

import asyncio
import time

import structlog

from pharosbet_core.chain.contracts import (
    OUTCOME_NO,
    OUTCOME_YES,
    STATUS_RESOLVED,
    MarketInfo,
    wei_to_phar,
)
from pharosbet_core.chain.gateway import MAX_PAGE_SIZE, ChainGateway
from pharosbet_core.errors import MalformedMarketData
from pharosbet_core.market.repository import MarketRepository
from pharosbet_core.models import CATEGORIES, Market

log = structlog.get_logger("reconciliation")


def market_id_for(address: str) -> str:
    return f"chain-{address.lower()}"


def normalize_category(raw: str) -> str:
    category = (raw or "").strip().lower()
    return category if category in CATEGORIES else "other"


def normalize_market_info(address: str, info: MarketInfo, now_ms: int) -> Market:
    """Decode one market's info tuple into a Market.

    Raises:
        MalformedMarketData: the tuple cannot describe a valid market
            (empty question, price outside [0, 100], resolved without an
            outcome).
    """
    if not address:
        raise MalformedMarketData("market address is empty")
    if not info.question or not info.question.strip():
        raise MalformedMarketData(f"{address}: empty question")
    if not 0 <= info.yes_price <= 100:
        raise MalformedMarketData(f"{address}: yes price {info.yes_price} out of range")

    end_date = info.end_time * 1000
    if info.status_code == STATUS_RESOLVED:
        if info.outcome_code == OUTCOME_YES:
            resolution = "yes"
        elif info.outcome_code == OUTCOME_NO:
            resolution = "no"
        else:
            raise MalformedMarketData(
                f"{address}: resolved with outcome code {info.outcome_code}"
            )
        status = "resolved"
    else:
        resolution = None
        status = "expired" if end_date < now_ms else "active"

    yes_price = info.yes_price
    volume = wei_to_phar(info.total_volume_wei)

    return Market(
        id=market_id_for(address),
        address=address,
        is_on_chain=True,
        question=info.question.strip(),
        description=info.description,
        category=normalize_category(info.category),
        creator=info.creator,
        end_date=end_date,
        yes_price=yes_price,
        no_price=100 - yes_price,
        # The info tuple has no share balances; split volume by price so a
        # local optimistic trade starts from the displayed odds.
        total_yes_shares=volume * yes_price / 100,
        total_no_shares=volume * (100 - yes_price) / 100,
        volume=volume,
        participants=info.participant_count,
        status=status,
        resolution=resolution,
    )


class ReconciliationService:
    """Keeps a MarketRepository's on-chain subset in step with the chain."""

    def __init__(
        self,
        gateway: ChainGateway,
        repository: MarketRepository,
        page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        self.gateway = gateway
        self.repository = repository
        self.page_size = min(page_size, MAX_PAGE_SIZE)

    async def _discover_addresses(self) -> list[str] | None:
        """Registry page of addresses; None when the registry is unreachable."""
        try:
            count = await self.gateway.market_count()
        except Exception:
            log.warning("market_count_failed", exc_info=True)
            return None
        if count <= 0:
            return []
        try:
            return await self.gateway.market_addresses(0, min(count, self.page_size))
        except Exception:
            log.warning("market_addresses_failed", count=count, exc_info=True)
            return None

    async def fetch_on_chain(self) -> list[Market] | None:
        """Normalized on-chain markets; None if discovery itself failed.

        A market whose fetch or decoding fails is logged and left out.
        """
        addresses = await self._discover_addresses()
        if addresses is None:
            return None

        results = await asyncio.gather(
            *(self.gateway.market_info(a) for a in addresses),
            return_exceptions=True,
        )

        now_ms = int(time.time() * 1000)
        markets: list[Market] = []
        for address, result in zip(addresses, results):
            if isinstance(result, BaseException):
                log.warning("market_fetch_failed", address=address, error=repr(result))
                continue
            try:
                markets.append(normalize_market_info(address, result, now_ms))
            except (MalformedMarketData, TypeError, ValueError) as exc:
                log.warning("market_malformed", address=address, error=str(exc))
        return markets

    async def refresh(self) -> list[Market]:
        """Fetch on-chain markets and merge them ahead of the off-chain set.

        Never raises for chain trouble: if discovery fails, the repository is
        left as it was (cached on-chain markets, if any, plus off-chain ones).
        """
        on_chain = await self.fetch_on_chain()
        if on_chain is None:
            feed = self.repository.markets
            log.warning("reconcile_degraded", cached=len(self.repository.on_chain_markets))
            return feed

        # Commit after the last await so concurrently created off-chain
        # markets are kept.
        feed = self.repository.replace_on_chain(on_chain)
        log.info(
            "reconcile_complete",
            on_chain=len(on_chain),
            off_chain=len(feed) - len(on_chain),
        )
        return feed

    async def poll(self, interval_s: float = 60) -> None:
        """Refresh forever, every *interval_s* seconds.

        The first refresh happens one interval from now; callers refresh
        once themselves at startup.
        """
        while True:
            await asyncio.sleep(interval_s)
            try:
                await self.refresh()
            except Exception:
                log.exception("reconcile_poll_failed")
