"""MarketRepository — the in-process set of markets and its derived views."""

from __future__ import annotations

import time
from collections.abc import Iterable
from typing import TYPE_CHECKING

import structlog

from pharosbet_core.errors import MarketNotFound, NotAuthorized
from pharosbet_core.market.pricing import apply_trade
from pharosbet_core.models import CATEGORIES, Market, MarketDraft, Outcome

if TYPE_CHECKING:
    from pharosbet_core.wallet.session import Session

log = structlog.get_logger("market_repository")

FEATURED_LIMIT = 3
TRENDING_LIMIT = 5


def _now_ms() -> int:
    return int(time.time() * 1000)


class MarketRepository:
    """Ordered set of markets: on-chain first, then off-chain newest first.

    Markets are frozen; every mutation swaps in a new instance so the derived
    views, recomputed on each read, never need invalidating. No method awaits
    between lookup and replace.
    """

    categories: tuple[str, ...] = CATEGORIES

    def __init__(self, markets: Iterable[Market] = ()) -> None:
        self._markets: list[Market] = list(markets)

    # ── Reads ─────────────────────────────────────────────────

    @property
    def markets(self) -> list[Market]:
        return list(self._markets)

    @property
    def on_chain_markets(self) -> list[Market]:
        return [m for m in self._markets if m.is_on_chain]

    @property
    def off_chain_markets(self) -> list[Market]:
        return [m for m in self._markets if not m.is_on_chain]

    def get_market(self, market_id: str) -> Market | None:
        for m in self._markets:
            if m.id == market_id:
                return m
        return None

    def _active(self) -> list[Market]:
        return [m for m in self._markets if m.status == "active"]

    @property
    def featured_markets(self) -> list[Market]:
        """Top active markets by volume."""
        return sorted(self._active(), key=lambda m: m.volume, reverse=True)[:FEATURED_LIMIT]

    @property
    def trending_markets(self) -> list[Market]:
        """Top active markets by trade count."""
        return sorted(self._active(), key=lambda m: m.participants, reverse=True)[:TRENDING_LIMIT]

    def filter_by_category(self, category: str) -> list[Market]:
        """Active markets in *category*, or all active markets for ``"all"``."""
        if category == "all":
            return self._active()
        if category not in self.categories:
            raise ValueError(f"Unknown category {category!r}")
        return [m for m in self._active() if m.category == category]

    # ── Mutations ─────────────────────────────────────────────

    def _new_local_id(self, created_at: int) -> str:
        market_id = f"local-{created_at}"
        n = 1
        while self.get_market(market_id) is not None:
            market_id = f"local-{created_at}-{n}"
            n += 1
        return market_id

    def create_market(self, draft: MarketDraft, now_ms: int | None = None) -> Market:
        """Create an off-chain market at 50/50 and put it at the head of the feed.

        Raises:
            InvalidDraft: the draft's end date is not after *now_ms*.
        """
        created_at = now_ms if now_ms is not None else _now_ms()
        draft.check_open(created_at)
        market = Market(
            id=self._new_local_id(created_at),
            is_on_chain=False,
            question=draft.question,
            description=draft.description,
            category=draft.category,
            tags=draft.tags,
            creator=draft.creator,
            created_at=created_at,
            end_date=draft.end_date,
            image_url=draft.image_url,
        )
        self._markets.insert(0, market)
        log.info("market_created", market_id=market.id, category=market.category)
        return market

    def buy_shares(
        self,
        market_id: str,
        outcome: Outcome,
        amount: float,
        session: Session | None = None,
    ) -> Market:
        """Apply a trade to a market and commit the result.

        On-chain markets require a connected *session*; the trade is not
        queued when it is missing.

        Raises:
            MarketNotFound: no market with that id.
            NotAuthorized: on-chain market without a connected session.
            TradeRejected: invalid amount or inactive market.
        """
        market = self.get_market(market_id)
        if market is None:
            raise MarketNotFound(market_id)
        if market.is_on_chain:
            if session is None:
                raise NotAuthorized("Connect a wallet to trade on-chain markets")
            session.require_connected()

        updated = apply_trade(market, outcome, amount)
        self._replace(updated)
        log.info(
            "shares_bought",
            market_id=market_id,
            outcome=outcome,
            amount=amount,
            yes_price=updated.yes_price,
            no_price=updated.no_price,
        )
        return updated

    def _replace(self, market: Market) -> None:
        for i, m in enumerate(self._markets):
            if m.id == market.id:
                self._markets[i] = market
                return
        raise MarketNotFound(market.id)

    def revert(self, before: Market, after: Market) -> bool:
        """Put *before* back if the entry is still exactly *after*.

        Returns False when something else (a refresh, another trade) has
        replaced the entry since.
        """
        for i, m in enumerate(self._markets):
            if m.id == after.id:
                if m is not after:
                    return False
                self._markets[i] = before
                log.info("trade_reverted", market_id=before.id)
                return True
        return False

    def replace_on_chain(self, markets: Iterable[Market]) -> list[Market]:
        """Swap the whole on-chain subset; off-chain markets keep their order."""
        on_chain = list(markets)
        self._markets = on_chain + self.off_chain_markets
        return self.markets
