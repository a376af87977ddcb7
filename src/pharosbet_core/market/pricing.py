"""Pricing engine: the visible effect of a trade on a market's share balances.

The authoritative AMM curve lives in the market contract and may apply
slippage. This module mirrors the effect one unit of notional has in the
simplified model (one unit mints one share of the chosen side) so that the
feed can update before the chain confirms. Everything here is pure.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from pharosbet_core.errors import TradeRejected
from pharosbet_core.models import Market, Outcome


@dataclass(frozen=True)
class TradeQuote:
    """Prospective post-trade state of a market."""

    outcome: Outcome
    amount: float
    yes_price: int
    no_price: int
    total_yes_shares: float
    total_no_shares: float
    shares_received: float
    prior_yes_price: int

    @property
    def price_impact(self) -> int:
        """Change of the traded side's price in percentage points."""
        if self.outcome == "yes":
            return self.yes_price - self.prior_yes_price
        return self.prior_yes_price - self.yes_price


def round_half_up(x: float) -> int:
    """Round to the nearest integer, halves away from zero for x >= 0."""
    return math.floor(x + 0.5)


def _validate(market: Market, outcome: str, amount: float) -> None:
    if outcome not in ("yes", "no"):
        raise TradeRejected(f"Unknown outcome {outcome!r}")
    if not math.isfinite(amount) or amount <= 0:
        raise TradeRejected(f"Trade amount must be positive (got {amount})")
    if market.status != "active":
        raise TradeRejected(f"Market {market.id!r} is {market.status}, not active")


def compute_prices(
    yes_shares: float,
    no_shares: float,
    traded: Outcome,
    prior_yes_price: int,
) -> tuple[int, int]:
    """Turn share balances into integer prices summing to 100.

    Rounding drift is absorbed by the traded side, and the traded side never
    ends below its pre-trade price.
    """
    total = yes_shares + no_shares
    yes_price = round_half_up(yes_shares / total * 100)
    no_price = round_half_up(no_shares / total * 100)

    if traded == "yes":
        yes_price = max(100 - no_price, prior_yes_price)
        no_price = 100 - yes_price
    else:
        no_price = max(100 - yes_price, 100 - prior_yes_price)
        yes_price = 100 - no_price
    return yes_price, no_price


def quote_trade(market: Market, outcome: Outcome, amount: float) -> TradeQuote:
    """Compute the post-trade prices and balances without committing them.

    Raises:
        TradeRejected: amount is not a positive finite number, the outcome
            is unknown, or the market is not active.
    """
    _validate(market, outcome, amount)

    yes_shares = market.total_yes_shares + (amount if outcome == "yes" else 0.0)
    no_shares = market.total_no_shares + (amount if outcome == "no" else 0.0)
    if not math.isfinite(yes_shares + no_shares) or not math.isfinite(market.volume + amount):
        raise TradeRejected(f"Trade amount {amount} is too large for market {market.id!r}")
    yes_price, no_price = compute_prices(yes_shares, no_shares, outcome, market.yes_price)

    return TradeQuote(
        outcome=outcome,
        amount=amount,
        yes_price=yes_price,
        no_price=no_price,
        total_yes_shares=yes_shares,
        total_no_shares=no_shares,
        shares_received=amount,
        prior_yes_price=market.yes_price,
    )


def apply_trade(market: Market, outcome: Outcome, amount: float) -> Market:
    """Return *market* as it looks after buying *amount* of *outcome*.

    ``participants`` counts trade events, not distinct traders.
    """
    quote = quote_trade(market, outcome, amount)
    return Market.model_validate(
        market.model_dump()
        | {
            "total_yes_shares": quote.total_yes_shares,
            "total_no_shares": quote.total_no_shares,
            "yes_price": quote.yes_price,
            "no_price": quote.no_price,
            "volume": market.volume + amount,
            "participants": market.participants + 1,
        }
    )
