"""Market repository, pricing engine and trade dispatch."""

from pharosbet_core.market.demo import demo_markets
from pharosbet_core.market.pricing import TradeQuote, apply_trade, quote_trade
from pharosbet_core.market.repository import MarketRepository

__all__ = [
    "MarketRepository",
    "TradeQuote",
    "apply_trade",
    "demo_markets",
    "quote_trade",
]
