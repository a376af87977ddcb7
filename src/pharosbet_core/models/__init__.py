"""Pydantic domain models."""

from pharosbet_core.models.market import (
    CATEGORIES,
    Market,
    MarketCategory,
    MarketDraft,
    MarketStatus,
    Outcome,
)

__all__ = [
    "CATEGORIES",
    "Market",
    "MarketCategory",
    "MarketDraft",
    "MarketStatus",
    "Outcome",
]
