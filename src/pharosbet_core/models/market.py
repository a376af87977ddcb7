"""Market models — the central entity and the user-supplied draft."""

from __future__ import annotations

from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

from pharosbet_core.errors import InvalidDraft

MarketCategory = Literal["crypto", "politics", "sports", "tech", "entertainment", "other"]
MarketStatus = Literal["active", "resolved", "expired"]
Outcome = Literal["yes", "no"]

CATEGORIES: tuple[str, ...] = get_args(MarketCategory)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class MarketDraft(_CamelModel):
    """The part of a market a creator supplies."""

    question: str
    description: str
    category: MarketCategory = "other"
    end_date: int  # ms epoch, must lie in the future at creation
    creator: str = ""
    tags: tuple[str, ...] = ()
    image_url: str | None = None

    @field_validator("question", "description")
    @classmethod
    def _strip_required(cls, v: str, info: ValidationInfo) -> str:
        v = v.strip()
        if not v:
            raise ValueError(f"{info.field_name} must not be empty")
        return v

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(t.strip().lower() for t in v if t.strip()))

    def check_open(self, now_ms: int) -> None:
        """Raise InvalidDraft unless the deadline is after *now_ms*."""
        if self.end_date <= now_ms:
            raise InvalidDraft(f"End date {self.end_date} must be in the future")


class Market(_CamelModel):
    """A binary-outcome prediction market.

    Frozen: every mutation produces a new, re-validated instance.
    """

    id: str
    address: str = ""
    is_on_chain: bool = False

    question: str
    description: str = ""
    category: MarketCategory = "other"
    tags: tuple[str, ...] = ()
    creator: str = ""
    created_at: int | None = None  # ms epoch, None when unknown
    end_date: int  # ms epoch
    image_url: str | None = None

    yes_price: int = Field(default=50, ge=0, le=100)
    no_price: int = Field(default=50, ge=0, le=100)
    total_yes_shares: float = Field(default=0.0, ge=0)
    total_no_shares: float = Field(default=0.0, ge=0)
    volume: float = Field(default=0.0, ge=0)
    liquidity: float = Field(default=0.0, ge=0)
    participants: int = Field(default=0, ge=0)

    status: MarketStatus = "active"
    resolution: Outcome | None = None

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(v))

    @model_validator(mode="after")
    def _check_invariants(self) -> Market:
        if self.yes_price + self.no_price != 100:
            raise ValueError(
                f"yes_price + no_price must equal 100 (got {self.yes_price} + {self.no_price})"
            )
        if self.status == "resolved" and self.resolution is None:
            raise ValueError("resolved market requires a resolution")
        if self.status != "resolved" and self.resolution is not None:
            raise ValueError(f"{self.status} market cannot carry a resolution")
        return self

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def total_shares(self) -> float:
        return self.total_yes_shares + self.total_no_shares
