"""Exception hierarchy for the market core."""

from __future__ import annotations


class PharosBetError(Exception):
    """Base class for all errors raised by pharosbet_core."""


class TradeRejected(PharosBetError):
    """Invalid trade input: non-positive amount or inactive market."""


class MarketNotFound(PharosBetError):
    def __init__(self, market_id: str) -> None:
        super().__init__(f"Market {market_id!r} not found")
        self.market_id = market_id


class NotAuthorized(PharosBetError):
    """An on-chain operation was attempted without a connected wallet session."""


class MalformedMarketData(PharosBetError):
    """A market's on-chain info tuple cannot be turned into a Market."""


class RpcError(PharosBetError):
    """JSON-RPC or wallet provider error, carrying the EIP-1193 error code."""

    USER_REJECTED = 4001
    UNRECOGNIZED_CHAIN = 4902

    def __init__(self, code: int | None, message: str, data: object = None) -> None:
        super().__init__(f"[{code}] {message}" if code is not None else message)
        self.code = code
        self.message = message
        self.data = data

    @property
    def user_rejected(self) -> bool:
        return self.code == self.USER_REJECTED


class TradeSubmissionError(PharosBetError):
    """The wallet failed to submit a trade that was already applied locally."""


class InvalidDraft(PharosBetError):
    """A new market's draft cannot be created as given (e.g. deadline passed)."""
