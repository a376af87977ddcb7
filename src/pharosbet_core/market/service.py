"""Market service — trades and market creation, local and on-chain."""

from __future__ import annotations

import time
from dataclasses import dataclass

import structlog

from pharosbet_core.chain.contracts import buy_calldata, create_market_calldata, phar_to_wei
from pharosbet_core.errors import MarketNotFound, NotAuthorized, TradeSubmissionError
from pharosbet_core.market.pricing import quote_trade
from pharosbet_core.market.repository import MarketRepository
from pharosbet_core.models import Market, MarketDraft, Outcome
from pharosbet_core.wallet.session import Session

log = structlog.get_logger("market_service")


@dataclass(frozen=True)
class TradeReceipt:
    market: Market
    outcome: Outcome
    amount: float
    tx_hash: str | None = None  # None for off-chain markets


@dataclass(frozen=True)
class CreateReceipt:
    market: Market | None = None  # off-chain: the new market
    tx_hash: str | None = None  # on-chain: appears after the next refresh


def _authorized_signer(session: Session | None):
    if session is None:
        raise NotAuthorized("Connect a wallet first")
    session.require_connected()
    return session.signer


class MarketService:
    """Dispatches user actions to the repository and, for on-chain markets,
    to the wallet.

    On-chain trades are optimistic: the local price moves first, and the
    next reconciliation overwrites it with whatever the chain recorded. A
    trade the wallet does not submit is reverted locally.
    """

    def __init__(self, repository: MarketRepository, factory_address: str) -> None:
        self.repository = repository
        self.factory_address = factory_address

    async def buy_shares(
        self,
        market_id: str,
        outcome: Outcome,
        amount: float,
        session: Session | None = None,
    ) -> TradeReceipt:
        market = self.repository.get_market(market_id)
        if market is None:
            raise MarketNotFound(market_id)
        if not market.is_on_chain:
            updated = self.repository.buy_shares(market_id, outcome, amount)
            return TradeReceipt(market=updated, outcome=outcome, amount=amount)

        signer = _authorized_signer(session)
        quote_trade(market, outcome, amount)
        calldata = buy_calldata(outcome)
        value_wei = phar_to_wei(amount)

        updated = self.repository.buy_shares(market_id, outcome, amount, session=session)
        try:
            tx_hash = await signer.send_transaction(market.address, calldata, value_wei=value_wei)
        except Exception as exc:
            reverted = self.repository.revert(market, updated)
            log.warning(
                "trade_submission_failed",
                market_id=market_id,
                reverted=reverted,
                error=repr(exc),
            )
            raise TradeSubmissionError(f"Wallet did not submit the trade: {exc}") from exc

        log.info("trade_submitted", market_id=market_id, outcome=outcome, tx_hash=tx_hash)
        return TradeReceipt(market=updated, outcome=outcome, amount=amount, tx_hash=tx_hash)

    async def create_market(
        self,
        draft: MarketDraft,
        session: Session | None = None,
        on_chain: bool = False,
    ) -> CreateReceipt:
        if not on_chain:
            return CreateReceipt(market=self.repository.create_market(draft))

        signer = _authorized_signer(session)
        draft.check_open(int(time.time() * 1000))
        calldata = create_market_calldata(
            draft.question, draft.description, draft.category, draft.end_date // 1000,
        )
        try:
            tx_hash = await signer.send_transaction(self.factory_address, calldata)
        except Exception as exc:
            log.warning("market_creation_failed", error=repr(exc))
            raise TradeSubmissionError(f"Wallet did not submit the market: {exc}") from exc

        log.info("market_creation_submitted", tx_hash=tx_hash)
        return CreateReceipt(tx_hash=tx_hash)
