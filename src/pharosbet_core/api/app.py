"""FastAPI application exposing the market feed and wallet session to a UI."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError

from pharosbet_core.chain.gateway import ChainGateway, RpcChainGateway
from pharosbet_core.chain.reconcile import ReconciliationService
from pharosbet_core.config.schema import AppConfig
from pharosbet_core.errors import (
    InvalidDraft,
    MarketNotFound,
    NotAuthorized,
    TradeRejected,
    TradeSubmissionError,
)
from pharosbet_core.market.demo import demo_markets
from pharosbet_core.market.pricing import quote_trade
from pharosbet_core.market.repository import MarketRepository
from pharosbet_core.market.service import MarketService
from pharosbet_core.models import Market, MarketDraft, Outcome
from pharosbet_core.wallet.provider import Eip1193Provider, WalletProvider
from pharosbet_core.wallet.session import Session

logger = structlog.get_logger("api")


class CreateMarketRequest(MarketDraft):
    on_chain: bool = False


class TradeRequest(BaseModel):
    outcome: Outcome
    amount: float


def _dump(market: Market) -> dict:
    return market.model_dump(by_alias=True, mode="json")


def _dump_all(markets: list[Market]) -> dict:
    return {"markets": [_dump(m) for m in markets]}


def create_app(
    config: AppConfig | None = None,
    gateway: ChainGateway | None = None,
    provider: WalletProvider | None = None,
    repository: MarketRepository | None = None,
) -> FastAPI:
    """Build the API around one repository, one reconciler and one wallet session."""
    config = config or AppConfig()
    if gateway is None:
        gateway = RpcChainGateway.from_config(config.chain)
    if provider is None:
        provider = Eip1193Provider.from_config(config.wallet)
    if repository is None:
        repository = MarketRepository(demo_markets() if config.demo_markets else [])

    reconciler = ReconciliationService(gateway, repository, page_size=config.reconciliation.page_size)
    service = MarketService(repository, config.chain.factory_address)
    state: dict = {"session": None, "poll_task": None}

    def new_session() -> Session:
        session = Session(provider, config.chain)
        session.on_invalidated(on_session_invalidated)
        return session

    def on_session_invalidated(new_chain_id: int | None) -> None:
        # The host owns re-initialization: start over with a fresh session.
        logger.info("session_reinitialized", new_chain_id=new_chain_id)
        state["session"] = new_session()

    state["session"] = new_session()

    app = FastAPI(
        title="PharosBet API",
        description="Prediction market feed, trading and wallet session",
        version="0.1.0",
    )

    # CORS middleware - adjust origins in production
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.repository = repository
    app.state.reconciler = reconciler
    app.state.service = service

    @app.on_event("startup")
    async def startup_event():
        """Load the feed once, then keep it in step with the chain."""
        await reconciler.refresh()
        state["poll_task"] = asyncio.create_task(
            reconciler.poll(config.reconciliation.poll_interval_s)
        )
        logger.info("reconciliation_polling_started", interval_s=config.reconciliation.poll_interval_s)

    @app.on_event("shutdown")
    async def shutdown_event():
        task = state["poll_task"]
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        await gateway.close()
        if isinstance(provider, Eip1193Provider):
            await provider.close()

    @app.get("/api/health")
    async def health_check():
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    # ═══════════════════════════════════════════════════════════════
    # Markets
    # ═══════════════════════════════════════════════════════════════

    @app.get("/api/markets")
    async def list_markets(category: str | None = None):
        """Whole feed, or active markets of one category ("all" for every active one)."""
        if category is None:
            return _dump_all(repository.markets)
        try:
            return _dump_all(repository.filter_by_category(category))
        except ValueError:
            raise HTTPException(status_code=422, detail=f"Unknown category {category!r}")

    @app.get("/api/markets/featured")
    async def featured_markets():
        return _dump_all(repository.featured_markets)

    @app.get("/api/markets/trending")
    async def trending_markets():
        return _dump_all(repository.trending_markets)

    @app.get("/api/categories")
    async def categories():
        return {"categories": list(repository.categories)}

    @app.post("/api/markets/refresh")
    async def refresh_markets():
        return _dump_all(await reconciler.refresh())

    @app.get("/api/markets/{market_id}")
    async def get_market(market_id: str):
        market = repository.get_market(market_id)
        if market is None:
            raise HTTPException(status_code=404, detail="Market not found")
        return _dump(market)

    @app.get("/api/markets/{market_id}/quote")
    async def get_quote(market_id: str, outcome: Outcome, amount: float):
        market = repository.get_market(market_id)
        if market is None:
            raise HTTPException(status_code=404, detail="Market not found")
        try:
            quote = quote_trade(market, outcome, amount)
        except TradeRejected as exc:
            raise HTTPException(status_code=422, detail=str(exc))
        return {
            "outcome": quote.outcome,
            "amount": quote.amount,
            "yesPrice": quote.yes_price,
            "noPrice": quote.no_price,
            "sharesReceived": quote.shares_received,
            "priceImpact": quote.price_impact,
        }

    @app.post("/api/markets", status_code=201)
    async def create_market(req: CreateMarketRequest):
        draft = MarketDraft.model_validate(req.model_dump(exclude={"on_chain"}))
        try:
            receipt = await service.create_market(draft, state["session"], on_chain=req.on_chain)
        except InvalidDraft as exc:
            raise HTTPException(status_code=422, detail=str(exc))
        except NotAuthorized as exc:
            raise HTTPException(status_code=401, detail=str(exc))
        except TradeSubmissionError as exc:
            raise HTTPException(status_code=502, detail=str(exc))
        return {
            "market": _dump(receipt.market) if receipt.market else None,
            "txHash": receipt.tx_hash,
        }

    @app.post("/api/markets/{market_id}/trades")
    async def buy_shares(market_id: str, req: TradeRequest):
        try:
            receipt = await service.buy_shares(market_id, req.outcome, req.amount, state["session"])
        except MarketNotFound:
            raise HTTPException(status_code=404, detail="Market not found")
        except NotAuthorized as exc:
            raise HTTPException(status_code=401, detail=str(exc))
        except (TradeRejected, ValidationError) as exc:
            raise HTTPException(status_code=422, detail=str(exc))
        except TradeSubmissionError as exc:
            raise HTTPException(status_code=502, detail=str(exc))
        return {"market": _dump(receipt.market), "txHash": receipt.tx_hash}

    # ═══════════════════════════════════════════════════════════════
    # Wallet session
    # ═══════════════════════════════════════════════════════════════

    @app.get("/api/session")
    async def get_session():
        return state["session"].snapshot()

    @app.post("/api/session/connect")
    async def connect_session():
        session = state["session"]
        await session.connect()
        return session.snapshot()

    @app.post("/api/session/disconnect")
    async def disconnect_session():
        session = state["session"]
        session.disconnect()
        return session.snapshot()

    @app.post("/api/session/switch-chain")
    async def switch_chain():
        session = state["session"]
        switched = await session.switch_to_pharos()
        return {"switched": switched, "session": state["session"].snapshot()}

    return app
