"""Discover on-chain markets once and print the merged feed.

Run: python -m pharosbet_core.chain [--config config.yaml] [--no-demo]
"""

from __future__ import annotations

import argparse
import asyncio

from pharosbet_core.chain.gateway import RpcChainGateway
from pharosbet_core.chain.reconcile import ReconciliationService
from pharosbet_core.config import load_config
from pharosbet_core.logging import configure_logging, get_logger
from pharosbet_core.market.demo import demo_markets
from pharosbet_core.market.repository import MarketRepository

log = get_logger(__name__)


async def run(config_path: str | None = None, include_demo: bool = True) -> None:
    cfg = load_config(config_path)
    configure_logging(cfg.logging)

    gateway = RpcChainGateway.from_config(cfg.chain)
    repository = MarketRepository(demo_markets() if include_demo and cfg.demo_markets else [])
    reconciler = ReconciliationService(gateway, repository, page_size=cfg.reconciliation.page_size)

    log.info("discovering markets", rpc_url=cfg.chain.rpc_url, factory=cfg.chain.factory_address)
    try:
        feed = await reconciler.refresh()
    finally:
        await gateway.close()

    for m in feed:
        source = "chain" if m.is_on_chain else "local"
        print(f"{m.id:<52} {source:<5} {m.status:<8} YES {m.yes_price:>3}%  {m.question}")


def main() -> None:
    parser = argparse.ArgumentParser(description="PharosBet market discovery")
    parser.add_argument("--config", default=None, help="Path to config file")
    parser.add_argument("--no-demo", action="store_true", help="Leave out the demo markets")
    args = parser.parse_args()
    asyncio.run(run(args.config, include_demo=not args.no_demo))


if __name__ == "__main__":
    main()
