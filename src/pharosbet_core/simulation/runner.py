"""Trade simulator — random users buying YES/NO against one market.

Runs entirely through the local pricing engine against the demo set, so it
shows how prices move under a stream of trades without touching the chain.

Run: python -m pharosbet_core.simulation [--market demo-1] [--users 15] [--seed 7]
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass

import numpy as np
import structlog

from pharosbet_core.config import load_config
from pharosbet_core.errors import TradeRejected
from pharosbet_core.logging import configure_logging
from pharosbet_core.market.demo import demo_markets
from pharosbet_core.market.repository import MarketRepository

log = structlog.get_logger("simulation")


@dataclass(frozen=True)
class SimulatedTrade:
    user: int
    outcome: str
    amount: float
    yes_price: int
    no_price: int
    error: str | None = None


def simulate_trades(
    repository: MarketRepository,
    market_id: str,
    users: int = 15,
    min_bet: float = 0.01,
    max_bet: float = 0.5,
    yes_bias: float = 0.6,
    seed: int | None = None,
) -> list[SimulatedTrade]:
    """Have *users* simulated traders each place one trade, in order.

    Each picks YES with probability *yes_bias* and a size uniform in
    [min_bet, max_bet] (4 decimals). Rejected trades are recorded, not raised.
    """
    if min_bet <= 0 or max_bet < min_bet:
        raise ValueError(f"Invalid bet range [{min_bet}, {max_bet}]")
    if repository.get_market(market_id) is None:
        raise ValueError(f"Unknown market {market_id!r}")

    rng = np.random.default_rng(seed)
    picks_yes = rng.random(users) < yes_bias
    amounts = np.round(rng.uniform(min_bet, max_bet, users), 4)

    trades: list[SimulatedTrade] = []
    for i in range(users):
        outcome = "yes" if picks_yes[i] else "no"
        amount = float(amounts[i])
        try:
            market = repository.buy_shares(market_id, outcome, amount)
        except TradeRejected as exc:
            log.warning("simulated_trade_rejected", user=i + 1, error=str(exc))
            current = repository.get_market(market_id)
            trades.append(SimulatedTrade(
                i + 1, outcome, amount, current.yes_price, current.no_price, error=str(exc),
            ))
            continue
        trades.append(SimulatedTrade(i + 1, outcome, amount, market.yes_price, market.no_price))
    return trades


def format_trades(trades: list[SimulatedTrade]) -> str:
    lines = [
        "User # | Side | Amount (PHAR) | YES Price | NO Price",
        "-------|------|---------------|-----------|---------",
    ]
    for t in trades:
        if t.error:
            lines.append(f"  {t.user:>3}   | FAIL | {t.error[:40]}")
            continue
        side = "YES" if t.outcome == "yes" else "NO "
        lines.append(
            f"  {t.user:>3}   | {side}  | {t.amount:>13.4f} | {t.yes_price:>8}% | {t.no_price:>6}%"
        )
    return "\n".join(lines)


def main() -> None:
    parser = argparse.ArgumentParser(description="Simulate trades against a demo market")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--market", default="demo-1", help="Market id to trade")
    parser.add_argument("--users", type=int, default=None)
    parser.add_argument("--min-bet", type=float, default=None)
    parser.add_argument("--max-bet", type=float, default=None)
    parser.add_argument("--yes-bias", type=float, default=None)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    cfg = load_config(args.config)
    configure_logging(cfg.logging)
    sim = cfg.simulation

    repository = MarketRepository(demo_markets())
    market = repository.get_market(args.market)
    if market is None:
        parser.error(f"unknown market {args.market!r}")

    print(f'Market: "{market.question}"')
    print(f"Initial price — YES: {market.yes_price}% | NO: {market.no_price}%\n")

    trades = simulate_trades(
        repository,
        args.market,
        users=args.users if args.users is not None else sim.users,
        min_bet=args.min_bet if args.min_bet is not None else sim.min_bet,
        max_bet=args.max_bet if args.max_bet is not None else sim.max_bet,
        yes_bias=args.yes_bias if args.yes_bias is not None else sim.yes_bias,
        seed=args.seed,
    )
    print(format_trades(trades))

    final = repository.get_market(args.market)
    print("\n========== SIMULATION COMPLETE ==========")
    print(f"Total participants: {final.participants}")
    print(f"Total volume: {final.volume:.4f} PHAR")
    print(f"Final price — YES: {final.yes_price}% | NO: {final.no_price}%")
