"""Off-chain demo markets shown alongside on-chain ones."""

from __future__ import annotations

import time

from pharosbet_core.models import Market

DAY_MS = 86_400_000

# (question, description, category, creator, created days ago, ends in days,
#  yes, volume, liquidity, yes shares, no shares, participants, tags, resolution)
_DEMO_ROWS = [
    (
        "Will Bitcoin exceed $150,000 by end of 2026?",
        "This market resolves YES if the price of Bitcoin (BTC) reaches or exceeds $150,000 USD "
        "on any major exchange before December 31, 2026 23:59 UTC.",
        "crypto", "0x1234...abcd", 3, 300,
        42, 125_000, 45_000, 52_000, 73_000, 342, ("bitcoin", "crypto", "price"), None,
    ),
    (
        "Will Ethereum ETF inflows exceed $50B in 2026?",
        "Resolves YES if total net inflows into all US-listed Ethereum spot ETFs exceed "
        "$50 billion USD by December 31, 2026.",
        "crypto", "0x5678...efgh", 7, 250,
        35, 89_000, 32_000, 31_000, 58_000, 218, ("ethereum", "etf", "institutional"), None,
    ),
    (
        "Will AI replace 10% of software engineering jobs by 2027?",
        "This market resolves YES if credible industry reports indicate that AI tools have "
        "directly replaced at least 10% of software engineering positions globally by "
        "January 1, 2027.",
        "tech", "0x9abc...ijkl", 14, 600,
        28, 210_000, 78_000, 59_000, 151_000, 567, ("ai", "jobs", "technology"), None,
    ),
    (
        "Will the US Federal Reserve cut rates before July 2026?",
        "Resolves YES if the Federal Reserve announces at least one interest rate cut before "
        "July 1, 2026.",
        "politics", "0xdef0...mnop", 2, 120,
        67, 340_000, 120_000, 228_000, 112_000, 891, ("fed", "rates", "economy"), None,
    ),
    (
        "Will a Pharos-based DeFi protocol reach $1B TVL?",
        "Resolves YES if any DeFi protocol built on Pharos Network achieves $1 billion or more "
        "in Total Value Locked before December 31, 2026.",
        "crypto", "0x1111...2222", 1, 365,
        15, 45_000, 18_000, 6_750, 38_250, 156, ("pharos", "defi", "tvl"), None,
    ),
    (
        "Will the next FIFA World Cup final have over 3 goals?",
        "Resolves YES if the 2026 FIFA World Cup final match ends with a combined total of more "
        "than 3 goals (excluding penalty shootout).",
        "sports", "0x3333...4444", 5, 180,
        38, 67_000, 25_000, 25_460, 41_540, 423, ("fifa", "worldcup", "football"), None,
    ),
    (
        "Will Apple release AR glasses in 2026?",
        "Resolves YES if Apple officially announces and begins selling augmented reality "
        "glasses (not Vision Pro) before December 31, 2026.",
        "tech", "0x5555...6666", 10, 300,
        22, 156_000, 55_000, 34_320, 121_680, 634, ("apple", "ar", "hardware"), None,
    ),
    (
        "Will GTA 6 release before October 2025?",
        "Resolves YES if Grand Theft Auto VI is officially released and available for purchase "
        "before October 1, 2025.",
        "entertainment", "0x7777...8888", 30, -5,
        8, 520_000, 0, 41_600, 478_400, 2341, ("gta6", "gaming", "rockstar"), "no",
    ),
]


def demo_markets(now_ms: int | None = None) -> list[Market]:
    """Build the demo set with dates relative to *now_ms* (default: now)."""
    now = now_ms if now_ms is not None else int(time.time() * 1000)
    markets = []
    for n, row in enumerate(_DEMO_ROWS, start=1):
        (question, description, category, creator, age_days, ends_in_days,
         yes, volume, liquidity, yes_shares, no_shares, participants, tags, resolution) = row
        markets.append(Market(
            id=f"demo-{n}",
            question=question,
            description=description,
            category=category,
            creator=creator,
            created_at=now - age_days * DAY_MS,
            end_date=now + ends_in_days * DAY_MS,
            yes_price=yes,
            no_price=100 - yes,
            volume=volume,
            liquidity=liquidity,
            total_yes_shares=yes_shares,
            total_no_shares=no_shares,
            participants=participants,
            tags=tags,
            status="resolved" if resolution else "active",
            resolution=resolution,
        ))
    return markets
