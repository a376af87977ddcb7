"""Tests for MarketRepository — views, creation, trading and on-chain replacement."""

from __future__ import annotations

import pytest

from pharosbet_core.errors import InvalidDraft, MarketNotFound, NotAuthorized, TradeRejected
from pharosbet_core.market.repository import MarketRepository
from pharosbet_core.models import MarketDraft
from pharosbet_core.wallet.session import Session

from conftest import ADDR_A, ADDR_B, NOW_MS, DAY_MS, make_market


def _draft(**overrides) -> MarketDraft:
    fields = dict(
        question="Will Pharos mainnet launch this year?",
        description="Resolves YES on mainnet genesis.",
        category="tech",
        end_date=NOW_MS + 90 * DAY_MS,
        creator="0xabc",
        tags=("pharos", "mainnet"),
    )
    fields.update(overrides)
    return MarketDraft(**fields)


def _on_chain(address: str, **overrides):
    return make_market(id=f"chain-{address}", address=address, is_on_chain=True, **overrides)


class TestLookup:
    def test_get_market(self, repository):
        assert repository.get_market("demo-1").question.startswith("Will Bitcoin")

    def test_get_missing_market(self, repository):
        assert repository.get_market("nope") is None

    def test_markets_is_a_snapshot(self, repository):
        snapshot = repository.markets
        snapshot.clear()
        assert len(repository.markets) == 8


class TestViews:
    def test_featured_by_volume(self, repository):
        ids = [m.id for m in repository.featured_markets]
        # demo-8 has the most volume but is resolved
        assert ids == ["demo-4", "demo-3", "demo-7"]

    def test_trending_by_participants(self, repository):
        ids = [m.id for m in repository.trending_markets]
        assert ids == ["demo-4", "demo-7", "demo-3", "demo-6", "demo-1"]

    def test_filter_by_category(self, repository):
        ids = [m.id for m in repository.filter_by_category("crypto")]
        assert ids == ["demo-1", "demo-2", "demo-5"]

    def test_filter_all_returns_active_only(self, repository):
        markets = repository.filter_by_category("all")
        assert len(markets) == 7
        assert all(m.status == "active" for m in markets)

    def test_filter_excludes_resolved(self, repository):
        assert repository.filter_by_category("entertainment") == []

    def test_filter_unknown_category(self, repository):
        with pytest.raises(ValueError):
            repository.filter_by_category("weather")

    def test_views_follow_trades(self, repository):
        repository.buy_shares("demo-5", "yes", 400_000)
        assert repository.featured_markets[0].id == "demo-5"

    def test_categories(self, repository):
        assert repository.categories == (
            "crypto", "politics", "sports", "tech", "entertainment", "other",
        )


class TestCreateMarket:
    def test_defaults(self, repository):
        m = repository.create_market(_draft(), now_ms=NOW_MS)
        assert m.id == f"local-{NOW_MS}"
        assert m.yes_price == 50 and m.no_price == 50
        assert m.volume == 0 and m.participants == 0
        assert m.total_yes_shares == 0 and m.total_no_shares == 0
        assert m.status == "active"
        assert m.is_on_chain is False
        assert m.address == ""
        assert m.created_at == NOW_MS
        assert m.tags == ("pharos", "mainnet")

    def test_prepended(self, repository):
        m = repository.create_market(_draft())
        assert repository.markets[0] is m

    def test_same_millisecond_ids_are_unique(self, repository):
        a = repository.create_market(_draft(), now_ms=NOW_MS)
        b = repository.create_market(_draft(), now_ms=NOW_MS)
        assert a.id != b.id
        assert b.id == f"local-{NOW_MS}-1"

    def test_past_end_date_rejected(self, repository):
        with pytest.raises(InvalidDraft):
            repository.create_market(_draft(end_date=NOW_MS - DAY_MS), now_ms=NOW_MS)
        assert len(repository.markets) == 8

    def test_end_date_equal_to_now_rejected(self, repository):
        with pytest.raises(InvalidDraft):
            repository.create_market(_draft(end_date=NOW_MS), now_ms=NOW_MS)

    def test_new_market_is_tradeable(self, repository):
        m = repository.create_market(_draft())
        traded = repository.buy_shares(m.id, "no", 5)
        assert traded.no_price == 100


class TestBuyShares:
    def test_replaces_by_value(self, repository):
        before = repository.get_market("demo-1")
        after = repository.buy_shares("demo-1", "yes", 10_000)
        assert after is not before
        assert repository.get_market("demo-1") is after
        assert before.yes_price == 42
        assert after.yes_price == 46

    def test_order_preserved(self, repository):
        ids = [m.id for m in repository.markets]
        repository.buy_shares("demo-3", "no", 1)
        assert [m.id for m in repository.markets] == ids

    def test_unknown_market(self, repository):
        with pytest.raises(MarketNotFound):
            repository.buy_shares("missing", "yes", 1)

    def test_rejected_trade_leaves_state(self, repository):
        before = repository.markets
        with pytest.raises(TradeRejected):
            repository.buy_shares("demo-8", "yes", 10)
        with pytest.raises(TradeRejected):
            repository.buy_shares("demo-1", "yes", -5)
        assert repository.markets == before

    def test_on_chain_requires_session(self):
        repo = MarketRepository([_on_chain(ADDR_A)])
        with pytest.raises(NotAuthorized):
            repo.buy_shares(f"chain-{ADDR_A}", "yes", 1)

    def test_on_chain_requires_connected_session(self, wallet):
        repo = MarketRepository([_on_chain(ADDR_A)])
        with pytest.raises(NotAuthorized):
            repo.buy_shares(f"chain-{ADDR_A}", "yes", 1, session=Session(wallet))

    @pytest.mark.asyncio
    async def test_on_chain_with_connected_session(self, wallet):
        repo = MarketRepository([_on_chain(ADDR_A)])
        session = Session(wallet)
        await session.connect()
        m = repo.buy_shares(f"chain-{ADDR_A}", "yes", 1, session=session)
        assert m.participants == 1


class TestReplaceOnChain:
    def test_on_chain_first_off_chain_order_kept(self, repository):
        off_ids = [m.id for m in repository.markets]
        feed = repository.replace_on_chain([_on_chain(ADDR_A), _on_chain(ADDR_B)])
        assert [m.id for m in feed[:2]] == [f"chain-{ADDR_A}", f"chain-{ADDR_B}"]
        assert [m.id for m in feed[2:]] == off_ids

    def test_replaces_previous_on_chain_subset(self, repository):
        repository.replace_on_chain([_on_chain(ADDR_A)])
        repository.replace_on_chain([_on_chain(ADDR_B)])
        assert [m.id for m in repository.on_chain_markets] == [f"chain-{ADDR_B}"]
        assert len(repository.off_chain_markets) == 8

    def test_empty_clears_on_chain(self, repository):
        repository.replace_on_chain([_on_chain(ADDR_A)])
        feed = repository.replace_on_chain([])
        assert all(not m.is_on_chain for m in feed)


class TestRevert:
    def test_restores_previous_market(self, repository):
        before = repository.get_market("demo-1")
        after = repository.buy_shares("demo-1", "yes", 10_000)
        assert repository.revert(before, after) is True
        assert repository.get_market("demo-1") is before

    def test_skipped_when_entry_moved_on(self, repository):
        before = repository.get_market("demo-1")
        after = repository.buy_shares("demo-1", "yes", 10_000)
        latest = repository.buy_shares("demo-1", "no", 5_000)
        assert repository.revert(before, after) is False
        assert repository.get_market("demo-1") is latest

    def test_skipped_when_market_gone(self, repository):
        repository.replace_on_chain([_on_chain(ADDR_A)])
        before = repository.get_market(f"chain-{ADDR_A}")
        repository.replace_on_chain([])
        assert repository.revert(before, before) is False
        assert repository.get_market(f"chain-{ADDR_A}") is None
