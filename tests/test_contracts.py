"""Tests for contract call encoding and unit conversion."""

from __future__ import annotations

from decimal import Decimal

import pytest
from eth_abi import encode
from eth_utils import encode_hex, function_signature_to_4byte_selector

from pharosbet_core.chain.contracts import (
    MARKET_INFO_TYPES,
    MarketInfo,
    buy_calldata,
    create_market_calldata,
    decode_market_info,
    decode_result,
    encode_call,
    phar_to_wei,
    wei_to_phar,
)

from conftest import CREATOR


class TestEncoding:
    def test_selector_only(self):
        data = encode_call("getMarketCount()")
        assert data == encode_hex(function_signature_to_4byte_selector("getMarketCount()"))
        assert len(data) == 2 + 8

    def test_with_arguments(self):
        data = encode_call("getMarkets(uint256,uint256)", ["uint256", "uint256"], [0, 50])
        assert len(data) == 2 + 8 + 2 * 64
        assert data.endswith(f"{50:064x}")

    def test_buy_calldata_differs_by_side(self):
        assert buy_calldata("yes") == encode_call("buyYes()")
        assert buy_calldata("no") == encode_call("buyNo()")

    def test_create_market_calldata(self):
        data = create_market_calldata("Q?", "D", "tech", 1_900_000_000)
        assert data.startswith(encode_call("createMarket(string,string,string,uint256)"))


class TestDecoding:
    def test_decode_result(self):
        assert decode_result(["uint256"], encode_hex(encode(["uint256"], [7]))) == (7,)

    def test_decode_market_info(self):
        raw = encode(
            MARKET_INFO_TYPES,
            ["Q?", "D", "sports", CREATOR, 1_900_000_000, 70, 30, 5 * 10**18, 3, 2, 1],
        )
        info = decode_market_info(encode_hex(raw))
        assert isinstance(info, MarketInfo)
        assert info.question == "Q?"
        assert info.category == "sports"
        assert info.creator.lower() == CREATOR
        assert info.end_time == 1_900_000_000
        assert (info.yes_price, info.no_price) == (70, 30)
        assert info.participant_count == 3
        assert (info.status_code, info.outcome_code) == (2, 1)


class TestUnits:
    def test_wei_to_phar(self):
        assert wei_to_phar(3 * 10**18) == 3.0
        assert wei_to_phar(0) == 0.0

    @pytest.mark.parametrize("amount,wei", [
        (1, 10**18),
        (0.01, 10**16),
        (1.5, 15 * 10**17),
        (Decimal("0.1234"), 1234 * 10**14),
    ])
    def test_phar_to_wei(self, amount, wei):
        assert phar_to_wei(amount) == wei
