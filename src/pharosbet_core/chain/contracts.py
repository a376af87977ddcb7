"""Contract call encoding for the market factory and market contracts.

Only the functions this client uses are described here. The contracts
themselves are deployed separately; their logic is not mirrored.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from eth_abi import decode, encode
from eth_utils import decode_hex, encode_hex, from_wei, function_signature_to_4byte_selector, to_wei

# Factory
GET_MARKET_COUNT = "getMarketCount()"
GET_MARKETS = "getMarkets(uint256,uint256)"
CREATE_MARKET = "createMarket(string,string,string,uint256)"

# Market
GET_MARKET_INFO = "getMarketInfo()"
BUY_YES = "buyYes()"
BUY_NO = "buyNo()"

MARKET_INFO_TYPES = [
    "string",   # question
    "string",   # description
    "string",   # category
    "address",  # creator
    "uint256",  # endTime (seconds)
    "uint256",  # yesPrice (percent)
    "uint256",  # noPrice (percent)
    "uint256",  # totalVolume (wei)
    "uint256",  # participantCount
    "uint8",    # status
    "uint8",    # resolvedOutcome
]

STATUS_RESOLVED = 2
OUTCOME_YES = 1
OUTCOME_NO = 2


@dataclass(frozen=True)
class MarketInfo:
    """Raw ``getMarketInfo()`` result, fields in contract order."""

    question: str
    description: str
    category: str
    creator: str
    end_time: int
    yes_price: int
    no_price: int
    total_volume_wei: int
    participant_count: int
    status_code: int
    outcome_code: int

    @classmethod
    def from_tuple(cls, values: tuple | list) -> MarketInfo:
        return cls(*values)


def encode_call(signature: str, types: list[str] | None = None, args: list | None = None) -> str:
    """Selector plus ABI-encoded arguments, as 0x-prefixed calldata."""
    data = function_signature_to_4byte_selector(signature)
    if types:
        data += encode(types, args or [])
    return encode_hex(data)


def decode_result(types: list[str], data: str) -> tuple:
    return decode(types, decode_hex(data))


def decode_market_info(data: str) -> MarketInfo:
    return MarketInfo.from_tuple(decode_result(MARKET_INFO_TYPES, data))


def buy_calldata(outcome: str) -> str:
    return encode_call(BUY_YES if outcome == "yes" else BUY_NO)


def create_market_calldata(question: str, description: str, category: str, end_time_s: int) -> str:
    return encode_call(
        CREATE_MARKET,
        ["string", "string", "string", "uint256"],
        [question, description, category, end_time_s],
    )


def wei_to_phar(wei: int) -> float:
    return float(from_wei(wei, "ether"))


def phar_to_wei(amount: float | Decimal) -> int:
    return int(to_wei(Decimal(str(amount)), "ether"))
