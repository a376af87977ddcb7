"""Wallet provider boundary and session state machine."""

from pharosbet_core.wallet.provider import Eip1193Provider, WalletProvider, WalletSigner
from pharosbet_core.wallet.session import Session, SessionState, shorten_address

__all__ = [
    "Eip1193Provider",
    "Session",
    "SessionState",
    "WalletProvider",
    "WalletSigner",
    "shorten_address",
]
