"""Wallet session state machine.

    disconnected --connect()--> connecting --ok--> connected
                                           --fail--> disconnected
    connected --accountsChanged([])--> disconnected
    connected --accountsChanged([a, ...])--> connected (account a)
    connecting/connected --chainChanged--> invalidated (disconnected, terminal)

A Session is passed explicitly to every operation that needs authorization;
nothing here is process-global.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from enum import Enum
from typing import Any

import structlog
from eth_utils import from_wei

from pharosbet_core.config.schema import ChainConfig
from pharosbet_core.errors import NotAuthorized, RpcError
from pharosbet_core.wallet.provider import (
    ACCOUNTS_CHANGED,
    CHAIN_CHANGED,
    WalletProvider,
    WalletSigner,
)

log = structlog.get_logger("wallet_session")


class SessionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


def shorten_address(address: str) -> str:
    """``0x1234567890abcdef`` -> ``0x1234...cdef``."""
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def _parse_chain_id(raw: Any) -> int | None:
    try:
        if isinstance(raw, str):
            return int(raw, 16) if raw.lower().startswith("0x") else int(raw)
        return int(raw)
    except (TypeError, ValueError):
        return None


class Session:
    """One wallet connection and what it authorizes."""

    def __init__(self, provider: WalletProvider | None, chain: ChainConfig | None = None) -> None:
        self.provider = provider
        self.chain = chain or ChainConfig()

        self.state = SessionState.DISCONNECTED
        self.account: str | None = None
        self.balance = Decimal(0)
        self.chain_id: int | None = None
        self.signer: WalletSigner | None = None
        self.last_error: str | None = None
        self.invalidated = False
        # Bumped by every connect and disconnect; a connect commits only if
        # it is still the latest attempt.
        self._attempt = 0

        self._invalidation_callbacks: list[Callable[[int | None], None]] = []
        if provider is not None:
            provider.on(ACCOUNTS_CHANGED, self._handle_accounts_changed)
            provider.on(CHAIN_CHANGED, self._handle_chain_changed)

    @property
    def is_connected(self) -> bool:
        return self.state is SessionState.CONNECTED

    @property
    def is_on_target_chain(self) -> bool:
        return self.chain_id == self.chain.chain_id

    def require_connected(self) -> None:
        if not self.is_connected:
            raise NotAuthorized("Wallet session is not connected")

    def on_invalidated(self, callback: Callable[[int | None], None]) -> None:
        """Register *callback(new_chain_id)* for when the wallet switches chains."""
        self._invalidation_callbacks.append(callback)

    # ── Transitions ───────────────────────────────────────────

    def _clear(self) -> None:
        self.state = SessionState.DISCONNECTED
        self.account = None
        self.balance = Decimal(0)
        self.chain_id = None
        self.signer = None

    def _fail(self, message: str, **context: Any) -> SessionState:
        self._clear()
        self.last_error = message
        log.warning("session_connect_failed", error=message, **context)
        return self.state

    async def connect(self) -> SessionState:
        """Request account access and capture account, balance and chain.

        Never raises; failures leave the session disconnected with
        ``last_error`` describing why.
        """
        if self.invalidated:
            self.last_error = "Session was invalidated by a chain change; start a new session"
            return self.state
        if self.state is not SessionState.DISCONNECTED:
            return self.state
        if self.provider is None:
            return self._fail("No wallet provider available")

        self._attempt += 1
        attempt = self._attempt
        self.state = SessionState.CONNECTING
        self.last_error = None
        try:
            accounts = await self.provider.request_accounts()
            account = accounts[0] if accounts else None
            if account is not None:
                chain_id = await self.provider.get_network()
                balance_wei = await self.provider.get_balance(account)
        except RpcError as exc:
            if self._superseded(attempt):
                return self.state
            return self._fail(exc.message, code=exc.code, user_rejected=exc.user_rejected)
        except Exception as exc:
            if self._superseded(attempt):
                return self.state
            return self._fail(f"Wallet unreachable: {exc!r}")

        if self._superseded(attempt):
            log.info("session_connect_abandoned")
            return self.state
        if account is None:
            return self._fail("Wallet returned no accounts")

        self.account = account
        self.chain_id = chain_id
        self.balance = Decimal(from_wei(balance_wei, "ether"))
        self.signer = self.provider.get_signer(account)
        self.state = SessionState.CONNECTED
        log.info(
            "session_connected",
            account=shorten_address(account),
            chain_id=chain_id,
            on_target_chain=self.is_on_target_chain,
        )
        return self.state

    def _superseded(self, attempt: int) -> bool:
        """A disconnect, chain change or newer connect happened while awaiting."""
        return (
            self.invalidated
            or attempt != self._attempt
            or self.state is not SessionState.CONNECTING
        )

    def disconnect(self) -> None:
        self._attempt += 1
        if self.state is not SessionState.DISCONNECTED:
            log.info("session_disconnected", account=self.account and shorten_address(self.account))
        self._clear()

    async def switch_to_pharos(self) -> bool:
        """Switch the wallet to the configured chain, adding it if unknown.

        A successful switch makes the wallet emit ``chainChanged``, which
        invalidates this session.
        """
        if self.provider is None:
            self.last_error = "No wallet provider available"
            return False
        try:
            await self.provider.switch_chain(self.chain.chain_id)
            return True
        except RpcError as exc:
            if exc.code != RpcError.UNRECOGNIZED_CHAIN:
                self.last_error = exc.message
                log.warning("chain_switch_failed", chain_id=self.chain.chain_id, code=exc.code)
                return False
        except Exception as exc:
            self.last_error = f"Wallet unreachable: {exc!r}"
            log.warning("chain_switch_failed", chain_id=self.chain.chain_id, error=repr(exc))
            return False

        log.info("chain_unknown_to_wallet_adding", chain_id=self.chain.chain_id)
        try:
            await self.provider.add_chain(self.chain.add_chain_params())
        except Exception as exc:
            self.last_error = exc.message if isinstance(exc, RpcError) else repr(exc)
            log.warning("chain_add_failed", chain_id=self.chain.chain_id, error=self.last_error)
            return False
        return True

    # ── Wallet events ─────────────────────────────────────────

    def _handle_accounts_changed(self, accounts: list[str]) -> None:
        if self.state is not SessionState.CONNECTED:
            return
        if not accounts:
            log.info("wallet_accounts_empty")
            self.disconnect()
            return
        account = accounts[0]
        if account != self.account:
            # Balance is deliberately left as is; callers re-query if needed.
            self.account = account
            self.signer = self.provider.get_signer(account)
            log.info("session_account_changed", account=shorten_address(account))

    def _handle_chain_changed(self, raw_chain_id: Any) -> None:
        if self.state is SessionState.DISCONNECTED or self.invalidated:
            return
        new_chain_id = _parse_chain_id(raw_chain_id)
        self.invalidated = True
        self._clear()
        self.provider.remove_listener(ACCOUNTS_CHANGED, self._handle_accounts_changed)
        self.provider.remove_listener(CHAIN_CHANGED, self._handle_chain_changed)
        log.warning("session_invalidated", new_chain_id=new_chain_id)
        for callback in list(self._invalidation_callbacks):
            callback(new_chain_id)

    def snapshot(self) -> dict:
        return {
            "state": self.state.value,
            "account": self.account,
            "balance": str(self.balance),
            "chainId": self.chain_id,
            "onTargetChain": self.is_on_target_chain,
            "invalidated": self.invalidated,
            "lastError": self.last_error,
        }
