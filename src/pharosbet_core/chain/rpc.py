"""JSON-RPC client over HTTP — shared by the chain gateway and the wallet bridge."""

from __future__ import annotations

import itertools
from typing import Any

import httpx

from pharosbet_core.errors import RpcError


class JsonRpcClient:
    """Async JSON-RPC 2.0 client.

    Transport failures surface as ``httpx.HTTPError``; error objects in a
    response are raised as :class:`RpcError` with the node's error code.
    """

    def __init__(self, url: str, timeout_s: float = 15.0):
        self.url = url
        self.timeout_s = timeout_s
        self._http: httpx.AsyncClient | None = None
        self._ids = itertools.count(1)

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=self.timeout_s)
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()

    async def request(self, method: str, params: list | None = None) -> Any:
        http = await self._get_http()
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params if params is not None else [],
        }
        resp = await http.post(self.url, json=payload)
        resp.raise_for_status()
        body = resp.json()

        error = body.get("error") if isinstance(body, dict) else None
        if error:
            raise RpcError(error.get("code"), error.get("message", ""), error.get("data"))
        if not isinstance(body, dict) or "result" not in body:
            raise RpcError(None, f"Malformed JSON-RPC response to {method}")
        return body["result"]
