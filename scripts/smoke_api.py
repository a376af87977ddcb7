#!/usr/bin/env python3
"""Smoke-test a running PharosBet API (python -m pharosbet_core.api)."""

import asyncio
import json
import sys

import httpx

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"


def _summary(path: str, data: dict) -> str:
    if "markets" in data:
        markets = data["markets"]
        head = ", ".join(f"{m['id']} ({m['yesPrice']}%)" for m in markets[:3])
        return f"{len(markets)} markets: {head}"
    return json.dumps(data)[:200]


async def check_endpoints():
    async with httpx.AsyncClient(base_url=BASE_URL, timeout=30) as client:
        print(f"Checking PharosBet API at {BASE_URL}\n")

        checks = [
            ("GET", "/api/health", None),
            ("GET", "/api/markets", None),
            ("GET", "/api/markets?category=crypto", None),
            ("GET", "/api/markets/featured", None),
            ("GET", "/api/markets/trending", None),
            ("GET", "/api/markets/demo-1/quote?outcome=yes&amount=10", None),
            ("POST", "/api/markets/refresh", None),
            ("GET", "/api/session", None),
        ]
        for i, (method, path, body) in enumerate(checks, 1):
            print(f"{i}. {method} {path}")
            try:
                response = await client.request(method, path, json=body)
                print(f"   Status: {response.status_code}")
                print(f"   {_summary(path, response.json())}\n")
            except httpx.HTTPError as e:
                print(f"   Error: {e}\n")

        print("Done.")


if __name__ == "__main__":
    asyncio.run(check_endpoints())
