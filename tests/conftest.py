import os
from typing import Optional

# main.py reads SIM_API_KEY at import time
os.environ.setdefault("SIM_API_KEY", "test-key")

import httpx
import pytest
import pytest_asyncio

from config import Settings
from sim_client import SimClient

WALLET = "0xd8da6bf26964af9d7eed9e03e53415d37aa96045"

BALANCES = {
    "wallet_address": WALLET,
    "balances": [
        {
            "chain": "ethereum",
            "chain_id": 1,
            "address": "native",
            "amount": "1500000000000000000",
            "symbol": "ETH",
            "decimals": 18,
            "price_usd": 2000.0,
            "value_usd": 3000.0,
            "token_metadata": {"logo": "https://example.com/eth.png", "url": "https://ethereum.org"},
        },
        {
            "chain": "base",
            "chain_id": 8453,
            "address": "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913",
            "amount": "1234500000",
            "symbol": "USDC",
            "decimals": 6,
            "value_usd": "1234.5",
        },
        {
            "chain": "ethereum",
            "chain_id": 1,
            "address": "0x0000000000000000000000000000000000000001",
            "amount": "999999999999",
            "symbol": "RTFKT",
            "decimals": 0,
            "value_usd": 5000000.0,
        },
    ],
}

ACTIVITY = {
    "activity": [
        {"chain": "base", "type": "receive", "block_time": "2025-01-01T00:00:00Z", "value": "1"},
        {"chain": "ethereum", "type": "send", "block_time": "2024-12-31T00:00:00Z", "value": "2"},
    ]
}

COLLECTIBLES = {
    "collectibles": [
        {"chain": "ethereum", "name": "Punk", "token_id": "42", "contract_address": "0xabc"},
    ]
}


def json_routes(
    balances=BALANCES,
    activity=ACTIVITY,
    collectibles=COLLECTIBLES,
    status=None,
    calls=None,
):
    """
    MockTransport handler serving canned Sim responses.

    `status` maps a resource name ("balances", "activity", "collectibles") to an
    HTTP status to return instead of the payload. Requests are appended to `calls`.
    """
    status = status or {}
    payloads = {"balances": balances, "activity": activity, "collectibles": collectibles}

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        resource = request.url.path.split("/")[3]
        if resource in status:
            return httpx.Response(status[resource], text="upstream broke")
        return httpx.Response(200, json=payloads[resource])

    return handler


@pytest.fixture
def settings() -> Settings:
    return Settings(SIM_API_KEY="test-key", SIM_API_BASE_URL="https://sim.test", _env_file=None)


@pytest_asyncio.fixture
async def make_client(settings):
    opened = []

    def _make(handler, config: Optional[Settings] = None) -> SimClient:
        config = settings if config is None else config
        http = SimClient.build_http_client(config, transport=httpx.MockTransport(handler))
        opened.append(http)
        return SimClient(config, http)

    yield _make

    for http in opened:
        await http.aclose()
