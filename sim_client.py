from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

import httpx
import structlog

from balances import enrich_balances
from config import Settings
from errors import SimAPIError

logger = structlog.get_logger(__name__)

# metadata=url,logo fetches token URLs and logo images,
# exclude_spam_tokens filters out tokens Sim already knows to be spam
BALANCES_QUERY = {"metadata": "url,logo", "exclude_spam_tokens": "true"}


def _address_path(resource: str, wallet_address: str) -> str:
    # the address is opaque, keep it inside a single path segment
    return f"/v1/evm/{resource}/{quote(wallet_address, safe='')}"


@dataclass(frozen=True)
class FetchResult:
    """Records from one Sim endpoint. `failed` is set when the upstream call did not succeed."""

    items: Tuple[Dict[str, Any], ...] = ()
    failed: bool = False

    @classmethod
    def failure(cls) -> "FetchResult":
        return cls(items=(), failed=True)


class SimClient:
    """Thin async wrapper over the Sim EVM endpoints. Never raises from fetch_* methods."""

    def __init__(self, settings: Settings, http: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http

    @staticmethod
    def build_http_client(
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=settings.sim_api_base_url,
            headers={
                "X-Sim-Api-Key": settings.sim_api_key,
                "Content-Type": "application/json",
            },
            timeout=settings.http_timeout,
            transport=transport,
        )

    async def _get_list(
        self, path: str, key: str, params: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, Any], ...]:
        resp = await self._http.get(path, params=params)
        if not resp.is_success:
            raise SimAPIError(
                f"{key} request failed {resp.status_code}: {resp.reason_phrase} {resp.text[:500]}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise SimAPIError(f"{key} response is not JSON: {e}", status_code=resp.status_code)

        if not isinstance(data, dict):
            raise SimAPIError(f"{key} response is not an object", status_code=resp.status_code)

        items = data.get(key)
        if items is None:
            return ()
        if not isinstance(items, list):
            raise SimAPIError(f"{key!r} is not a list", status_code=resp.status_code)
        return tuple(items)

    async def _fetch(
        self, resource: str, path: str, key: str, params: Optional[Dict[str, Any]] = None
    ) -> FetchResult:
        log = logger.bind(resource=resource, path=path)
        try:
            items = await self._get_list(path, key, params)
        except SimAPIError as e:
            log.warning("sim_fetch_failed", status=e.status_code, error=str(e))
            return FetchResult.failure()
        except httpx.HTTPError as e:
            log.error("sim_fetch_network_error", error=repr(e))
            return FetchResult.failure()

        log.debug("sim_fetch_ok", count=len(items))
        return FetchResult(items=items)

    async def fetch_balances(self, wallet_address: str) -> FetchResult:
        if not wallet_address:
            return FetchResult()
        result = await self._fetch(
            "balances",
            _address_path("balances", wallet_address),
            "balances",
            BALANCES_QUERY,
        )
        if result.failed:
            return result
        try:
            tokens = enrich_balances(result.items, self._settings.spam_token_symbols)
        except Exception:
            logger.exception("sim_balances_enrich_failed", wallet_address=wallet_address)
            return FetchResult.failure()
        return FetchResult(items=tuple(tokens))

    async def fetch_activity(self, wallet_address: str, limit: Optional[int] = None) -> FetchResult:
        if not wallet_address:
            return FetchResult()
        if limit is None:
            limit = self._settings.activity_limit
        return await self._fetch(
            "activity",
            _address_path("activity", wallet_address),
            "activity",
            {"limit": limit},
        )

    async def fetch_collectibles(self, wallet_address: str, limit: Optional[int] = None) -> FetchResult:
        if not wallet_address:
            return FetchResult()
        if limit is None:
            limit = self._settings.collectibles_limit
        return await self._fetch(
            "collectibles",
            _address_path("collectibles", wallet_address),
            "collectibles",
            {"limit": limit},
        )
