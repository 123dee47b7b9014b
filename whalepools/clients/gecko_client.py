# clients/gecko_client.py
from __future__ import annotations

from typing import Any

import httpx

from whalepools.core.config import Settings, get_settings
from whalepools.services.trade_source import PermanentFetchError, TransientNetworkError

# httpx errors that mean the connection dropped mid-request
_RESET_ERRORS = (httpx.ReadError, httpx.WriteError, httpx.RemoteProtocolError)


class GeckoTerminalClient:
    """
    Thin wrapper around the GeckoTerminal v2 REST API.

    Returns the raw items of the ``{"data": [...]}`` envelope and translates
    every failure into TransientNetworkError / PermanentFetchError. Retrying is
    the caller's business.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._client = httpx.AsyncClient(
            base_url=str(settings.GECKO_API_BASE_URL),
            timeout=settings.GECKO_API_TIMEOUT_SECONDS,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> GeckoTerminalClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_networks(self, page: int = 1) -> list[dict[str, Any]]:
        return await self._get_data("/networks", params={"page": page})

    async def fetch_pools(self, network: str, page: int = 1) -> list[dict[str, Any]]:
        return await self._get_data(f"/networks/{network}/pools", params={"page": page})

    async def fetch_trades(self, network: str, pool_address: str) -> list[dict[str, Any]]:
        return await self._get_data(f"/networks/{network}/pools/{pool_address}/trades")

    async def _get_data(
        self, path: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        try:
            resp = await self._client.get(path, params=params)
        except httpx.TimeoutException as exc:
            raise TransientNetworkError("timeout", f"GET {path} timed out") from exc
        except _RESET_ERRORS as exc:
            raise TransientNetworkError(
                "connection-reset", f"GET {path} connection reset: {exc}"
            ) from exc
        except httpx.HTTPError as exc:
            raise PermanentFetchError(f"GET {path} failed: {exc}") from exc

        if resp.status_code == 429:
            raise TransientNetworkError(
                "rate-limited", f"GET {path} rate limited", status_code=429
            )
        if resp.status_code >= 400:
            raise PermanentFetchError(
                f"GET {path} returned {resp.status_code}: {resp.text[:300]}",
                status_code=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise PermanentFetchError(f"GET {path} returned malformed JSON") from exc

        items = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            raise PermanentFetchError(f"GET {path} returned no data list")
        return items
