"""Birdeye Data Services API client.

Official API, keyed. Source for price, market cap, liquidity, volume,
holder count and the token security report (authorities, concentration).
Retry with exponential backoff for transient errors (timeout, 429, 5xx).
"""

import asyncio
from typing import Any

import httpx
from loguru import logger

from src.parsers.birdeye.models import BirdeyeTokenOverview, BirdeyeTokenSecurity
from src.parsers.exceptions import ProviderUnavailableError, TokenNotFoundError
from src.parsers.rate_limiter import RateLimiter

BASE_URL = "https://public-api.birdeye.so"
MAX_RETRIES = 2
RETRY_DELAYS = [1.0, 3.0]


class BirdeyeApiError(ProviderUnavailableError):
    pass


class BirdeyeClient:
    """Async client for Birdeye Data Services API."""

    def __init__(
        self,
        api_key: str,
        rate_limiter: RateLimiter | None = None,
        max_rps: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._rate_limiter = rate_limiter or RateLimiter(max_rps)
        self._client = http_client or httpx.AsyncClient(
            base_url=BASE_URL,
            timeout=15.0,
            headers={
                "X-API-KEY": api_key,
                "Accept": "application/json",
                "x-chain": "solana",
            },
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Execute a rate-limited request with retry for transient errors."""
        last_exc: Exception | None = None

        for attempt in range(MAX_RETRIES + 1):
            await self._rate_limiter.acquire()
            try:
                resp = await self._client.request(method, path, **kwargs)

                if resp.status_code == 429:
                    if attempt < MAX_RETRIES:
                        delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                        logger.debug(f"[BIRDEYE] 429 rate limited, retry {attempt + 1} in {delay}s: {path}")
                        await asyncio.sleep(delay)
                        continue
                    raise BirdeyeApiError("Rate limited (429)")

                if resp.status_code == 401:
                    raise BirdeyeApiError("Invalid API key (401)")

                if resp.status_code == 404:
                    raise TokenNotFoundError(f"Not found: {path} {kwargs.get('params', '')}")

                if resp.status_code >= 500:
                    if attempt < MAX_RETRIES:
                        delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                        logger.debug(f"[BIRDEYE] {resp.status_code} server error, retry {attempt + 1} in {delay}s: {path}")
                        await asyncio.sleep(delay)
                        continue

                resp.raise_for_status()
                data = resp.json()
                if not data.get("success", True):
                    raise BirdeyeApiError(f"API error: {data.get('message', 'unknown')}")
                payload = data.get("data", data)
                if payload is None:
                    raise TokenNotFoundError(f"Empty payload: {path} {kwargs.get('params', '')}")
                return payload

            except (httpx.TimeoutException, httpx.ConnectError) as e:
                last_exc = e
                if attempt < MAX_RETRIES:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[BIRDEYE] {type(e).__name__}, retry {attempt + 1} in {delay}s: {path}")
                    await asyncio.sleep(delay)
                    continue
                raise BirdeyeApiError(f"Request failed after {MAX_RETRIES + 1} attempts: {path}: {e}") from e
            except httpx.HTTPStatusError as e:
                raise BirdeyeApiError(f"HTTP {e.response.status_code}: {path}") from e
            except httpx.RequestError as e:
                last_exc = e
                if attempt < MAX_RETRIES:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    await asyncio.sleep(delay)
                    continue
                raise BirdeyeApiError(f"Request failed: {path}: {e}") from e

        raise BirdeyeApiError(f"Request failed after retries: {path}") from last_exc

    async def get_token_overview(self, address: str) -> BirdeyeTokenOverview:
        """Fetch token overview — price, mcap, liquidity, volume, holders. 30 CU."""
        data = await self._request("GET", "/defi/token_overview", params={"address": address})
        return BirdeyeTokenOverview.model_validate(data)

    async def get_token_security(self, address: str) -> BirdeyeTokenSecurity:
        """Fetch token security info. 50 CU."""
        data = await self._request(
            "GET", "/defi/token_security", params={"address": address}
        )
        return BirdeyeTokenSecurity.model_validate(data)

    async def close(self) -> None:
        await self._client.aclose()
