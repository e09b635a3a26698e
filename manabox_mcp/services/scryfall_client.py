"""
Scryfall API client.

Looks up canonical card data (oracle text, legalities, rulings) that a
ManaBox export does not contain.

Scryfall's usage policy asks for a descriptive User-Agent, an Accept
header and 50-100ms between requests. Throttling lives in a RateLimiter
owned by the client.

API reference: https://scryfall.com/docs/api
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx

from manabox_mcp.config import settings
from manabox_mcp.models.failure import FailureKind, KnownError
from manabox_mcp.parsers.scryfall import (
    ScryfallCard,
    ScryfallRuling,
    ScryfallSearchResult,
    parse_search_response,
    trim_card_response,
    trim_ruling_response,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class ScryfallError(KnownError):
    """Raised when Scryfall rejects a request or cannot be reached."""

    def __init__(
        self,
        message: str,
        kind: FailureKind = FailureKind.EXTERNAL_API_ERROR,
        detail: str | None = None,
    ):
        super().__init__(
            kind=kind,
            message=message,
            detail=detail,
            suggestion=_suggestion_for(kind),
        )


def _suggestion_for(kind: FailureKind) -> str | None:
    if kind == FailureKind.NOT_FOUND:
        return "Check the spelling, or use scryfall_search to find the card."
    if kind == FailureKind.SERVICE_UNAVAILABLE:
        return "Scryfall could not be reached. Try again shortly."
    return None


class RateLimiter:
    """
    Enforces a minimum interval between consecutive requests.

    The first request goes through immediately. Later requests wait out
    whatever remains of the interval since the previous one.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request: float | None = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait until the next request is allowed, then claim the slot."""
        async with self._lock:
            if self._last_request is not None:
                elapsed = self._clock() - self._last_request
                if elapsed < self._min_interval:
                    await self._sleep(self._min_interval - elapsed)
            self._last_request = self._clock()


class ScryfallClient:
    """
    Async Scryfall client with throttling and a single retry on HTTP 429.

    Usage:
        async with ScryfallClient() as scryfall:
            card = await scryfall.get_card_by_name("Sol Ring")
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        user_agent: str | None = None,
        timeout: float | None = None,
        rate_limiter: RateLimiter | None = None,
        retry_delay: float | None = None,
        sleep: Sleep = asyncio.sleep,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or settings.scryfall_api_url).rstrip("/")
        self._rate_limiter = rate_limiter or RateLimiter(settings.scryfall_min_interval_ms / 1000)
        self._retry_delay = (
            retry_delay if retry_delay is not None else settings.scryfall_retry_delay_ms / 1000
        )
        self._sleep = sleep
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.scryfall_timeout,
            headers={
                "User-Agent": user_agent or settings.scryfall_user_agent,
                "Accept": "application/json",
            },
        )

    async def __aenter__(self) -> "ScryfallClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this client created it."""
        if self._owns_client:
            await self._client.aclose()

    # --- API ---

    async def search_cards(
        self,
        query: str,
        order: str | None = None,
        direction: str | None = None,
        page: int | None = None,
    ) -> ScryfallSearchResult:
        """
        Full-text search using Scryfall syntax (e.g., "t:dragon c:r cmc<=4").

        Args:
            query: Scryfall search query
            order: Sort field (name, cmc, edhrec, usd, ...)
            direction: Sort direction (auto, asc, desc)
            page: 1-based result page

        Returns:
            One page of up to 175 trimmed cards
        """
        params: dict[str, Any] = {"q": query, "format": "json"}
        if order:
            params["order"] = order
        if direction:
            params["dir"] = direction
        if page:
            params["page"] = page

        body = await self._get_json("/cards/search", params)
        return parse_search_response(body)

    async def get_card_by_id(self, scryfall_id: str) -> ScryfallCard:
        """Look up a single printing by its Scryfall UUID."""
        body = await self._get_json(f"/cards/{_quote(scryfall_id)}")
        return trim_card_response(body)

    async def get_card_by_name(self, name: str, fuzzy: bool = True) -> ScryfallCard:
        """Look up a card by name using Scryfall's fuzzy or exact name matching."""
        params = {"format": "json", "fuzzy" if fuzzy else "exact": name}
        body = await self._get_json("/cards/named", params)
        return trim_card_response(body)

    async def get_rulings(self, scryfall_id: str) -> list[ScryfallRuling]:
        """Get rulings for a card by its Scryfall UUID."""
        body = await self._get_json(f"/cards/{_quote(scryfall_id)}/rulings")
        return [trim_ruling_response(ruling) for ruling in body.get("data") or []]

    # --- Transport ---

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        response = await self._throttled_get(f"{self._base_url}{path}", params)

        if not response.is_success:
            raise _error_from_response(response)

        try:
            body: dict[str, Any] = response.json()
        except ValueError as exc:
            raise ScryfallError(
                "Scryfall returned an invalid JSON response",
                detail=response.text[:200],
            ) from exc

        return body

    async def _throttled_get(self, url: str, params: dict[str, Any] | None) -> httpx.Response:
        response = await self._send(url, params)

        # Retry once on rate limit
        if response.status_code == 429:
            logger.warning("Scryfall rate limit hit, retrying in %.1fs", self._retry_delay)
            await self._sleep(self._retry_delay)
            response = await self._send(url, params)

        return response

    async def _send(self, url: str, params: dict[str, Any] | None) -> httpx.Response:
        await self._rate_limiter.acquire()
        try:
            return await self._client.get(url, params=params)
        except httpx.RequestError as exc:
            logger.error("Scryfall request failed: %s", exc)
            raise ScryfallError(
                f"Network error contacting Scryfall: {exc}",
                kind=FailureKind.SERVICE_UNAVAILABLE,
            ) from exc


def _quote(value: str) -> str:
    return quote(value, safe="")


def _error_from_response(response: httpx.Response) -> ScryfallError:
    """
    Build an error from a Scryfall error object.

    Scryfall explains failures in a `details` field. When the body is not
    an error object the status code is reported instead.
    """
    message = f"Scryfall API error: {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("details"):
        message = f"Scryfall: {body['details']}"

    kind = (
        FailureKind.NOT_FOUND if response.status_code == 404 else FailureKind.EXTERNAL_API_ERROR
    )
    logger.info("Scryfall request failed (%d): %s", response.status_code, message)
    return ScryfallError(message, kind=kind)
