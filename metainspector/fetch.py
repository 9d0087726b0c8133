"""Markup fetch capabilities.

The inspector never talks to the network directly.  It awaits a
``MarkupFetcher`` which turns a URL into raw markup:

- :class:`HttpxFetcher` - default, a single GET through ``httpx.AsyncClient``
- :class:`StaticFetcher` - returns markup the caller already has
- :class:`AwaitableFetcher` - adapts an awaitable or an async callable

Any object with a matching ``fetch`` coroutine satisfies the protocol, so
callers can plug in their own transport without subclassing.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

import httpx

from metainspector.config import InspectorOptions

logger = logging.getLogger(__name__)

Markup = str | bytes

_ACCEPT_HTML = "text/html"


# ---------------------------------------------------------------------------
# Public exception
# ---------------------------------------------------------------------------

class FetchError(RuntimeError):
    """Raised when markup for a URL cannot be obtained.

    Attributes:
        url    -- the URL that failed
        status -- HTTP status code (0 if no response was received)
        body   -- response text, when a response was received
    """

    def __init__(
        self,
        message: str,
        url: str = "",
        status: int = 0,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.body = body


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------

@runtime_checkable
class MarkupFetcher(Protocol):
    """Asynchronous capability producing the raw markup of a page."""

    async def fetch(self, url: str, options: InspectorOptions) -> Markup:
        """Return the markup at *url*, honouring *options*.

        Raises:
            FetchError: on non-success status, timeout, or transport failure.
        """
        ...


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------

class HttpxFetcher:
    """Default fetcher: one ``GET`` per call through ``httpx.AsyncClient``.

    A fresh client is opened for every fetch so that the redirect limit,
    timeout and TLS verification of each inspection apply independently.
    *transport* is forwarded to the client (tests pass ``httpx.MockTransport``).
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    def _build_client(self, options: InspectorOptions) -> httpx.AsyncClient:
        headers = dict(options.headers)
        if not any(name.lower() == "accept" for name in headers):
            headers["Accept"] = _ACCEPT_HTML
        return httpx.AsyncClient(
            headers=headers,
            timeout=httpx.Timeout(options.timeout_seconds),
            follow_redirects=True,
            max_redirects=options.max_redirects,
            verify=options.strict_ssl,
            transport=self._transport,
        )

    async def fetch(self, url: str, options: InspectorOptions) -> str:
        async with self._build_client(options) as client:
            try:
                response = await client.get(url)
            except httpx.TooManyRedirects as exc:
                logger.warning("Redirect limit (%d) exceeded for %s", options.max_redirects, url)
                raise FetchError(
                    f"Exceeded {options.max_redirects} redirects fetching {url}", url=url,
                ) from exc
            except httpx.TimeoutException as exc:
                logger.warning("Timed out after %sms fetching %s", options.timeout, url)
                raise FetchError(
                    f"Timed out after {options.timeout}ms fetching {url}", url=url,
                ) from exc
            except httpx.InvalidURL as exc:
                logger.warning("Invalid URL %s: %s", url, exc)
                raise FetchError(f"Invalid URL '{url}': {exc}", url=url) from exc
            except httpx.RequestError as exc:
                logger.warning("Request error for %s: %s", url, exc)
                raise FetchError(f"Request error for '{url}': {exc}", url=url) from exc

        if response.status_code != httpx.codes.OK:
            logger.warning("HTTP %d for %s", response.status_code, url)
            raise FetchError(
                f"HTTP {response.status_code} fetching {url}",
                url=url,
                status=response.status_code,
                body=response.text,
            )

        logger.debug("Fetched %s (%d bytes)", url, len(response.content))
        return response.text


class StaticFetcher:
    """Serve markup the caller already holds, e.g. a file read from disk."""

    def __init__(self, markup: Markup) -> None:
        self._markup = markup

    async def fetch(self, url: str, options: InspectorOptions) -> Markup:
        return self._markup


class AwaitableFetcher:
    """Adapt an awaitable, or an async callable ``(url, options)``, to a fetcher.

    A bare awaitable can only be consumed once.
    """

    def __init__(
        self,
        source: Awaitable[Markup] | Callable[[str, InspectorOptions], Awaitable[Markup]],
    ) -> None:
        self._source = source

    async def fetch(self, url: str, options: InspectorOptions) -> Markup:
        if inspect.isawaitable(self._source):
            return await self._source
        return await self._source(url, options)


FetcherLike = (
    MarkupFetcher
    | Awaitable[Markup]
    | Callable[[str, InspectorOptions], Awaitable[Markup]]
    | None
)


def select_fetcher(fetcher: FetcherLike = None) -> MarkupFetcher:
    """Pick the fetch strategy for an inspection.

    ``None`` selects :class:`HttpxFetcher`; protocol implementations are used
    as-is; awaitables and async callables are wrapped in
    :class:`AwaitableFetcher`.
    """
    if fetcher is None:
        return HttpxFetcher()
    if isinstance(fetcher, MarkupFetcher):
        return fetcher
    if inspect.isawaitable(fetcher) or callable(fetcher):
        return AwaitableFetcher(fetcher)
    raise TypeError(
        f"fetcher must be a MarkupFetcher, an awaitable or an async callable; "
        f"got {type(fetcher).__name__}",
    )
