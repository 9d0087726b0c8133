"""metainspector.inspector - fetch a page and extract its metadata.

Basic usage::

    import asyncio
    from metainspector import MetaInspector

    inspector = MetaInspector("example.com/blog/post", timeout=10000)
    meta = asyncio.run(inspector.inspect())
    print(meta.title, meta.description, meta.feeds)

Bring your own transport, or parse markup you already have::

    meta = await inspector.inspect(my_fetcher)          # MarkupFetcher
    meta = await inspector.inspect(load_from_cache())   # any awaitable
    meta = extract(html, url="https://example.com/")    # no network
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from bs4 import BeautifulSoup

from metainspector.config import InspectorOptions
from metainspector.document import parse_document
from metainspector.extractors import PageMetadata
from metainspector.fetch import FetcherLike, FetchError, Markup, select_fetcher
from metainspector.urlnorm import absolute_path, resolve_url

logger = logging.getLogger(__name__)

STATE_UNFETCHED = "unfetched"
STATE_POPULATED = "populated"


class MetaInspector:
    """Inspects one URL.

    The URL is normalized and resolved at construction; a malformed URL
    raises :class:`~metainspector.urlnorm.MalformedURLError` immediately.

    Attributes:
        url             -- normalized URL that will be fetched
        scheme, host    -- components of ``url``
        root_url        -- base used to absolutize image URLs
        options         -- :class:`InspectorOptions` for the fetcher
        document        -- raw markup of the last successful fetch
        parsed_document -- parsed tree of ``document``
        metadata        -- :class:`PageMetadata`, ``None`` until populated
    """

    def __init__(
        self,
        url: str,
        options: InspectorOptions | None = None,
        **overrides: Any,
    ) -> None:
        self.resolved = resolve_url(url)
        self.url = self.resolved.normalized_url
        self.scheme = self.resolved.scheme
        self.host = self.resolved.host
        self.root_url = self.resolved.root_url

        options = options or InspectorOptions()
        if overrides:
            options = dataclasses.replace(options, **overrides)
        self.options = options

        self.document: Markup | None = None
        self.parsed_document: BeautifulSoup | None = None
        self.metadata: PageMetadata | None = None

    def __repr__(self) -> str:
        return f"<MetaInspector url={self.url!r} state={self.state}>"

    @property
    def state(self) -> str:
        return STATE_UNFETCHED if self.metadata is None else STATE_POPULATED

    def get_absolute_path(self, href: str) -> str:
        return absolute_path(href, self.root_url)

    async def _fetch_markup(self, fetcher: FetcherLike) -> Markup:
        strategy = select_fetcher(fetcher)
        logger.debug("Fetching %s with %s", self.url, type(strategy).__name__)
        try:
            markup = await strategy.fetch(self.url, self.options)
        except FetchError:
            raise
        except Exception as exc:
            raise FetchError(f"Fetching {self.url} failed: {exc}", url=self.url) from exc

        if not isinstance(markup, (str, bytes)):
            raise FetchError(
                f"Fetcher returned {type(markup).__name__} for {self.url}; expected markup",
                url=self.url,
            )
        return markup

    async def inspect(self, fetcher: FetcherLike = None) -> PageMetadata:
        """Fetch the page, parse it and extract every metadata field.

        Args:
            fetcher: ``None`` for the default HTTP fetcher, a
                     :class:`~metainspector.fetch.MarkupFetcher`, an awaitable
                     yielding markup, or an async callable ``(url, options)``.

        Returns:
            The populated :class:`PageMetadata`, also stored on ``metadata``.

        Raises:
            FetchError: if no markup could be obtained.  The inspector is
                left exactly as it was before the call.
        """
        markup = await self._fetch_markup(fetcher)

        parsed = parse_document(markup, self.options.parser)
        metadata = PageMetadata(parsed, self.root_url).extract_all()

        self.document = markup
        self.parsed_document = parsed
        self.metadata = metadata
        logger.debug("Inspected %s", self.url)
        return metadata


def extract(markup: Markup, url: str, parser: str | None = None) -> PageMetadata:
    """Extract metadata from *markup* already in hand; no network I/O.

    *url* is the page's address, used to absolutize image URLs.
    """
    resolved = resolve_url(url)
    document = parse_document(markup, parser or InspectorOptions().parser)
    return PageMetadata(document, resolved.root_url).extract_all()
