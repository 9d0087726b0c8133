"""Tests for metainspector.inspector - the inspection orchestrator."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from metainspector import UNSET, MetaInspector, extract
from metainspector.config import InspectorOptions
from metainspector.fetch import FetchError, HttpxFetcher, StaticFetcher
from metainspector.urlnorm import MalformedURLError


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_url_resolved_without_scheme(self):
        inspector = MetaInspector("example.com/page")
        assert inspector.url == "http://example.com/page"
        assert inspector.scheme == "http"
        assert inspector.host == "example.com"
        assert inspector.root_url == "http://example.com"

    def test_default_options(self):
        options = MetaInspector("https://example.com").options
        assert options.max_redirects == 5
        assert options.timeout == 20000
        assert options.strict_ssl is False
        assert options.headers == {"User-Agent": "MetaInspector/1.0"}

    def test_keyword_overrides(self):
        inspector = MetaInspector("https://example.com", timeout=5000, strict_ssl=True)
        assert inspector.options.timeout == 5000
        assert inspector.options.strict_ssl is True
        assert inspector.options.max_redirects == 5

    def test_overrides_apply_on_top_of_options(self):
        base = InspectorOptions(max_redirects=1)
        inspector = MetaInspector("https://example.com", base, timeout=100)
        assert inspector.options.max_redirects == 1
        assert inspector.options.timeout == 100

    def test_malformed_url_raises(self):
        with pytest.raises(MalformedURLError):
            MetaInspector("http://[::1")

    def test_starts_unfetched(self):
        inspector = MetaInspector("https://example.com")
        assert inspector.state == "unfetched"
        assert inspector.metadata is None
        assert inspector.document is None

    def test_get_absolute_path(self):
        inspector = MetaInspector("http://example.com/some/page")
        assert inspector.get_absolute_path("/foo") == "http://example.com/foo"
        assert inspector.get_absolute_path("foo") == "http://example.com/foo"
        assert inspector.get_absolute_path("//cdn.example.com/x.png") == "//cdn.example.com/x.png"


# ---------------------------------------------------------------------------
# inspect()
# ---------------------------------------------------------------------------

class TestInspect:
    async def test_populates_from_static_markup(self, article_html):
        inspector = MetaInspector("https://example.com/blog/post")
        meta = await inspector.inspect(StaticFetcher(article_html))
        assert meta is inspector.metadata
        assert inspector.state == "populated"
        assert inspector.document == article_html
        assert inspector.parsed_document is not None
        assert meta.title == "How to Inspect Page Metadata"
        assert meta.image == "https://example.com/img/cover.png"

    async def test_every_field_evaluated(self, article_html):
        meta = await MetaInspector("https://example.com").inspect(StaticFetcher(article_html))
        for name in ("title", "author", "charset", "keywords", "links", "description",
                     "image", "images", "feeds", "og_title", "og_description", "og_type",
                     "og_updated_time", "og_locale"):
            assert meta.is_evaluated(name), name

    async def test_accepts_awaitable(self, minimal_html):
        async def load() -> str:
            return minimal_html

        meta = await MetaInspector("example.com").inspect(load())
        assert meta.title is UNSET
        assert meta.feeds == ["/atom.xml"]

    async def test_accepts_async_callable(self, article_html):
        received: list[str] = []

        async def load(url: str, options: InspectorOptions) -> str:
            received.append(url)
            return article_html

        await MetaInspector("Example.com:80/a").inspect(load)
        assert received == ["http://example.com/a"]

    async def test_accepts_bytes(self):
        markup = "<html><head><title>café</title></head></html>".encode()
        meta = await MetaInspector("example.com").inspect(StaticFetcher(markup))
        assert meta.title == "café"

    async def test_default_fetcher_used_when_none(self, article_html):
        with patch(
            "metainspector.fetch.HttpxFetcher.fetch",
            new_callable=AsyncMock,
            return_value=article_html,
        ) as mock_fetch:
            inspector = MetaInspector("example.com", timeout=1000)
            meta = await inspector.inspect()
        mock_fetch.assert_called_once_with("http://example.com/", inspector.options)
        assert meta.author == "Jane Smith"

    async def test_end_to_end_with_mock_transport(self, article_html):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text=article_html))
        meta = await MetaInspector("https://example.com").inspect(HttpxFetcher(transport))
        assert meta.og_type == "article"

    async def test_reinspect_replaces_record(self, article_html, minimal_html):
        inspector = MetaInspector("https://example.com")
        first = await inspector.inspect(StaticFetcher(article_html))
        second = await inspector.inspect(StaticFetcher(minimal_html))
        assert second is not first
        assert inspector.metadata is second
        assert second.title is UNSET
        assert first.title == "How to Inspect Page Metadata"

    async def test_concurrent_inspections_are_independent(self, article_html):
        a = MetaInspector("https://a.example.com")
        b = MetaInspector("https://b.example.com")
        meta_a, meta_b = await asyncio.gather(
            a.inspect(StaticFetcher(article_html)),
            b.inspect(StaticFetcher(article_html.replace("/img/cover.png", "cover.png"))),
        )
        assert meta_a.image == "https://a.example.com/img/cover.png"
        assert meta_b.image == "https://b.example.com/cover.png"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestInspectFailures:
    async def test_fetch_error_propagates_unchanged(self):
        inspector = MetaInspector("https://example.com")
        error = FetchError("HTTP 500", url=inspector.url, status=500)

        async def failing(url, options):
            raise error

        with pytest.raises(FetchError) as excinfo:
            await inspector.inspect(failing)
        assert excinfo.value is error
        assert inspector.state == "unfetched"
        assert inspector.metadata is None
        assert inspector.document is None

    async def test_other_errors_wrapped(self):
        async def failing(url, options):
            raise ConnectionResetError("reset by peer")

        inspector = MetaInspector("https://example.com")
        with pytest.raises(FetchError, match="reset by peer") as excinfo:
            await inspector.inspect(failing)
        assert isinstance(excinfo.value.__cause__, ConnectionResetError)
        assert excinfo.value.url == "https://example.com/"

    async def test_failure_keeps_previous_record(self, article_html):
        inspector = MetaInspector("https://example.com")
        first = await inspector.inspect(StaticFetcher(article_html))

        async def failing(url, options):
            raise FetchError("gone", status=410)

        with pytest.raises(FetchError):
            await inspector.inspect(failing)
        assert inspector.metadata is first
        assert inspector.document == article_html

    async def test_non_markup_result_rejected(self):
        async def load(url, options):
            return None

        with pytest.raises(FetchError, match="expected markup"):
            await MetaInspector("https://example.com").inspect(load)

    async def test_http_error_status_surfaces(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        with pytest.raises(FetchError) as excinfo:
            await MetaInspector("https://example.com").inspect(HttpxFetcher(transport))
        assert excinfo.value.status == 503


# ---------------------------------------------------------------------------
# extract()
# ---------------------------------------------------------------------------

class TestExtract:
    def test_extracts_without_network(self, article_html):
        meta = extract(article_html, url="https://example.com/blog/post")
        assert meta.title == "How to Inspect Page Metadata"
        assert meta.images[0] == "https://example.com/img/diagram.png"

    def test_scheme_less_url(self, minimal_html):
        meta = extract(minimal_html, url="example.com")
        assert meta.description.startswith("This paragraph")

    def test_alternate_parser(self):
        html = "<html><head><title>T</title></head><body></body></html>"
        meta = extract(html, url="example.com", parser="html.parser")
        assert meta.title == "T"
