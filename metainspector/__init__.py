"""metainspector - extract title, description, Open Graph, links, images
and feeds from any web page.

Quick usage::

    import asyncio
    from metainspector import MetaInspector

    meta = asyncio.run(MetaInspector("example.com").inspect())
    print(meta.title)
    print(meta.description)
    print(meta.images)

Fields missing from the page are :data:`UNSET`::

    from metainspector import UNSET, extract

    meta = extract("<html><body></body></html>", url="https://example.com")
    assert meta.title is UNSET
    assert meta.keywords == []

Set ``METAINSPECTOR_DEBUG=1`` to trace every extraction step on stderr.
"""

from metainspector.config import InspectorOptions
from metainspector.extractors import UNSET, PageMetadata
from metainspector.fetch import (
    AwaitableFetcher,
    FetchError,
    HttpxFetcher,
    MarkupFetcher,
    StaticFetcher,
)
from metainspector.inspector import MetaInspector, extract
from metainspector.items import MetadataSchema
from metainspector.log import configure_logging, debug_requested
from metainspector.urlnorm import MalformedURLError, ResolvedURL, absolute_path, resolve_url

if debug_requested():
    configure_logging()

__version__ = "1.0.0"
__all__ = [
    "UNSET",
    "AwaitableFetcher",
    "FetchError",
    "HttpxFetcher",
    "InspectorOptions",
    "MalformedURLError",
    "MarkupFetcher",
    "MetaInspector",
    "MetadataSchema",
    "PageMetadata",
    "ResolvedURL",
    "StaticFetcher",
    "absolute_path",
    "configure_logging",
    "extract",
    "resolve_url",
]
