"""Field extractors for page metadata.

Every field is computed by one CSS-selector rule against the parsed
document.  Rules run at most once per record; a field missing from the
document keeps the :data:`UNSET` sentinel rather than an empty value.

Fallback chains:
    description: <meta name="description"> → first <p> of 120+ characters
    feeds:       RSS <link> elements → Atom <link> elements
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from metainspector.document import ParsedDocument
from metainspector.items import MetadataSchema
from metainspector.urlnorm import absolute_path

logger = logging.getLogger(__name__)

# Shortest paragraph accepted as a fallback description
MIN_PARAGRAPH_LENGTH = 120

_RSS_TYPE = "application/rss+xml"
_ATOM_TYPE = "application/atom+xml"


class _Unset:
    """Type of :data:`UNSET`: not computed yet, or not found in the document."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()

FIELDS: tuple[str, ...] = (
    "title",
    "og_title",
    "og_description",
    "og_type",
    "og_updated_time",
    "og_locale",
    "description",
    "meta_description",
    "secondary_description",
    "keywords",
    "author",
    "charset",
    "image",
    "images",
    "links",
    "feeds",
)


def _attr(element: Any, name: str) -> Any:
    """Return attribute *name* of *element* as ``str``, or UNSET."""
    if element is None:
        return UNSET
    value = element.get(name)
    if value is None:
        return UNSET
    if isinstance(value, list):
        return " ".join(str(v) for v in value)
    return str(value)


class PageMetadata:
    """Metadata record for one parsed document.

    Fields start as :data:`UNSET`.  Each ``get_*`` method fills in its field
    the first time it is called and returns the record, so calls chain::

        meta.get_title().get_description().get_feeds()
    """

    def __init__(self, document: ParsedDocument, root_url: str) -> None:
        self._document = document
        self._root_url = root_url
        self._evaluated: set[str] = set()

        self.title: Any = UNSET
        self.og_title: Any = UNSET
        self.og_description: Any = UNSET
        self.og_type: Any = UNSET
        self.og_updated_time: Any = UNSET
        self.og_locale: Any = UNSET
        self.description: Any = UNSET
        self.meta_description: Any = UNSET
        self.secondary_description: Any = UNSET
        self.keywords: Any = UNSET
        self.author: Any = UNSET
        self.charset: Any = UNSET
        self.image: Any = UNSET
        self.images: Any = UNSET
        self.links: Any = UNSET
        self.feeds: Any = UNSET

    def __repr__(self) -> str:
        return f"<PageMetadata root_url={self._root_url!r} title={self.title!r}>"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _once(self, name: str, trace: str, compute: Callable[[], Any]) -> PageMetadata:
        if name not in self._evaluated:
            logger.debug(trace)
            setattr(self, name, compute())
            self._evaluated.add(name)
        return self

    def _meta_content(self, selector: str) -> Any:
        return _attr(self._document.select_one(selector), "content")

    def _hrefs(self, selector: str) -> list[str]:
        hrefs = (_attr(el, "href") for el in self._document.select(selector))
        return [h for h in hrefs if h is not UNSET]

    def is_evaluated(self, name: str) -> bool:
        return name in self._evaluated

    def get_absolute_path(self, href: str) -> str:
        return absolute_path(href, self._root_url)

    # ------------------------------------------------------------------
    # Document fields
    # ------------------------------------------------------------------

    def get_title(self) -> PageMetadata:
        def compute() -> Any:
            el = self._document.select_one("head > title")
            return UNSET if el is None else el.get_text()

        return self._once("title", "Parsing page title", compute)

    def get_author(self) -> PageMetadata:
        return self._once(
            "author",
            "Parsing page author from meta tag",
            lambda: self._meta_content('meta[name="author"]'),
        )

    def get_charset(self) -> PageMetadata:
        return self._once(
            "charset",
            "Parsing page charset from meta tag",
            lambda: _attr(self._document.select_one("meta[charset]"), "charset"),
        )

    def get_keywords(self) -> PageMetadata:
        """Split the keywords meta tag on commas.

        Items are stripped of surrounding whitespace and blank items dropped,
        so ``"a, b,,"`` gives ``["a", "b"]``.
        """

        def compute() -> list[str]:
            raw = self._meta_content('meta[name="keywords"]')
            if raw is UNSET:
                return []
            return [k.strip() for k in raw.split(",") if k.strip()]

        return self._once("keywords", "Parsing page keywords from meta tag", compute)

    def get_links(self) -> PageMetadata:
        return self._once("links", "Parsing page links", lambda: self._hrefs("a"))

    # ------------------------------------------------------------------
    # Description chain
    # ------------------------------------------------------------------

    def get_meta_description(self) -> PageMetadata:
        return self._once(
            "meta_description",
            "Parsing page description from meta tag",
            lambda: self._meta_content('meta[name="description"]'),
        )

    def get_secondary_description(self) -> PageMetadata:
        """Use the first paragraph long enough to stand in for a description.

        Not computed at all when a meta description exists.
        """
        self.get_meta_description()
        if self.meta_description is not UNSET:
            return self

        def compute() -> Any:
            for paragraph in self._document.select("p"):
                text = paragraph.get_text().strip()
                if len(text) >= MIN_PARAGRAPH_LENGTH:
                    return text
            return UNSET

        return self._once("secondary_description", "Parsing page secondary description", compute)

    def get_description(self) -> PageMetadata:
        def compute() -> Any:
            self.get_meta_description()
            if self.meta_description is not UNSET:
                return self.meta_description
            return self.get_secondary_description().secondary_description

        return self._once(
            "description",
            "Parsing page description from meta description or secondary description",
            compute,
        )

    # ------------------------------------------------------------------
    # Media and feeds
    # ------------------------------------------------------------------

    def get_image(self) -> PageMetadata:
        def compute() -> Any:
            img = self._meta_content('meta[property="og:image"]')
            if img is UNSET or not img.strip():
                return UNSET
            return self.get_absolute_path(img.strip())

        return self._once("image", "Parsing page image from Open Graph image", compute)

    def get_images(self) -> PageMetadata:
        def compute() -> list[str]:
            srcs = (_attr(el, "src") for el in self._document.select("img"))
            return [self.get_absolute_path(src) for src in srcs if src is not UNSET]

        return self._once("images", "Parsing page body images", compute)

    def get_feeds(self) -> PageMetadata:
        def compute() -> list[str]:
            return (
                self._hrefs(f'link[type="{_RSS_TYPE}"]')
                or self._hrefs(f'link[type="{_ATOM_TYPE}"]')
            )

        return self._once("feeds", "Parsing page feeds from RSS or Atom links", compute)

    # ------------------------------------------------------------------
    # Open Graph
    # ------------------------------------------------------------------

    def get_og_title(self) -> PageMetadata:
        return self._once(
            "og_title",
            "Parsing page Open Graph title",
            lambda: self._meta_content('meta[property="og:title"]'),
        )

    def get_og_description(self) -> PageMetadata:
        return self._once(
            "og_description",
            "Parsing page Open Graph description",
            lambda: self._meta_content('meta[property="og:description"]'),
        )

    def get_og_type(self) -> PageMetadata:
        return self._once(
            "og_type",
            "Parsing page Open Graph type",
            lambda: self._meta_content('meta[property="og:type"]'),
        )

    def get_og_updated_time(self) -> PageMetadata:
        return self._once(
            "og_updated_time",
            "Parsing page Open Graph updated time",
            lambda: self._meta_content('meta[property="og:updated_time"]'),
        )

    def get_og_locale(self) -> PageMetadata:
        return self._once(
            "og_locale",
            "Parsing page Open Graph locale",
            lambda: self._meta_content('meta[property="og:locale"]'),
        )

    # ------------------------------------------------------------------
    # Whole record
    # ------------------------------------------------------------------

    def extract_all(self) -> PageMetadata:
        """Run every extractor once, in a fixed order."""
        return (
            self.get_title()
            .get_author()
            .get_charset()
            .get_keywords()
            .get_links()
            .get_description()
            .get_image()
            .get_images()
            .get_feeds()
            .get_og_title()
            .get_og_description()
            .get_og_type()
            .get_og_updated_time()
            .get_og_locale()
        )

    def to_dict(self) -> dict[str, Any]:
        """Return every field, with UNSET reported as ``None``."""
        return {
            name: None if getattr(self, name) is UNSET else getattr(self, name)
            for name in FIELDS
        }

    def to_schema(self) -> MetadataSchema:
        return MetadataSchema.model_validate(self.to_dict())
