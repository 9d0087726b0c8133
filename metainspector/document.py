"""Document parsing: raw markup to a CSS-queryable tree."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from bs4 import BeautifulSoup

from metainspector.config import DEFAULT_PARSER

logger = logging.getLogger(__name__)


@runtime_checkable
class ParsedDocument(Protocol):
    """Queryable DOM handle consumed by the field extractors.

    ``BeautifulSoup`` satisfies this protocol.  Returned elements must offer
    ``get(attribute)`` and ``get_text()``.
    """

    def select(self, selector: str) -> list[Any]:
        """Return every element matching the CSS *selector*, in document order."""
        ...

    def select_one(self, selector: str) -> Any | None:
        """Return the first element matching *selector*, or ``None``."""
        ...


def parse_document(markup: str | bytes, parser: str = DEFAULT_PARSER) -> BeautifulSoup:
    """Parse *markup* with the given BeautifulSoup tree builder.

    Bytes are accepted and decoded by BeautifulSoup's encoding detection.
    """
    logger.debug("Parsing %d characters of markup with %s", len(markup), parser)
    return BeautifulSoup(markup, parser)
