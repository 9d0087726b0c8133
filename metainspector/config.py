"""Inspection options passed through to the fetch capability."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_MAX_REDIRECTS = 5
# Some sites hang for a minute or more; milliseconds.
DEFAULT_TIMEOUT_MS = 20000
DEFAULT_USER_AGENT = "MetaInspector/1.0"
DEFAULT_PARSER = "lxml"


def default_headers() -> dict[str, str]:
    return {"User-Agent": DEFAULT_USER_AGENT}


@dataclass(frozen=True)
class InspectorOptions:
    """Configuration for a single inspection.

    Attributes:
        max_redirects: Redirects the fetcher may follow before failing.
        timeout:       Request timeout in milliseconds.
        strict_ssl:    Verify TLS certificates when ``True``.
        headers:       Request headers sent with the page request.
        parser:        BeautifulSoup tree builder used to parse the markup.

    Passing ``None`` for any field selects its default.
    """

    max_redirects: int | None = DEFAULT_MAX_REDIRECTS
    timeout: int | float | None = DEFAULT_TIMEOUT_MS
    strict_ssl: bool | None = False
    headers: dict[str, str] | None = field(default_factory=default_headers)
    parser: str | None = DEFAULT_PARSER

    def __post_init__(self) -> None:
        # frozen: defaults are filled in through object.__setattr__
        if self.max_redirects is None:
            object.__setattr__(self, "max_redirects", DEFAULT_MAX_REDIRECTS)
        if self.timeout is None:
            object.__setattr__(self, "timeout", DEFAULT_TIMEOUT_MS)
        object.__setattr__(self, "strict_ssl", bool(self.strict_ssl))
        headers = default_headers() if self.headers is None else dict(self.headers)
        object.__setattr__(self, "headers", headers)
        if self.parser is None:
            object.__setattr__(self, "parser", DEFAULT_PARSER)

        if self.max_redirects < 0:
            raise ValueError(f"max_redirects must be >= 0; got {self.max_redirects!r}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be > 0 ms; got {self.timeout!r}")
        if not self.parser.strip():
            raise ValueError("parser must be a non-empty tree builder name")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000
