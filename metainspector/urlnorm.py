"""URL normalization and absolute-path resolution utilities."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import ParseResult, quote, urlparse, urlunparse

_DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443, "ftp": 21}

# A scheme is only recognised when the colon is not followed by a digit,
# so "localhost:8080/page" is read as host:port rather than scheme "localhost".
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:(?!\d)")
_ABSOLUTE_HREF_RE = re.compile(r"^(http:|https:)?//", re.IGNORECASE)
_PERCENT_ESCAPE_RE = re.compile(r"%([0-9A-Fa-f]{2})")
# Reserved characters and "%" stay as written; everything else is escaped.
_COMPONENT_SAFE = "!#$%&'()*+,/:;=?@[]~"

_UNRESERVED: frozenset[str] = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~",
)

DEFAULT_SCHEME = "http"


class MalformedURLError(ValueError):
    """Raised when a string cannot be interpreted as an absolute URL."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


@dataclass(frozen=True)
class ResolvedURL:
    """Components derived once from the inspected URL.

    Attributes:
        scheme:         Lowercased scheme, e.g. ``"https"``.
        host:           Lowercased host name without port.
        root_url:       ``scheme://host``, the base for relative hrefs.
        normalized_url: The full normalized URL that gets fetched.
    """

    scheme: str
    host: str
    root_url: str
    normalized_url: str


def has_scheme(url: str) -> bool:
    return bool(_SCHEME_RE.match(url))


def with_default_scheme(url: str) -> str:
    """Return *url* stripped, prefixed with ``http://`` when it has no scheme."""
    url = url.strip()
    return url if has_scheme(url) else f"{DEFAULT_SCHEME}://{url}"


def _normalize_escapes(component: str) -> str:
    """Canonicalize percent-encoding in one URL component.

    Escapes of unreserved characters are decoded, remaining escapes are
    uppercased, and characters not allowed in a URL (spaces, non-ASCII) are
    percent-encoded as UTF-8.
    """

    def _fix(match: re.Match[str]) -> str:
        char = chr(int(match.group(1), 16))
        if char in _UNRESERVED:
            return char
        return "%" + match.group(1).upper()

    return quote(_PERCENT_ESCAPE_RE.sub(_fix, component), safe=_COMPONENT_SAFE)


def _encode_host(host: str, url: str) -> str:
    """IDNA-encode an internationalized domain name; ASCII hosts pass through."""
    if host.isascii():
        return host
    try:
        return host.encode("idna").decode("ascii")
    except UnicodeError as exc:
        raise MalformedURLError(f"Invalid host in URL {url!r}: {exc}", url=url) from exc


def _split(url: str) -> tuple[ParseResult, str, int | None]:
    try:
        parsed = urlparse(url)
        # .port raises ValueError on non-numeric or out-of-range ports
        port = parsed.port
    except ValueError as exc:
        raise MalformedURLError(f"Malformed URL {url!r}: {exc}", url=url) from exc

    host = parsed.hostname or ""
    if not host:
        raise MalformedURLError(f"URL {url!r} has no host", url=url)
    return parsed, _encode_host(host, url), port


def _bracket(host: str) -> str:
    return f"[{host}]" if ":" in host else host


def _build_netloc(parsed: ParseResult, host: str, port: int | None) -> str:
    netloc = _bracket(host)
    scheme = parsed.scheme.lower()
    if port is not None and _DEFAULT_PORTS.get(scheme) != port:
        netloc = f"{netloc}:{port}"
    userinfo, sep, _ = parsed.netloc.rpartition("@")
    if sep:
        netloc = f"{userinfo}@{netloc}"
    return netloc


def normalize_url(url: str) -> str:
    """Return the syntax-normalized form of an absolute *url*.

    Transformations applied:
    - Lowercase scheme and host, IDNA-encode non-ASCII hosts
    - Remove default ports
    - Uppercase percent-escapes, decode escaped unreserved characters,
      percent-encode characters not allowed in a URL
    - Empty path becomes ``/``

    Query string and fragment are preserved.

    Raises:
        MalformedURLError: if *url* cannot be parsed or has no valid host.
    """
    parsed, host, port = _split(url)
    path = _normalize_escapes(parsed.path) or "/"

    normalized = ParseResult(
        scheme=parsed.scheme.lower(),
        netloc=_build_netloc(parsed, host, port),
        path=path,
        params=_normalize_escapes(parsed.params),
        query=_normalize_escapes(parsed.query),
        fragment=_normalize_escapes(parsed.fragment),
    )
    return urlunparse(normalized)


def resolve_url(url: str) -> ResolvedURL:
    """Normalize a raw, possibly scheme-less *url* and derive its root URL.

    ``root_url`` is ``scheme://host``: port and credentials are not part of it.

    Example:
        ``resolve_url("Example.com/page").root_url`` → ``"http://example.com"``
    """
    if not url or not url.strip():
        raise MalformedURLError("URL must be a non-empty string", url=url)

    normalized = normalize_url(with_default_scheme(url))
    parsed, host, _ = _split(normalized)
    scheme = parsed.scheme
    root_url = f"{scheme}://{_bracket(host)}"
    return ResolvedURL(
        scheme=scheme,
        host=host,
        root_url=root_url,
        normalized_url=normalized,
    )


def absolute_path(href: str, root_url: str) -> str:
    """Turn a document *href* into an absolute URL rooted at *root_url*.

    Full and protocol-relative URLs are returned unchanged.  Everything else
    is joined textually: ``"foo"`` and ``"/foo"`` both become
    ``root_url + "/foo"``.  Dot segments are not collapsed.
    """
    if _ABSOLUTE_HREF_RE.match(href):
        return href
    if not href.startswith("/"):
        href = "/" + href
    return root_url + href
