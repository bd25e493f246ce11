"""URL helpers shared by the resource handles."""

from __future__ import annotations

import re
import urllib.parse
from typing import Any, Final

_ABSOLUTE_URL: Final = re.compile(r"^https?://|^//", re.IGNORECASE)

# Unreserved set of JavaScript's encodeURIComponent, minus what quote() keeps anyway.
_SEGMENT_SAFE: Final[str] = "!*'()~"

# URL delimiters kept when the value is itself an absolute URL. ' and % are
# always encoded, so the value cannot end a quoted literal.
_ABSOLUTE_SAFE: Final[str] = ":/?#[]@!$&()*+,;=~"


def combine(*paths: str | None) -> str:
    """Join URL parts with a single ``/``.

    Empty parts are dropped and one leading/trailing slash (or backslash)
    is stripped from every part.
    """
    parts = []
    for path in paths:
        if not path:
            continue
        path = re.sub(r"^[\\/]", "", path)
        path = re.sub(r"[\\/]$", "", path)
        parts.append(path)
    return "/".join(parts).replace("\\", "/")


def is_url_absolute(url: str | None) -> bool:
    return bool(url) and _ABSOLUTE_URL.match(url) is not None


def ensure_scheme(url: str) -> str:
    """Prefix ``https://`` to a host-first URL such as ``contoso.sharepoint.com/sites/a``.

    Absolute and server-relative URLs are returned unchanged.
    """
    if not url or is_url_absolute(url) or url.startswith("/"):
        return url
    return f"https://{url}"


def escape_query_str_value(value: str | None) -> str:
    """Escape a value for use inside a single-quoted OData literal.

    Plain values have every ``'`` doubled and are then percent-encoded the
    way ``encodeURIComponent`` does. Absolute URLs keep their delimiters and
    are not quote-doubled; their ``'`` is percent-encoded instead.

    Never raises: control characters and lone surrogates are encoded.

    Args:
        value: Caller supplied free text (a name, leaf path or URL).

    Returns:
        The escaped text, ``""`` for empty input.
    """
    if not value:
        return ""
    if is_url_absolute(value):
        return urllib.parse.quote(value, safe=_ABSOLUTE_SAFE, errors="surrogatepass")
    return urllib.parse.quote(
        value.replace("'", "''"), safe=_SEGMENT_SAFE, errors="surrogatepass"
    )


def unescape_query_str_value(value: str | None) -> str:
    """Reverse :func:`escape_query_str_value`."""
    if not value:
        return ""
    decoded = urllib.parse.unquote(value, errors="surrogatepass")
    if is_url_absolute(decoded):
        return decoded
    return decoded.replace("''", "'")


def extract_web_url(candidate_url: str | None) -> str:
    """Return the web URL part of a REST URL (everything before ``_api/``)."""
    if not candidate_url:
        return ""
    index = candidate_url.find("_api/")
    if index < 0:
        index = candidate_url.find("_vti_bin/")
    if index > -1:
        return candidate_url[:index]
    return candidate_url


def authority_from_url(site_url: str) -> str:
    """Return the URL authority (scheme + host).

    Args:
        site_url: Absolute SharePoint site URL (e.g., "https://tenant.sharepoint.com/sites/foo").

    Returns:
        The "<scheme>://<host>" portion of the URL.

    Raises:
        ValueError: If ``site_url`` is not absolute or lacks a host.
    """
    parsed = urllib.parse.urlparse(site_url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("site_url must be an absolute URL")
    return f"{parsed.scheme}://{parsed.netloc}"


def spo_scope_from_url(site_url: str) -> str:
    return f"{authority_from_url(site_url)}/.default"


def host_url_from_web(web_url: str, web_server_relative_url: str) -> str:
    """Strip a web's server-relative URL from its absolute URL.

    ``("https://t.sharepoint.com/sites/a", "/sites/a")`` gives
    ``"https://t.sharepoint.com"``; a root web (``"/"``) gives the authority.
    """
    web_url = web_url.rstrip("/")
    suffix = (web_server_relative_url or "").rstrip("/")
    if suffix and web_url.endswith(suffix):
        return web_url[: -len(suffix)]
    if not suffix:
        return web_url
    return authority_from_url(web_url)


def to_resource_path(url: str) -> dict[str, Any]:
    return {
        "__metadata": {"type": "SP.ResourcePath"},
        "DecodedUrl": url,
    }
