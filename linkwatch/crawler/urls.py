"""Pure URL helpers: validation, resolution and same-host comparison."""

from __future__ import annotations

from urllib.parse import urljoin, urlparse

import httpx

_FORBIDDEN_HOST_CHARS = frozenset(" \t\n\r#/<>?@[\\]^|")


def is_valid_url(value: str) -> bool:
    """Return ``True`` if *value* is an absolute URL with a scheme and host.

    Hosts containing whitespace or other forbidden characters, and ports
    outside 0-65535, are rejected even though ``urlparse`` accepts them.
    """
    if not isinstance(value, str) or not value:
        return False
    try:
        parsed = urlparse(value)
        parsed.port  # raises ValueError outside 0-65535
    except ValueError:
        return False
    if not parsed.scheme or not parsed.netloc:
        return False
    host = parsed.hostname
    if not host or any(ch in _FORBIDDEN_HOST_CHARS for ch in host):
        return False
    try:
        httpx.URL(value)
    except httpx.InvalidURL:
        return False
    return True


def resolve_url(base: str, relative: str) -> str | None:
    """Resolve *relative* against *base*; ``None`` if either cannot be parsed."""
    try:
        return urljoin(base, relative)
    except ValueError:
        print(f"[urls] Error resolving URL: {relative}")
        return None


def is_same_domain(base_url: str, link_url: str) -> bool:
    """Compare hostnames exactly.  ``www.`` prefixes are *not* normalised."""
    try:
        base_host = urlparse(base_url).hostname
        link_host = urlparse(link_url).hostname
    except ValueError:
        return False
    if not base_host or not link_host:
        return False
    return base_host == link_host
