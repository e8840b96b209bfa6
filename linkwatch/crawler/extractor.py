"""Anchor extraction: homepage crawl fallback and per-page internal links."""

from __future__ import annotations

from typing import Iterable, List

import httpx
from bs4 import BeautifulSoup

from linkwatch.config import settings
from linkwatch.crawler.fetcher import fetch
from linkwatch.crawler.urls import is_same_domain, resolve_url


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _extract_links(
    html: str,
    page_url: str,
    website_url: str,
    exclude: Iterable[str] = (),
) -> List[str]:
    """Return same-domain absolute links from the ``<a href>`` tags in *html*.

    Hrefs are resolved against *page_url* and compared with *website_url*.
    The result is deduplicated in first-seen order.
    """
    excluded = set(exclude)
    soup = BeautifulSoup(html, "html.parser")
    seen: set[str] = set()
    links: List[str] = []
    for anchor in soup.find_all("a"):
        href = anchor.get("href")
        if not href:
            continue
        resolved = resolve_url(page_url, href)
        if not resolved or not is_same_domain(website_url, resolved):
            continue
        if resolved in excluded or resolved in seen:
            continue
        seen.add(resolved)
        links.append(resolved)
    return links


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def fetch_homepage_links(client: httpx.AsyncClient, base_url: str) -> List[str]:
    """Crawl *base_url* and return its same-domain links, capped per site.

    Used as the seed set when a site publishes no sitemap.  A failed fetch is
    logged and yields ``[]``.
    """
    try:
        response = await fetch(client, base_url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        print(f"[crawl] Error fetching homepage {base_url}: {exc}")
        return []
    links = _extract_links(response.text, base_url, base_url)
    return links[: settings.max_urls_per_site]


async def extract_internal_links(
    client: httpx.AsyncClient,
    page_url: str,
    website_url: str,
    already_checked: Iterable[str],
) -> List[str]:
    """Return links on *page_url* that stay on *website_url*'s host.

    URLs in *already_checked* are left out.  A failed fetch is logged and
    yields ``[]``.
    """
    try:
        response = await fetch(client, page_url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        print(f"[crawl] Error extracting links from {page_url}: {exc}")
        return []
    return _extract_links(response.text, page_url, website_url, exclude=already_checked)
