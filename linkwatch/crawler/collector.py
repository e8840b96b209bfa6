"""Per-site link discovery: sitemap first, homepage crawl as the fallback."""

from __future__ import annotations

from typing import List

import httpx

from linkwatch.config import settings
from linkwatch.crawler.extractor import extract_internal_links, fetch_homepage_links
from linkwatch.crawler.sitemap import fetch_sitemap

SITEMAP_PATHS = ("/sitemap.xml", "/sitemap_index.xml")


def _dedupe(urls: List[str]) -> List[str]:
    return list(dict.fromkeys(urls))


async def collect_links(client: httpx.AsyncClient, website_url: str) -> List[str]:
    """Return the URLs to check for *website_url*.

    Seeds come from the first non-empty sitemap in :data:`SITEMAP_PATHS`, or
    from the homepage when neither exists.  Each seed page is then fetched
    once and its internal links appended, so pages missing from the sitemap
    are still found without an unbounded recursive crawl.
    """
    cap = settings.max_urls_per_site
    root = website_url.rstrip("/")

    seeds: List[str] = []
    for path in SITEMAP_PATHS:
        found = await fetch_sitemap(client, f"{root}{path}")
        if found:
            seeds = _dedupe(found)
            print(f"[collect] Found {len(seeds)} URLs in sitemap for {website_url}")
            break

    if not seeds:
        print(f"[collect] No sitemap found for {website_url}, crawling homepage …")
        seeds = await fetch_homepage_links(client, website_url)
        print(f"[collect] Found {len(seeds)} URLs on homepage for {website_url}")

    urls: List[str] = []
    visited: set[str] = set()
    for seed in seeds:
        if len(urls) >= cap:
            break
        urls.append(seed)
        visited.add(seed)
        urls.extend(await extract_internal_links(client, seed, website_url, visited))

    return _dedupe(urls)[:cap]
