"""Recursive XML sitemap / sitemap-index expansion.

Handles both plain ``<urlset>`` documents and nested ``<sitemapindex>``
structures.  Tag matching ignores XML namespaces so sitemaps that omit or
vary the standard ``sitemaps.org`` namespace still parse.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import List, Set

import httpx

from linkwatch.config import settings
from linkwatch.crawler.fetcher import fetch
from linkwatch.crawler.urls import is_valid_url


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child_locs(root: ET.Element, entry_tag: str) -> List[str]:
    """Return the stripped ``<loc>`` text of every direct *entry_tag* child."""
    locs: List[str] = []
    for entry in root:
        if _local_name(entry.tag) != entry_tag:
            continue
        for child in entry:
            if _local_name(child.tag) == "loc" and child.text and child.text.strip():
                locs.append(child.text.strip())
                break
    return locs


async def fetch_sitemap(client: httpx.AsyncClient, sitemap_url: str) -> List[str]:
    """Return the page URLs listed by *sitemap_url*, capped at the per-site limit.

    A sitemap index is expanded by fetching each child sitemap in document
    order.  Expansion stops once the cap is reached, which keeps exactly the
    URLs a full expansion followed by truncation would keep.  A child sitemap
    already visited during this expansion is skipped, so self-referencing or
    cyclic indexes terminate.

    Never raises: any network or XML error is logged and yields ``[]``.
    """
    return await _fetch_sitemap(client, sitemap_url, set())


async def _fetch_sitemap(
    client: httpx.AsyncClient, sitemap_url: str, seen: Set[str]
) -> List[str]:
    cap = settings.max_urls_per_site
    seen.add(sitemap_url)
    try:
        response = await fetch(client, sitemap_url)
        root = ET.fromstring(response.content)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        print(f"[sitemap] Error fetching sitemap {sitemap_url}: {exc}")
        return []
    except ET.ParseError as exc:
        print(f"[sitemap] Error parsing sitemap {sitemap_url}: {exc}")
        return []

    urls: List[str] = []
    for child_url in _child_locs(root, "sitemap"):
        if len(urls) >= cap:
            break
        if child_url in seen:
            print(f"[sitemap] Skipping already visited sitemap {child_url}")
            continue
        urls.extend(await _fetch_sitemap(client, child_url, seen))

    urls.extend(u for u in _child_locs(root, "url") if is_valid_url(u))
    return urls[:cap]
