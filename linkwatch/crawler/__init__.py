"""Crawler package: URL helpers, sitemap expansion and link discovery."""

from linkwatch.crawler.collector import collect_links
from linkwatch.crawler.extractor import extract_internal_links, fetch_homepage_links
from linkwatch.crawler.fetcher import build_client
from linkwatch.crawler.sitemap import fetch_sitemap
from linkwatch.crawler.urls import is_same_domain, is_valid_url, resolve_url

__all__ = [
    "build_client",
    "collect_links",
    "extract_internal_links",
    "fetch_homepage_links",
    "fetch_sitemap",
    "is_same_domain",
    "is_valid_url",
    "resolve_url",
]
