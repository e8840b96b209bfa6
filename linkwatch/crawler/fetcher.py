"""Async HTTP helpers shared by the sitemap fetcher, crawler and checker."""

from __future__ import annotations

import httpx

from linkwatch.config import settings


def build_client() -> httpx.AsyncClient:
    """Return a client configured with the per-request timeout.

    Redirects are followed so a link's status is that of its final target.
    """
    return httpx.AsyncClient(
        timeout=settings.request_timeout,
        follow_redirects=True,
    )


async def fetch(client: httpx.AsyncClient, url: str) -> httpx.Response:
    """GET *url* and return the response once its final status is 2xx.

    Raises:
        httpx.HTTPError: On transport failure or a non-2xx final status.
        httpx.InvalidURL: If httpx refuses the URL outright.
    """
    response = await client.get(url)
    response.raise_for_status()
    return response
