"""One GET per URL, in fixed-size concurrent batches.

Each batch of ``settings.concurrent_requests`` checks runs concurrently and
every slot sleeps ``settings.request_delay`` after its request, so the next
batch cannot start until the slowest member (plus its delay) is done.  This
caps simultaneous connections to a site and throttles the request rate.
"""

from __future__ import annotations

import asyncio
from typing import Sequence

import httpx

from linkwatch.config import settings
from linkwatch.crawler.models import GENERIC_SOURCE, BrokenLink, CheckState, LinkStatus
from linkwatch.crawler.urls import is_valid_url


def classify_status(code: int) -> LinkStatus | None:
    """Return ``None`` for healthy (2xx/3xx) codes, else an HTTP status."""
    if 200 <= code < 400:
        return None
    return LinkStatus.http(code)


async def check_link(
    client: httpx.AsyncClient,
    url: str,
    state: CheckState,
    source: str = GENERIC_SOURCE,
) -> None:
    """Check *url* once and record it in *state* if it is broken.

    Invalid URLs are recorded without a request and are not marked checked.
    URLs already in ``state.checked_urls`` are skipped.
    """
    if not is_valid_url(url):
        state.broken_links.append(BrokenLink(url, LinkStatus.invalid(), source))
        return
    if url in state.checked_urls:
        return
    state.mark_checked(url)

    try:
        response = await client.get(url)
    except httpx.HTTPStatusError as exc:
        status = classify_status(exc.response.status_code)
    except httpx.InvalidURL:
        state.checked_urls.pop(url, None)
        status = LinkStatus.invalid()
    except httpx.HTTPError:
        status = LinkStatus.unreachable()
    else:
        status = classify_status(response.status_code)

    if status is not None:
        state.broken_links.append(BrokenLink(url, status, source))


async def check_all_links(
    client: httpx.AsyncClient,
    urls: Sequence[str],
    website_url: str,
    state: CheckState,
    source: str = GENERIC_SOURCE,
) -> None:
    """Check every URL in *urls*, accumulating results into *state*."""
    total = len(urls)
    batch_size = max(1, settings.concurrent_requests)
    print(f"[check] Checking {total} URLs for {website_url} …")

    async def _slot(url: str, position: int) -> None:
        await check_link(client, url, state, source)
        await asyncio.sleep(settings.request_delay)
        progress = round(position / total * 100)
        print(f"[check] Progress for {website_url}: {progress}% ({position}/{total})")

    for start in range(0, total, batch_size):
        batch = urls[start : start + batch_size]
        await asyncio.gather(
            *(_slot(url, start + offset + 1) for offset, url in enumerate(batch))
        )
