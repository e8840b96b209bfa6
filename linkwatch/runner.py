"""High-level runner: scan each configured website and email its report.

``analyze_websites`` is the batch entry point used by both the scheduler and
the CLI.  Sites are processed strictly one after another; each gets its own
HTTP client and its own :class:`~linkwatch.crawler.models.CheckState`, so
nothing leaks between sites or between runs.
"""

from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional

from linkwatch.checker import check_all_links
from linkwatch.config import settings
from linkwatch.crawler import build_client, collect_links
from linkwatch.crawler.models import CheckState, SiteResult
from linkwatch.mailer import send_report
from linkwatch.report import generate_report


async def analyze_website(website_url: str, *, send: bool = True) -> SiteResult:
    """Collect, check, report and (optionally) email for one site.

    Exceptions from the pipeline propagate; :func:`analyze_websites` is
    responsible for containing them per site.
    """
    print(f"[scan] Starting broken link check for {website_url}")
    state = CheckState()

    async with build_client() as client:
        urls = await collect_links(client, website_url)
        await check_all_links(client, urls, website_url, state)

    report = generate_report(website_url, state.broken_links, state.checked_urls)
    print(report.text)

    email_sent = False
    if send:
        email_sent = await asyncio.to_thread(send_report, report, website_url)

    return SiteResult(
        website=website_url,
        urls_collected=len(urls),
        urls_checked=len(state.checked_urls),
        broken_links=list(state.broken_links),
        email_sent=email_sent,
    )


async def analyze_websites(
    websites: Optional[Iterable[str]] = None,
    *,
    send: bool = True,
) -> List[SiteResult]:
    """Analyse *websites* (default: ``settings.websites``) in order.

    A failure inside one site's pipeline is logged and captured on that
    site's :class:`SiteResult` so the remaining sites still run.
    """
    results: List[SiteResult] = []
    for website_url in list(websites) if websites is not None else settings.websites:
        try:
            result = await analyze_website(website_url, send=send)
        except Exception as exc:
            print(f"[scan] Error analysing {website_url}: {exc!r}")
            result = SiteResult(website=website_url, error=str(exc) or repr(exc))
        results.append(result)

    failed = sum(1 for r in results if not r.ok)
    if failed:
        print(f"[scan] Finished with {failed} failed site(s) out of {len(results)}.")
    elif send:
        print("[scan] All websites analyzed and reports sent.")
    else:
        print("[scan] All websites analyzed.")
    return results
