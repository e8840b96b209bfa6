"""Cron jobs: the keep-alive self-ping and the periodic website scan.

Both jobs run on an asyncio scheduler inside the API process, in
``settings.timezone``.  Neither job lets an exception escape; a failed cycle
is logged and the next trigger runs normally.
"""

from __future__ import annotations

import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from linkwatch.config import settings
from linkwatch.runner import analyze_websites

PING_JOB_ID = "self-ping"
SCAN_JOB_ID = "website-scan"


async def ping_backend() -> bool:
    """GET ``settings.backend_url`` so the hosting platform keeps us awake."""
    print("[ping] Restarting server")
    try:
        async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
            response = await client.get(settings.backend_url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        print(f"[ping] Error during restart: {exc}")
        return False

    if response.status_code == 200:
        print("[ping] Server restarted")
        return True
    print(f"[ping] Failed to restart server with status code: {response.status_code}")
    return False


async def run_scheduled_scan() -> None:
    """Scan every configured site; log and swallow failures so the job keeps firing."""
    print("[scan] Starting scheduled website scan")
    try:
        await analyze_websites()
    except Exception as exc:
        print(f"[scan] Error during scheduled scan: {exc}")
        return
    print("[scan] Scheduled website scan completed")


def build_scheduler() -> AsyncIOScheduler:
    """Return an (unstarted) scheduler with both cron jobs registered."""
    scheduler = AsyncIOScheduler(timezone=settings.timezone)
    scheduler.add_job(
        ping_backend,
        CronTrigger.from_crontab(settings.ping_cron, timezone=settings.timezone),
        id=PING_JOB_ID,
        replace_existing=True,
    )
    scheduler.add_job(
        run_scheduled_scan,
        CronTrigger.from_crontab(settings.scan_cron, timezone=settings.timezone),
        id=SCAN_JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    return scheduler
