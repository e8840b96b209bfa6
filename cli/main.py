"""linkwatch CLI: entry-point for scans and the health/scheduler server.

Usage:
    python cli/main.py --help

Commands:
    scan      → collect, check, report and email for configured sites
    collect   → print the URLs discovered for one site
    check     → check specific URLs and print the broken ones
    ping      → run the keep-alive self-ping once
    serve     → run the health API with the cron scheduler
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from linkwatch.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
from typing import List, Optional

import typer

from linkwatch.config import ConfigError, settings

app = typer.Typer(
    name="linkwatch",
    help="Scheduled broken-link scanner.",
    no_args_is_help=True,
)


def _require_email() -> None:
    try:
        settings.require_email_settings()
    except ConfigError as exc:
        typer.echo(f"[config] {exc}", err=True)
        raise typer.Exit(1)


@app.command("scan")
def scan(
    site: Optional[List[str]] = typer.Option(
        None, "--site", help="Website root URL (repeatable). Defaults to WEBSITES."
    ),
    email: bool = typer.Option(True, "--email/--no-email", help="Email each report."),
) -> None:
    """Scan websites for broken links and email a report per site."""
    from linkwatch.runner import analyze_websites

    if email:
        _require_email()

    websites = [s.rstrip("/") for s in site] if site else None
    results = asyncio.run(analyze_websites(websites, send=email))

    typer.echo("")
    for r in results:
        if r.ok:
            typer.echo(
                f"[scan] {r.website}: {r.urls_checked} checked, "
                f"{len(r.broken_links)} broken, email_sent={r.email_sent}"
            )
        else:
            typer.echo(f"[scan] {r.website}: FAILED: {r.error}")
    if any(not r.ok for r in results):
        raise typer.Exit(1)


@app.command("collect")
def collect(
    site: str = typer.Option(..., "--site", help="Website root URL."),
) -> None:
    """Print the URLs that a scan of SITE would check."""
    from linkwatch.crawler import build_client, collect_links

    async def _run() -> list[str]:
        async with build_client() as client:
            return await collect_links(client, site.rstrip("/"))

    urls = asyncio.run(_run())
    typer.echo(f"[collect] {len(urls)} URL(s) for {site}")
    for url in urls:
        typer.echo(f"  {url}")


@app.command("check")
def check(
    urls: List[str] = typer.Argument(..., help="URLs to check."),
) -> None:
    """Check URLS once each and list the broken ones."""
    from linkwatch.checker import check_all_links
    from linkwatch.crawler import build_client
    from linkwatch.crawler.models import CheckState

    state = CheckState()

    async def _run() -> None:
        async with build_client() as client:
            await check_all_links(client, urls, "command line", state)

    asyncio.run(_run())
    if not state.broken_links:
        typer.echo("[check] No broken links were found.")
        return
    for b in state.broken_links:
        typer.echo(f"  {b.status.label:<12} {b.url}")
    raise typer.Exit(1)


@app.command("ping")
def ping() -> None:
    """Run the keep-alive self-ping against BACKEND_URL once."""
    from linkwatch.scheduler import ping_backend

    if not asyncio.run(ping_backend()):
        raise typer.Exit(1)


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address."),
    port: int = typer.Option(3000, envvar="PORT", help="Bind port (defaults to $PORT)."),
) -> None:
    """Run the health endpoint and both cron jobs."""
    import uvicorn

    _require_email()
    typer.echo(f"[serve] Server listening on port {port}")
    uvicorn.run("linkwatch.api.app:app", host=host, port=port)


if __name__ == "__main__":
    app()
