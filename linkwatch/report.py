"""Render the HTML and plain-text bodies of a site's broken-link email."""

from __future__ import annotations

from datetime import datetime
from html import escape
from typing import Iterable, Optional, Sequence

from linkwatch.crawler.models import BrokenLink, Report
from linkwatch.crawler.urls import is_valid_url

NO_BROKEN_LINKS = "No broken links were found."
NO_URLS_SCANNED = "No URLs were scanned."

_STYLE = """\
body { font-family: Arial, sans-serif; color: #333; background-color: #f4f4f4; margin: 0; padding: 20px; }
.container { max-width: 600px; margin: 0 auto; background: #fff; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
.header { background: #004aad; color: #fff; padding: 20px; text-align: center; border-top-left-radius: 8px; border-top-right-radius: 8px; }
.header h1 { margin: 0; font-size: 24px; }
.content { padding: 20px; }
h2 { color: #004aad; font-size: 20px; margin-top: 0; }
p { line-height: 1.6; }
table { width: 100%; border-collapse: collapse; margin: 20px 0; }
th, td { border: 1px solid #ddd; padding: 10px; text-align: left; }
th { background: #f9f9f9; font-weight: bold; }
.footer { text-align: center; padding: 20px; border-top: 1px solid #ddd; font-size: 14px; color: #777; }
@media (max-width: 600px) { .container { padding: 10px; } table { font-size: 14px; } }
"""


def _link(url: str) -> str:
    safe = escape(url, quote=True)
    return f'<a href="{safe}">{safe}</a>'


def _source_cell(source: str) -> str:
    return _link(source) if is_valid_url(source) else escape(source)


def _html_broken_section(broken_links: Sequence[BrokenLink]) -> str:
    if not broken_links:
        return f"<p>{NO_BROKEN_LINKS}</p>"
    rows = "\n".join(
        "<tr>"
        f"<td>{_link(b.url)}</td>"
        f"<td>{escape(b.status.label)}</td>"
        f"<td>{_source_cell(b.source)}</td>"
        "</tr>"
        for b in broken_links
    )
    return (
        "<table>\n"
        "<thead><tr><th>URL</th><th>Status</th><th>Source Page</th></tr></thead>\n"
        f"<tbody>\n{rows}\n</tbody>\n"
        "</table>"
    )


def _html_scanned_section(checked: Sequence[str]) -> str:
    if not checked:
        return f"<p>{NO_URLS_SCANNED}</p>"
    items = "\n".join(f"<li>{_link(url)}</li>" for url in checked)
    return f"<p>The following {len(checked)} URLs were checked:</p>\n<ul>\n{items}\n</ul>"


def generate_report(
    website_url: str,
    broken_links: Sequence[BrokenLink],
    checked_urls: Iterable[str],
    generated_at: Optional[datetime] = None,
) -> Report:
    """Build the :class:`Report` for one site.

    Args:
        website_url: Root URL of the scanned site.
        broken_links: Records produced by the checker, in completion order.
        checked_urls: Every URL that was dispatched for a check.
        generated_at: Timestamp printed in the header; defaults to now.
    """
    stamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    checked = list(checked_urls)
    site = escape(website_url, quote=True)

    html = f"""\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<style>
{_STYLE}</style>
</head>
<body>
<div class="container">
<div class="header"><h1>Broken Links Report for {site}</h1></div>
<div class="content">
<h2>Summary</h2>
<p><strong>Website:</strong> {_link(website_url)}</p>
<p><strong>Date:</strong> {stamp}</p>
<p><strong>Total URLs Checked:</strong> {len(checked)}</p>
<p><strong>Total Broken Links Found:</strong> {len(broken_links)}</p>
<h2>Broken Links</h2>
{_html_broken_section(broken_links)}
<h2>Scanned URLs</h2>
{_html_scanned_section(checked)}
</div>
<div class="footer"><p>Generated by linkwatch</p></div>
</div>
</body>
</html>
"""

    if broken_links:
        broken_text = "\n".join(
            f"URL: {b.url}\nStatus: {b.status.label}\nSource: {b.source}\n"
            for b in broken_links
        )
    else:
        broken_text = NO_BROKEN_LINKS
    scanned_text = "\n".join(checked) if checked else NO_URLS_SCANNED

    text = (
        f"Broken Links Report for {website_url}\n"
        "\n"
        f"Website: {website_url}\n"
        f"Date: {stamp}\n"
        f"Total URLs Checked: {len(checked)}\n"
        f"Total Broken Links Found: {len(broken_links)}\n"
        "\n"
        "Broken Links:\n"
        f"{broken_text}\n"
        "\n"
        "Scanned URLs:\n"
        f"{scanned_text}\n"
    )

    return Report(html=html, text=text)
