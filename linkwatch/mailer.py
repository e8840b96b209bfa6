"""SMTP delivery of a site report."""

from __future__ import annotations

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from linkwatch.config import settings
from linkwatch.crawler.models import Report


def build_message(report: Report, website_url: str) -> MIMEMultipart:
    """Return a ``multipart/alternative`` message: plain text, then HTML."""
    msg = MIMEMultipart("alternative")
    msg["From"] = settings.email_from
    msg["To"] = settings.email_to
    msg["Subject"] = f"Broken Links Report for {website_url}"
    msg.attach(MIMEText(report.text, "plain", "utf-8"))
    msg.attach(MIMEText(report.html, "html", "utf-8"))
    return msg


def send_report(report: Report, website_url: str) -> bool:
    """Email *report* and return whether delivery succeeded.

    Blocking; the orchestrator runs it in a worker thread.  SMTP and socket
    errors are logged and reported as ``False`` rather than raised.
    """
    msg = build_message(report, website_url)
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as server:
            server.starttls()
            server.login(settings.email_from, settings.email_password)
            server.sendmail(settings.email_from, [settings.email_to], msg.as_string())
    except (smtplib.SMTPException, OSError) as exc:
        print(f"[mail] Error sending email for {website_url}: {exc}")
        return False

    print(f"[mail] Email sent successfully for {website_url}")
    return True
