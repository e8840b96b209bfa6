"""Centralised settings for the linkwatch service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_WEBSITES = "https://innovapte.com,https://datavapte.com,https://innovtrack.com"


class ConfigError(RuntimeError):
    """Raised when required configuration is missing."""


def _split_websites(raw: str) -> list[str]:
    return [w.strip().rstrip("/") for w in raw.split(",") if w.strip()]


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Websites to scan
    # ------------------------------------------------------------------
    websites: list[str] = field(
        default_factory=lambda: _split_websites(
            os.environ.get("WEBSITES", _DEFAULT_WEBSITES)
        )
    )

    # ------------------------------------------------------------------
    # Mail delivery
    # ------------------------------------------------------------------
    email_from: str = field(default_factory=lambda: os.environ.get("EMAIL_FROM", ""))
    email_to: str = field(default_factory=lambda: os.environ.get("EMAIL_TO", ""))
    email_password: str = field(
        default_factory=lambda: os.environ.get("EMAIL_PASSWORD", "")
    )
    smtp_host: str = field(
        default_factory=lambda: os.environ.get("SMTP_HOST", "smtp.gmail.com")
    )
    smtp_port: int = field(
        default_factory=lambda: int(os.environ.get("SMTP_PORT", "587"))
    )

    # ------------------------------------------------------------------
    # Crawler / checker
    # ------------------------------------------------------------------
    concurrent_requests: int = field(
        default_factory=lambda: int(os.environ.get("CONCURRENT_REQUESTS", "10"))
    )
    request_delay: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_DELAY", "0.2"))
    )
    max_urls_per_site: int = field(
        default_factory=lambda: int(os.environ.get("MAX_URLS_PER_SITE", "500"))
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "5.0"))
    )

    # ------------------------------------------------------------------
    # Scheduler / keep-alive
    # ------------------------------------------------------------------
    backend_url: str = field(
        default_factory=lambda: os.environ.get(
            "BACKEND_URL", "https://brokenlink.onrender.com"
        )
    )
    ping_cron: str = field(
        default_factory=lambda: os.environ.get("PING_CRON", "*/14 * * * *")
    )
    scan_cron: str = field(
        default_factory=lambda: os.environ.get("SCAN_CRON", "40 11 * * *")
    )
    timezone: str = field(
        default_factory=lambda: os.environ.get("SCHEDULER_TIMEZONE", "Asia/Kolkata")
    )

    def missing_email_settings(self) -> list[str]:
        """Return the names of required mail variables that are unset."""
        required = {
            "EMAIL_FROM": self.email_from,
            "EMAIL_TO": self.email_to,
            "EMAIL_PASSWORD": self.email_password,
        }
        return [name for name, value in required.items() if not value]

    def require_email_settings(self) -> None:
        """Raise :class:`ConfigError` if any mail credential is absent."""
        missing = self.missing_email_settings()
        if missing:
            raise ConfigError(
                "Missing required environment variables: " + ", ".join(missing)
            )


# Module-level singleton — import this everywhere:
#   from linkwatch.config import settings
settings = Settings()
