"""Data models for the crawl / check / report pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

GENERIC_SOURCE = "Sitemap or Inner Page"


class StatusKind(str, Enum):
    HTTP = "http"
    INVALID = "invalid"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class LinkStatus:
    """Why a link was recorded as broken.

    Either a concrete HTTP status code, a syntactically invalid URL, or a
    network-level failure that produced no response at all.
    """

    kind: StatusKind
    code: Optional[int] = None

    @classmethod
    def http(cls, code: int) -> "LinkStatus":
        return cls(StatusKind.HTTP, code)

    @classmethod
    def invalid(cls) -> "LinkStatus":
        return cls(StatusKind.INVALID)

    @classmethod
    def unreachable(cls) -> "LinkStatus":
        return cls(StatusKind.UNREACHABLE)

    @property
    def label(self) -> str:
        """Text shown in reports: the code, ``Invalid URL`` or ``Unreachable``."""
        if self.kind is StatusKind.HTTP:
            return str(self.code)
        if self.kind is StatusKind.INVALID:
            return "Invalid URL"
        return "Unreachable"

    def __str__(self) -> str:
        return self.label


@dataclass
class BrokenLink:
    """A single link that failed its check."""

    url: str
    status: LinkStatus
    source: str = GENERIC_SOURCE


@dataclass
class CheckState:
    """Accumulator owned by one site run and shared by its check batches."""

    broken_links: List[BrokenLink] = field(default_factory=list)
    checked_urls: Dict[str, None] = field(default_factory=dict)

    def mark_checked(self, url: str) -> None:
        # dict keeps dispatch order for the report listing
        self.checked_urls[url] = None


@dataclass(frozen=True)
class Report:
    """Rendered email bodies for one site."""

    html: str
    text: str


@dataclass
class SiteResult:
    """Outcome of analysing one website."""

    website: str
    urls_collected: int = 0
    urls_checked: int = 0
    broken_links: List[BrokenLink] = field(default_factory=list)
    email_sent: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
