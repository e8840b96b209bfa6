"""Tests for the batched link checker.

``settings.request_delay`` is zeroed unless a test sets it, so batches complete
immediately.  Classification tests go through ``respx``; the batching tests
use a small fake client that records how many requests are in flight.
"""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from linkwatch import checker
from linkwatch.checker import check_all_links, check_link, classify_status
from linkwatch.config import settings
from linkwatch.crawler import build_client
from linkwatch.crawler.models import GENERIC_SOURCE, CheckState, LinkStatus, StatusKind


# ---------------------------------------------------------------------------
# Fixtures / helpers
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _no_delay(monkeypatch):
    monkeypatch.setattr(settings, "request_delay", 0.0)


class _FakeClient:
    """Minimal stand-in for ``httpx.AsyncClient.get`` that tracks concurrency."""

    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code
        self.in_flight = 0
        self.max_in_flight = 0
        self.requested: list[str] = []

    async def get(self, url: str) -> httpx.Response:
        self.requested.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.01)
        self.in_flight -= 1
        return httpx.Response(self.status_code, request=httpx.Request("GET", url))


def _statuses(state: CheckState) -> dict[str, LinkStatus]:
    return {b.url: b.status for b in state.broken_links}


# ---------------------------------------------------------------------------
# classify_status
# ---------------------------------------------------------------------------

class TestClassifyStatus:
    @pytest.mark.parametrize("code", [200, 204, 301, 302, 304, 399])
    def test_success_and_redirect_codes_are_healthy(self, code: int) -> None:
        assert classify_status(code) is None

    @pytest.mark.parametrize("code", [100, 199, 400, 404, 410, 500, 503])
    def test_other_codes_are_broken(self, code: int) -> None:
        assert classify_status(code) == LinkStatus.http(code)


# ---------------------------------------------------------------------------
# check_link
# ---------------------------------------------------------------------------

class TestCheckLink:
    async def test_healthy_link_not_recorded(self) -> None:
        state = CheckState()
        with respx.mock:
            respx.get("https://example.com/ok").mock(return_value=httpx.Response(200))
            async with build_client() as client:
                await check_link(client, "https://example.com/ok", state)

        assert state.broken_links == []
        assert list(state.checked_urls) == ["https://example.com/ok"]

    async def test_404_recorded_with_code(self) -> None:
        state = CheckState()
        with respx.mock:
            respx.get("https://example.com/missing").mock(return_value=httpx.Response(404))
            async with build_client() as client:
                await check_link(client, "https://example.com/missing", state)

        [record] = state.broken_links
        assert record.status == LinkStatus.http(404)
        assert record.status.label == "404"
        assert record.source == GENERIC_SOURCE

    async def test_redirect_to_ok_is_healthy(self) -> None:
        state = CheckState()
        with respx.mock:
            respx.get("https://example.com/old").mock(
                return_value=httpx.Response(301, headers={"Location": "https://example.com/new"})
            )
            respx.get("https://example.com/new").mock(return_value=httpx.Response(200))
            async with build_client() as client:
                await check_link(client, "https://example.com/old", state)

        assert state.broken_links == []

    @pytest.mark.parametrize(
        "error", [httpx.ConnectError, httpx.ConnectTimeout, httpx.ReadTimeout]
    )
    async def test_network_failure_is_unreachable(self, error) -> None:
        state = CheckState()
        with respx.mock:
            respx.get("https://down.example.com/").mock(side_effect=error)
            async with build_client() as client:
                await check_link(client, "https://down.example.com/", state)

        [record] = state.broken_links
        assert record.status.kind is StatusKind.UNREACHABLE
        assert record.status.label == "Unreachable"

    async def test_invalid_url_is_recorded_without_request(self) -> None:
        state = CheckState()
        with respx.mock(assert_all_called=False) as mock:
            async with build_client() as client:
                await check_link(client, "not a url", state)

        assert mock.calls.call_count == 0
        [record] = state.broken_links
        assert record.status == LinkStatus.invalid()
        assert record.status.label == "Invalid URL"
        assert "not a url" not in state.checked_urls

    @pytest.mark.parametrize("url", ["https://exa mple.com/", "https://a.com:99999/"])
    async def test_bad_host_or_port_is_invalid_without_request(self, url: str) -> None:
        state = CheckState()
        with respx.mock(assert_all_called=False) as mock:
            mock.route().mock(return_value=httpx.Response(200))
            async with build_client() as client:
                await check_link(client, url, state)

        assert mock.calls.call_count == 0
        assert _statuses(state) == {url: LinkStatus.invalid()}
        assert url not in state.checked_urls

    async def test_invalid_url_raised_by_client_is_invalid(self) -> None:
        class _RejectingClient(_FakeClient):
            async def get(self, url: str) -> httpx.Response:
                raise httpx.InvalidURL("bad host")

        state = CheckState()
        await check_link(_RejectingClient(), "https://example.com/x", state)  # type: ignore[arg-type]

        assert _statuses(state) == {"https://example.com/x": LinkStatus.invalid()}
        assert "https://example.com/x" not in state.checked_urls

    async def test_already_checked_is_skipped(self) -> None:
        state = CheckState(checked_urls={"https://example.com/seen": None})
        client = _FakeClient(status_code=500)
        await check_link(client, "https://example.com/seen", state)  # type: ignore[arg-type]

        assert client.requested == []
        assert state.broken_links == []

    async def test_custom_source_is_kept(self) -> None:
        state = CheckState()
        client = _FakeClient(status_code=410)
        await check_link(  # type: ignore[arg-type]
            client, "https://example.com/x", state, source="https://example.com/page"
        )

        assert state.broken_links[0].source == "https://example.com/page"


# ---------------------------------------------------------------------------
# check_all_links
# ---------------------------------------------------------------------------

class TestCheckAllLinks:
    async def test_batches_bound_concurrency(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "concurrent_requests", 3)
        urls = [f"https://example.com/{i}" for i in range(7)]
        client = _FakeClient()
        state = CheckState()

        await check_all_links(client, urls, "https://example.com", state)  # type: ignore[arg-type]

        assert client.max_in_flight == 3
        assert sorted(client.requested) == sorted(urls)
        assert list(state.checked_urls) == urls

    async def test_batches_run_in_list_order(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "concurrent_requests", 2)
        urls = [f"https://example.com/{i}" for i in range(6)]
        client = _FakeClient()

        await check_all_links(client, urls, "https://example.com", CheckState())  # type: ignore[arg-type]

        batches = [set(client.requested[i : i + 2]) for i in range(0, 6, 2)]
        assert batches == [set(urls[0:2]), set(urls[2:4]), set(urls[4:6])]

    async def test_duplicates_checked_once(self) -> None:
        client = _FakeClient(status_code=404)
        state = CheckState()
        urls = ["https://example.com/a", "https://example.com/b", "https://example.com/a"]

        await check_all_links(client, urls, "https://example.com", state)  # type: ignore[arg-type]

        assert client.requested.count("https://example.com/a") == 1
        assert len(state.broken_links) == 2

    async def test_mixed_classification(self) -> None:
        state = CheckState()
        with respx.mock:
            respx.get("https://example.com/ok").mock(return_value=httpx.Response(200))
            respx.get("https://example.com/missing").mock(return_value=httpx.Response(404))
            respx.get("https://example.com/boom").mock(return_value=httpx.Response(500))
            respx.get("https://gone.example.com/").mock(side_effect=httpx.ConnectError)
            async with build_client() as client:
                await check_all_links(
                    client,
                    [
                        "https://example.com/ok",
                        "https://example.com/missing",
                        "https://example.com/boom",
                        "https://gone.example.com/",
                        "::bad::",
                    ],
                    "https://example.com",
                    state,
                )

        assert _statuses(state) == {
            "https://example.com/missing": LinkStatus.http(404),
            "https://example.com/boom": LinkStatus.http(500),
            "https://gone.example.com/": LinkStatus.unreachable(),
            "::bad::": LinkStatus.invalid(),
        }
        assert len(state.checked_urls) == 4

    async def test_same_classification_on_repeat_runs(self) -> None:
        urls = ["https://example.com/ok", "https://example.com/missing"]
        results = []
        with respx.mock:
            respx.get("https://example.com/ok").mock(return_value=httpx.Response(200))
            respx.get("https://example.com/missing").mock(return_value=httpx.Response(404))
            async with build_client() as client:
                for _ in range(2):
                    state = CheckState()
                    await check_all_links(client, urls, "https://example.com", state)
                    results.append(_statuses(state))

        assert results[0] == results[1]

    async def test_empty_list_is_a_no_op(self) -> None:
        client = _FakeClient()
        state = CheckState()
        await check_all_links(client, [], "https://example.com", state)  # type: ignore[arg-type]
        assert client.requested == []
        assert state.broken_links == []

    async def test_progress_is_logged(self, capsys) -> None:
        client = _FakeClient()
        await check_all_links(  # type: ignore[arg-type]
            client, ["https://example.com/a", "https://example.com/b"], "https://example.com", CheckState()
        )
        out = capsys.readouterr().out
        assert "50% (1/2)" in out
        assert "100% (2/2)" in out

    async def test_each_slot_waits_request_delay_before_next_batch(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "concurrent_requests", 2)
        monkeypatch.setattr(settings, "request_delay", 0.02)
        events: list[tuple[str, str]] = []
        real_sleep = asyncio.sleep

        class _RecordingClient(_FakeClient):
            async def get(self, url: str) -> httpx.Response:
                events.append(("get", url))
                return await super().get(url)

        async def _sleep(delay: float) -> None:
            await real_sleep(delay)
            events.append(("slept", str(delay)))

        sleep = AsyncMock(side_effect=_sleep)
        monkeypatch.setattr(
            checker, "asyncio", SimpleNamespace(sleep=sleep, gather=asyncio.gather)
        )
        urls = [f"https://example.com/{i}" for i in range(4)]

        await check_all_links(_RecordingClient(), urls, "https://example.com", CheckState())  # type: ignore[arg-type]

        assert sleep.await_count == len(urls)
        assert all(c.args == (0.02,) for c in sleep.await_args_list)
        kinds = [kind for kind, _ in events]
        assert kinds == ["get", "get", "slept", "slept", "get", "get", "slept", "slept"]
        assert {u for kind, u in events[4:6]} == set(urls[2:4])
