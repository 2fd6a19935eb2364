"""Unit tests for diagnostics collectors and the capture coordinator."""

from types import SimpleNamespace

import pytest

from pagepilot.browser.capture import HTML_END_MARKER, HTML_START_MARKER
from pagepilot.browser.coordinator import CaptureCoordinator
from pagepilot.browser.diagnostics import (
    CONSOLE_HEADER,
    NETWORK_HEADER,
    ConsoleCollector,
    NetworkCollector,
    output_messages,
)
from pagepilot.browser.errors import CaptureError
from pagepilot.browser.models import SessionRequest


async def collect(stream):
    return [message async for message in stream]


class TestConsoleCollector:
    """Tests for ConsoleCollector."""

    def test_records_console_and_page_errors(self, page):
        collector = ConsoleCollector(page)

        page.emit("console", SimpleNamespace(type="log", text="hello"))
        page.emit("pageerror", ValueError("boom"))
        page.emit("console", SimpleNamespace(type="warning", text="careful"))

        assert collector.messages == ["[log] hello", "[pageerror] boom", "[warning] careful"]
        assert collector.get_stats() == {'total_messages': 3, 'page_errors': 1}
        assert repr(collector) == "ConsoleCollector(messages=3, errors=1)"


class TestNetworkCollector:
    """Tests for NetworkCollector."""

    def test_records_events_in_arrival_order(self, page):
        collector = NetworkCollector(page)

        page.emit("request", SimpleNamespace(method="GET", url="https://example.com/"))
        page.emit("response", SimpleNamespace(status=200, url="https://example.com/"))
        page.emit("request", SimpleNamespace(method="POST", url="https://example.com/api"))
        page.emit("requestfailed", SimpleNamespace(url="https://example.com/api", failure="net::ERR_FAILED"))
        page.emit("requestfailed", SimpleNamespace(url="https://example.com/x.js", failure=None))

        assert collector.messages == [
            "Request: GET https://example.com/",
            "Response: 200 https://example.com/",
            "Request: POST https://example.com/api",
            "Request failed: https://example.com/api (net::ERR_FAILED)",
            "Request failed: https://example.com/x.js (unknown error)",
        ]
        assert collector.get_stats()['failed_requests'] == 2


class TestOutputMessages:
    """Tests for output_messages."""

    def test_both_sections_with_content(self):
        messages = list(output_messages(["[log] a", "[log] b"], ["Request: GET /"]))

        assert messages == [
            CONSOLE_HEADER, "[log] a\n[log] b",
            NETWORK_HEADER, "Request: GET /",
        ]

    def test_empty_buffers(self):
        messages = list(output_messages([], []))

        assert messages == [
            "\n--- Console Messages ---\n", "No console messages captured.",
            "\n--- Network Activity ---\n", "No network activity captured.",
        ]

    def test_disabled_sections_are_omitted(self):
        assert list(output_messages([], [], console_enabled=False, network_enabled=False)) == []
        assert list(output_messages([], [], console_enabled=False)) == [
            NETWORK_HEADER, "No network activity captured."
        ]


class TestCaptureCoordinator:
    """Tests for CaptureCoordinator."""

    def test_attach_respects_flags(self, page):
        coordinator = CaptureCoordinator(page, SessionRequest(url="https://example.com", network=False))
        coordinator.attach()

        assert coordinator.console_collector is not None
        assert coordinator.network_collector is None
        assert set(page.handlers) == {"console", "pageerror"}

    def test_attach_warns_for_current_page(self, page, caplog):
        coordinator = CaptureCoordinator(page, SessionRequest(url="current", connect_to=9222))

        with caplog.at_level("WARNING", logger="pagepilot.browser.coordinator"):
            coordinator.attach()

        assert "--no-console" in caplog.text

    @pytest.mark.asyncio
    async def test_emit_diagnostics_only(self, page):
        coordinator = CaptureCoordinator(page, SessionRequest(url="https://example.com"))
        coordinator.attach()
        page.emit("console", SimpleNamespace(type="log", text="ready"))

        messages = await collect(coordinator.emit())

        assert messages == [
            CONSOLE_HEADER, "[log] ready",
            NETWORK_HEADER, "No network activity captured.",
        ]
        page.content.assert_not_awaited()
        page.screenshot.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_emit_html_and_screenshot(self, page, tmp_path):
        shot = tmp_path / "shots" / "page.png"
        request = SessionRequest(
            url="https://example.com",
            console=False,
            network=False,
            html=True,
            screenshot=str(shot),
        )
        coordinator = CaptureCoordinator(page, request)
        coordinator.attach()

        messages = await collect(coordinator.emit())

        assert messages == [
            HTML_START_MARKER,
            "<html><body>Hello</body></html>",
            HTML_END_MARKER,
            f"Screenshot saved to {shot}\n",
        ]
        page.screenshot.assert_awaited_once_with(path=str(shot), full_page=True)

    @pytest.mark.asyncio
    async def test_emit_screenshot_failure(self, page, tmp_path):
        page.screenshot.side_effect = RuntimeError("page crashed")
        request = SessionRequest(
            url="https://example.com", console=False, network=False,
            screenshot=str(tmp_path / "page.png"),
        )
        coordinator = CaptureCoordinator(page, request)

        with pytest.raises(CaptureError):
            await collect(coordinator.emit())

    @pytest.mark.asyncio
    async def test_screenshot_path_reported_as_given(self, page, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        request = SessionRequest(
            url="https://example.com", console=False, network=False,
            screenshot="./shots/out.png",
        )
        coordinator = CaptureCoordinator(page, request)

        messages = await collect(coordinator.emit())

        assert messages == ["Screenshot saved to ./shots/out.png\n"]
        assert (tmp_path / "shots").is_dir()
