"""Shared test fixtures and configuration for pagepilot tests."""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))


def make_page(url: str = "about:blank") -> MagicMock:
    """Build a mock Playwright page that records event handlers.

    ``page.emit(event, payload)`` invokes every handler registered with
    ``page.on(event, handler)``.
    """
    page = MagicMock()
    page.url = url
    page.video = None

    handlers = {}

    def on(event, handler):
        handlers.setdefault(event, []).append(handler)

    def emit(event, payload):
        for handler in handlers.get(event, []):
            handler(payload)

    page.on.side_effect = on
    page.emit = emit
    page.handlers = handlers

    page.goto = AsyncMock()
    page.reload = AsyncMock()
    page.wait_for_load_state = AsyncMock()
    page.wait_for_selector = AsyncMock()
    page.set_viewport_size = AsyncMock()
    page.screenshot = AsyncMock()
    page.close = AsyncMock()
    page.content = AsyncMock(return_value="<html><body>Hello</body></html>")
    return page


def make_playwright(page=None, contexts=None):
    """Build a mock Playwright driver whose launch/connect return one browser."""
    page = page or make_page()

    context = MagicMock()
    context.pages = []
    context.new_page = AsyncMock(return_value=page)

    browser = MagicMock()
    browser.contexts = contexts if contexts is not None else []
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)
    playwright.chromium.connect_over_cdp = AsyncMock(return_value=browser)
    playwright.chromium.executable_path = sys.executable
    playwright.stop = AsyncMock()

    return SimpleNamespace(playwright=playwright, browser=browser, context=context, page=page)


@pytest.fixture
def page():
    """Mock page with no history."""
    return make_page()


@pytest.fixture
def fake_playwright():
    """Mock Playwright driver with a browser, context and page."""
    return make_playwright()


@pytest.fixture
def page_factory():
    """Factory for mock pages, see make_page."""
    return make_page


@pytest.fixture
def playwright_factory():
    """Factory for mock Playwright drivers, see make_playwright."""
    return make_playwright
