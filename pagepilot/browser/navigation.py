"""Navigation and wait sequencing for an acquired page."""

import logging
from typing import AsyncIterator, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .errors import NavigationError, QuiescenceTimeout, WaitTimeout
from .lifecycle import PendingTimerSet
from .models import NavigationMode
from .wait import WaitDirective, WaitKind

logger = logging.getLogger(__name__)


class NavigationSequencer:
    """Moves the page to its target location and applies the wait directive."""

    def __init__(self, page: Page, timeout_ms: int, timers: PendingTimerSet):
        """Initialize sequencer.

        Args:
            page: Acquired page
            timeout_ms: Effective timeout for each navigation and wait step
            timers: Timer set that time-based waits register with
        """
        self.page = page
        self.timeout_ms = timeout_ms
        self.timers = timers

    async def navigate(self, mode: NavigationMode, url: Optional[str] = None) -> AsyncIterator[str]:
        """Perform the navigation for the given mode, yielding progress.

        The initial load must succeed; network idle afterwards is best effort.

        Raises:
            NavigationError: If the load or reload does not complete
        """
        if mode == NavigationMode.CURRENT:
            yield f"Using current page at {self.page.url}..."
            return

        if mode == NavigationMode.RELOAD_CURRENT:
            current_url = self.page.url
            yield f"Reloading current page at {current_url}..."
            try:
                await self.page.reload(timeout=self.timeout_ms)
            except PlaywrightError as e:
                raise NavigationError(f"Failed to reload {current_url}: {e}", url=current_url)
            return

        yield f"Navigating to {url}..."
        try:
            await self.page.goto(url, timeout=self.timeout_ms, wait_until="load")
        except PlaywrightError as e:
            raise NavigationError(f"Failed to load {url}: {e}", url=url)

        yield "Page loaded, waiting for networkidle..."
        try:
            await self._wait_for_quiescence()
        except QuiescenceTimeout as e:
            logger.debug(f"Error waiting for networkidle: {e}")
            yield "Timed out waiting for networkidle, continuing with page as it is"

        logger.debug(f"Navigated to {url}")

    async def _wait_for_quiescence(self) -> None:
        try:
            await self.page.wait_for_load_state("networkidle", timeout=self.timeout_ms)
        except PlaywrightError as e:
            logger.debug(f"networkidle wait failed: {e}")
            raise QuiescenceTimeout(self.timeout_ms)

    async def wait(self, directive: WaitDirective) -> AsyncIterator[str]:
        """Apply a wait directive, yielding a progress message first.

        Raises:
            WaitTimeout: If the selector does not become visible in time
        """
        yield f"Waiting for {directive.describe()}..."

        if directive.kind == WaitKind.TIME:
            await self.timers.sleep(directive.milliseconds)
            return

        try:
            await self.page.wait_for_selector(
                directive.selector,
                state="visible",
                timeout=self.timeout_ms
            )
        except PlaywrightError as e:
            raise WaitTimeout(
                f"Selector \"{directive.selector}\" not visible: {e}",
                selector=directive.selector
            )
