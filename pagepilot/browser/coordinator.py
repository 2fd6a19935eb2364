"""Coordinates diagnostics collection and artifact capture around navigation."""

import logging
from typing import AsyncIterator, List, Optional

from playwright.async_api import Page

from .capture import HTML_END_MARKER, HTML_START_MARKER, capture_html, capture_screenshot
from .diagnostics import ConsoleCollector, NetworkCollector, output_messages
from .models import AcquisitionMode, NavigationMode, SessionRequest

logger = logging.getLogger(__name__)


class CaptureCoordinator:
    """Attaches collectors before navigation and emits results afterwards."""

    def __init__(self, page: Page, request: SessionRequest):
        """Initialize coordinator.

        Args:
            page: Acquired page
            request: Request carrying the capture flags
        """
        self.page = page
        self.request = request
        self.console_collector: Optional[ConsoleCollector] = None
        self.network_collector: Optional[NetworkCollector] = None

    def attach(self) -> None:
        """Attach the enabled collectors to the page."""
        if (self.request.acquisition_mode == AcquisitionMode.CONNECT
                and self.request.navigation_mode == NavigationMode.CURRENT
                and (self.request.console or self.request.network)):
            logger.warning(
                "Setting up console and network monitoring on an existing page. "
                "In some cases this can cause Chrome to crash. "
                "Use --no-console and --no-network to disable."
            )

        if self.request.console:
            self.console_collector = ConsoleCollector(self.page)
        if self.request.network:
            self.network_collector = NetworkCollector(self.page)

    @property
    def console_messages(self) -> List[str]:
        return self.console_collector.messages if self.console_collector else []

    @property
    def network_messages(self) -> List[str]:
        return self.network_collector.messages if self.network_collector else []

    async def emit(self) -> AsyncIterator[str]:
        """Yield diagnostics, then HTML and screenshot results if requested."""
        logger.debug(f"Console messages: {len(self.console_messages)}")
        logger.debug(f"Network messages: {len(self.network_messages)}")

        for message in output_messages(
            self.console_messages,
            self.network_messages,
            console_enabled=self.request.console,
            network_enabled=self.request.network,
        ):
            yield message

        if self.request.html:
            html_content = await capture_html(self.page)
            yield HTML_START_MARKER
            yield html_content
            yield HTML_END_MARKER

        if self.request.screenshot:
            await capture_screenshot(self.page, self.request.screenshot)
            yield f"Screenshot saved to {self.request.screenshot}\n"
