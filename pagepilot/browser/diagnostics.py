"""Console and network collectors for an open page.

ConsoleCollector and NetworkCollector hook Playwright page events and keep
an ordered buffer of human-readable lines. output_messages turns the buffers
into the sections printed after navigation.
"""

import logging
from typing import Dict, Iterator, List

from playwright.async_api import ConsoleMessage, Page, Request, Response

logger = logging.getLogger(__name__)

CONSOLE_HEADER = "\n--- Console Messages ---\n"
NETWORK_HEADER = "\n--- Network Activity ---\n"


class ConsoleCollector:
    """Collects console messages and uncaught page errors."""

    def __init__(self, page: Page):
        """Initialize console collector for a page.

        Args:
            page: Playwright page to observe
        """
        self.page = page
        self.messages: List[str] = []
        self._error_count = 0

        self._setup_listeners()

    def _setup_listeners(self) -> None:
        """Setup Playwright console and page error listeners."""
        self.page.on("console", self._on_console_message)
        self.page.on("pageerror", self._on_page_error)
        logger.debug("Console collector listeners setup complete")

    def _on_console_message(self, message: ConsoleMessage) -> None:
        try:
            self.messages.append(f"[{message.type}] {message.text}")
        except Exception as e:
            logger.error(f"Error processing console message: {e}")

    def _on_page_error(self, error: Exception) -> None:
        self._error_count += 1
        self.messages.append(f"[pageerror] {error}")
        logger.debug(f"Page error: {error}")

    def get_stats(self) -> Dict[str, int]:
        return {
            'total_messages': len(self.messages),
            'page_errors': self._error_count,
        }

    def __repr__(self) -> str:
        return f"ConsoleCollector(messages={len(self.messages)}, errors={self._error_count})"


class NetworkCollector:
    """Collects request, response and failure events in arrival order."""

    def __init__(self, page: Page):
        """Initialize network collector for a page.

        Args:
            page: Playwright page to observe
        """
        self.page = page
        self.messages: List[str] = []
        self._request_count = 0
        self._failed_count = 0

        self._setup_listeners()

    def _setup_listeners(self) -> None:
        """Setup Playwright event listeners for network events."""
        self.page.on("request", self._on_request)
        self.page.on("response", self._on_response)
        self.page.on("requestfailed", self._on_request_failed)
        logger.debug("Network collector listeners setup complete")

    def _on_request(self, request: Request) -> None:
        self._request_count += 1
        self.messages.append(f"Request: {request.method} {request.url}")

    def _on_response(self, response: Response) -> None:
        self.messages.append(f"Response: {response.status} {response.url}")

    def _on_request_failed(self, request: Request) -> None:
        self._failed_count += 1
        failure = request.failure or "unknown error"
        self.messages.append(f"Request failed: {request.url} ({failure})")

    def get_stats(self) -> Dict[str, int]:
        return {
            'total_requests': self._request_count,
            'failed_requests': self._failed_count,
            'total_messages': len(self.messages),
        }

    def __repr__(self) -> str:
        return (
            f"NetworkCollector(requests={self._request_count}, "
            f"failed={self._failed_count})"
        )


def output_messages(
    console_messages: List[str],
    network_messages: List[str],
    console_enabled: bool = True,
    network_enabled: bool = True,
) -> Iterator[str]:
    """Format collected diagnostics as output sections.

    Args:
        console_messages: Buffer filled by a ConsoleCollector
        network_messages: Buffer filled by a NetworkCollector
        console_enabled: Whether console capture was requested
        network_enabled: Whether network capture was requested

    Yields:
        Section headers followed by the buffered lines
    """
    if console_enabled:
        yield CONSOLE_HEADER
        if console_messages:
            yield "\n".join(console_messages)
        else:
            yield "No console messages captured."

    if network_enabled:
        yield NETWORK_HEADER
        if network_messages:
            yield "\n".join(network_messages)
        else:
            yield "No network activity captured."
