"""Obtains a controllable page by connecting to or launching Chromium.

Connecting attaches over CDP to a browser the user already runs; its
contexts and pages are reused and never torn down. Launching starts a
browser this process owns, with exactly one context and one page.
"""

import logging
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright

from .capture import VIDEO_SIZE, setup_video_recording
from .errors import AcquisitionError, InvalidViewportFormat
from .models import AcquiredSession, AcquisitionMode, SessionRequest, parse_viewport

logger = logging.getLogger(__name__)

ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8"

INTERNAL_URL_SCHEME = "chrome://"


class SessionAcquirer:
    """Acquires browser, context and page for a SessionRequest."""

    def __init__(
        self,
        playwright: Playwright,
        default_headless: Optional[bool] = None,
        default_viewport: Optional[str] = None,
    ):
        """Initialize acquirer.

        Args:
            playwright: Started Playwright driver
            default_headless: Configured headless default for launched browsers
            default_viewport: Configured WIDTHxHEIGHT default for launched browsers
        """
        self.playwright: Optional[Playwright] = playwright
        self.default_headless = default_headless
        self.default_viewport = default_viewport

        # Handles are recorded as soon as they exist so a failure part-way
        # through acquisition still leaves them available for cleanup
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self.video_dir: Optional[Path] = None
        self.externally_owned = False
        self.session: Optional[AcquiredSession] = None

    async def acquire(self, request: SessionRequest) -> AsyncIterator[str]:
        """Connect or launch according to the request, yielding progress.

        On success ``self.session`` holds the AcquiredSession.

        Raises:
            AcquisitionError: If connecting or launching fails
        """
        mode = request.acquisition_mode
        try:
            if mode == AcquisitionMode.CONNECT:
                async for message in self._connect(request):
                    yield message
            else:
                async for message in self._launch(request):
                    yield message
        except AcquisitionError:
            raise
        except Exception as e:
            action = "connect to Chrome" if mode == AcquisitionMode.CONNECT else "launch browser"
            logger.error(f"Failed to {action}: {e}")
            raise AcquisitionError(f"Failed to {action}: {e}", cause=e) from e

        self.session = AcquiredSession(
            browser=self.browser,
            context=self.context,
            page=self.page,
            externally_owned=self.externally_owned,
            video_dir=self.video_dir,
        )

    def _context_options(self) -> Dict[str, Any]:
        return {
            'service_workers': 'allow',
            'extra_http_headers': {'Accept': ACCEPT_HEADER},
        }

    async def _connect(self, request: SessionRequest) -> AsyncIterator[str]:
        port = request.connect_to
        yield f"Connecting to existing Chrome instance on port {port}..."

        self.externally_owned = True
        self.browser = await self.playwright.chromium.connect_over_cdp(f"http://localhost:{port}")
        logger.debug(f"Connected to existing Chrome instance on port {port}")

        if self.browser.contexts:
            self.context = self.browser.contexts[0]
        else:
            # Never record video on a context we do not own
            self.context = await self.browser.new_context(**self._context_options())

        pages = self.context.pages
        logger.debug(f"Pages: {len(pages)} {[p.url for p in pages]}")

        existing = next(
            (p for p in pages if not p.url.startswith(INTERNAL_URL_SCHEME)),
            None
        )
        if existing is not None:
            self.page = existing
            yield "Using existing page..."
        else:
            self.page = await self.context.new_page()

        if request.viewport:
            try:
                viewport = parse_viewport(request.viewport)
            except InvalidViewportFormat as e:
                yield e.message
            else:
                logger.debug(f"Setting viewport to {request.viewport}")
                await self.page.set_viewport_size(viewport)

    async def _launch(self, request: SessionRequest) -> AsyncIterator[str]:
        yield "Launching browser..."

        if request.headless is not None:
            headless = request.headless
        elif self.default_headless is not None:
            headless = self.default_headless
        else:
            headless = True

        self.browser = await self.playwright.chromium.launch(headless=headless)
        logger.debug(f"Browser launched (headless={headless})")

        context_options = self._context_options()
        self.video_dir = setup_video_recording(request.video)
        if self.video_dir:
            context_options['record_video_dir'] = str(self.video_dir)
            context_options['record_video_size'] = VIDEO_SIZE

        self.context = await self.browser.new_context(**context_options)
        self.page = await self.context.new_page()

        if request.viewport:
            try:
                viewport = parse_viewport(request.viewport)
            except InvalidViewportFormat as e:
                yield e.message
            else:
                await self.page.set_viewport_size(viewport)
        elif self.default_viewport:
            try:
                viewport = parse_viewport(self.default_viewport)
            except InvalidViewportFormat:
                logger.warning(f"Ignoring invalid default viewport: {self.default_viewport}")
            else:
                await self.page.set_viewport_size(viewport)

    async def stop(self) -> None:
        """Stop the Playwright driver."""
        if self.playwright is None:
            return
        try:
            await self.playwright.stop()
        except Exception as e:
            logger.warning(f"Error stopping Playwright: {e}")
        self.playwright = None

    def __repr__(self) -> str:
        return (
            f"SessionAcquirer(browser={'yes' if self.browser else 'no'}, "
            f"externally_owned={self.externally_owned}, "
            f"video={'yes' if self.video_dir else 'no'})"
        )
