"""The browser open command.

OpenCommand.execute is an async generator: it acquires a page, navigates,
waits, emits diagnostics and captures, and always tears down what it
acquired. Every error raised inside the operation is turned into a message
on the output stream.
"""

import asyncio
import logging
from typing import AsyncIterator, Optional

from .acquirer import SessionAcquirer
from .coordinator import CaptureCoordinator
from .errors import (
    InvalidWaitFormat,
    NavigationError,
    PreflightError,
    RequestValidationError,
    WaitTimeout,
)
from .lifecycle import PendingTimerSet, SessionLifecycle
from .models import AcquisitionMode, SessionRequest, resolve_timeout
from .navigation import NavigationSequencer
from .preflight import ensure_browser_installed, start_playwright
from .wait import parse_wait_directive

logger = logging.getLogger(__name__)

USAGE = "Please provide a URL to open. Usage: pagepilot open <url> [options]"


class OpenCommand:
    """Opens a page in a launched or connected browser and reports on it."""

    def __init__(
        self,
        default_headless: Optional[bool] = None,
        default_viewport: Optional[str] = None,
        default_timeout: Optional[int] = None,
    ):
        """Initialize command with configuration defaults.

        Args:
            default_headless: Configured headless mode for launched browsers
            default_viewport: Configured WIDTHxHEIGHT for launched browsers
            default_timeout: Configured per-step timeout in milliseconds
        """
        self.default_headless = default_headless
        self.default_viewport = default_viewport
        self.default_timeout = default_timeout

    async def execute(self, request: SessionRequest) -> AsyncIterator[str]:
        """Run the open operation, yielding progress and results in order."""
        try:
            if not request.url:
                yield USAGE
                return

            request.check_compatible()

            playwright = await start_playwright()
            if request.acquisition_mode == AcquisitionMode.LAUNCH:
                try:
                    ensure_browser_installed(playwright)
                except PreflightError:
                    await playwright.stop()
                    raise

            acquirer = SessionAcquirer(
                playwright,
                default_headless=self.default_headless,
                default_viewport=self.default_viewport,
            )
            run = self._run(request, acquirer)
            try:
                async for message in run:
                    yield message
            finally:
                await run.aclose()

        except PreflightError as e:
            yield f"Playwright check error: {e}"
        except RequestValidationError as e:
            yield f"Invalid options: {e}"

    async def _run(self, request: SessionRequest, acquirer: SessionAcquirer) -> AsyncIterator[str]:
        timers = PendingTimerSet()
        lifecycle = SessionLifecycle(acquirer, timers)
        abandoned = False

        try:
            async for message in acquirer.acquire(request):
                yield message
            page = acquirer.session.page

            coordinator = CaptureCoordinator(page, request)
            coordinator.attach()

            sequencer = NavigationSequencer(
                page,
                resolve_timeout(request.timeout, self.default_timeout),
                timers
            )
            navigated = True
            try:
                async for message in sequencer.navigate(request.navigation_mode, request.url):
                    yield message
            except NavigationError as e:
                # Skip waiting, but still report what was collected
                navigated = False
                yield f"Navigation error: {e}"

            if navigated and request.wait:
                try:
                    directive = parse_wait_directive(request.wait)
                    async for message in sequencer.wait(directive):
                        yield message
                except (InvalidWaitFormat, WaitTimeout) as e:
                    yield f"Wait error: {e}\n"

            timers.cancel_all()

            async for message in coordinator.emit():
                yield message

        except (GeneratorExit, asyncio.CancelledError):
            # The consumer went away; clean up without emitting anything
            abandoned = True
            raise
        except Exception as e:
            logger.debug(f"Browser command failed: {e!r}")
            try:
                yield f"Browser command error: {e}"
            except GeneratorExit:
                abandoned = True
                raise
        finally:
            closed_during_teardown = False
            async for message in lifecycle.teardown():
                if abandoned:
                    continue
                try:
                    yield message
                except GeneratorExit:
                    # Keep releasing resources; nothing more is emitted
                    abandoned = True
                    closed_during_teardown = True
            if closed_during_teardown:
                raise GeneratorExit
