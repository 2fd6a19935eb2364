"""Resource lifecycle for one open invocation.

PendingTimerSet tracks every delayed action scheduled on the event loop so
none outlive the operation. SessionLifecycle releases timers, the video
recording and the browser handle in a fixed order on every exit path.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, AsyncIterator, Dict

from .capture import stop_video_recording

if TYPE_CHECKING:
    from .acquirer import SessionAcquirer

logger = logging.getLogger(__name__)


class PendingTimerSet:
    """Outstanding event loop timers owned by one operation."""

    def __init__(self):
        self._pending: Dict[asyncio.TimerHandle, asyncio.Future] = {}

    async def sleep(self, milliseconds: int) -> None:
        """Suspend for the given time through a registered timer.

        The timer leaves the set when it fires or when the sleep is
        cancelled. A sleeper whose timer is cancelled by cancel_all()
        receives CancelledError.
        """
        loop = asyncio.get_running_loop()
        waiter = loop.create_future()

        def _wake() -> None:
            if not waiter.done():
                waiter.set_result(None)

        handle = loop.call_later(milliseconds / 1000, _wake)
        self._pending[handle] = waiter
        try:
            await waiter
        finally:
            handle.cancel()
            self._pending.pop(handle, None)

    def cancel_all(self) -> int:
        """Cancel every pending timer and clear the set.

        Returns:
            Number of timers that were cancelled
        """
        count = len(self._pending)
        for handle, waiter in self._pending.items():
            handle.cancel()
            if not waiter.done():
                waiter.cancel()
        self._pending.clear()
        if count:
            logger.debug(f"Cancelled {count} pending timer(s)")
        return count

    def __len__(self) -> int:
        return len(self._pending)

    def __repr__(self) -> str:
        return f"PendingTimerSet(pending={len(self._pending)})"


class SessionLifecycle:
    """Releases everything an invocation acquired, in dependency order."""

    def __init__(self, acquirer: "SessionAcquirer", timers: PendingTimerSet):
        """Initialize lifecycle manager.

        Args:
            acquirer: Acquirer holding whatever handles were obtained
            timers: Timers registered during the operation
        """
        self.acquirer = acquirer
        self.timers = timers

    async def teardown(self) -> AsyncIterator[str]:
        """Release resources, yielding user-visible cleanup messages.

        Order: pending timers, video recording (needs a live page), then the
        browser. A launched browser is closed; for a CDP connection only the
        connection is dropped and the remote browser keeps running. Each step
        is attempted even if an earlier one fails, and the driver is always
        stopped, which also ends a launched browser whose close was cut short.
        """
        self.timers.cancel_all()

        acquirer = self.acquirer

        try:
            if acquirer.video_dir and acquirer.page:
                try:
                    video_message = await stop_video_recording(acquirer.page, acquirer.video_dir)
                except Exception as e:
                    logger.warning(f"Failed to finalize video recording: {e}")
                    video_message = f"Video recording error: {e}\n"
                if video_message:
                    yield video_message

            if acquirer.browser is not None:
                try:
                    await acquirer.browser.close()
                    if acquirer.externally_owned:
                        logger.debug("Disconnected from existing Chrome instance")
                    else:
                        yield "Browser closed.\n"
                except Exception as e:
                    logger.warning(f"Error closing browser: {e}")
                acquirer.browser = None
        finally:
            await acquirer.stop()
