"""Browser session control for the open command.

Main Components:
- Wait parsing: duration and wait-directive parsers (wait.py)
- Session Acquirer: connect over CDP or launch Chromium (acquirer.py)
- Navigation Sequencer: goto / reload / current page and waits (navigation.py)
- Capture Coordinator: console/network collectors, HTML, screenshots (coordinator.py)
- Session Lifecycle: pending timers and ordered teardown (lifecycle.py)
- Open Command: the whole operation as an async generator (command.py)

Usage:
    from pagepilot.browser import OpenCommand, SessionRequest

    command = OpenCommand()
    async for message in command.execute(SessionRequest(url="https://example.com")):
        print(message)
"""

__all__ = [
    # Data models
    "SessionRequest",
    "AcquiredSession",
    "AcquisitionMode",
    "NavigationMode",
    "WaitDirective",
    "WaitKind",

    # Main components
    "OpenCommand",
    "SessionAcquirer",
    "NavigationSequencer",
    "CaptureCoordinator",
    "PendingTimerSet",
    "SessionLifecycle",

    # Parsers
    "parse_time_duration",
    "parse_wait_directive",
    "parse_viewport",
    "resolve_timeout",

    # Errors
    "BrowserCommandError",
    "PreflightError",
    "RequestValidationError",
    "OptionConflictError",
    "InvalidViewportFormat",
    "InvalidWaitFormat",
    "AcquisitionError",
    "NavigationError",
    "QuiescenceTimeout",
    "WaitTimeout",
    "CaptureError",
]

from .models import (
    SessionRequest,
    AcquiredSession,
    AcquisitionMode,
    NavigationMode,
    parse_viewport,
    resolve_timeout,
)

from .wait import (
    WaitDirective,
    WaitKind,
    parse_time_duration,
    parse_wait_directive,
)

from .errors import (
    BrowserCommandError,
    PreflightError,
    RequestValidationError,
    OptionConflictError,
    InvalidViewportFormat,
    InvalidWaitFormat,
    AcquisitionError,
    NavigationError,
    QuiescenceTimeout,
    WaitTimeout,
    CaptureError,
)

from .acquirer import SessionAcquirer
from .navigation import NavigationSequencer
from .coordinator import CaptureCoordinator
from .lifecycle import PendingTimerSet, SessionLifecycle
from .command import OpenCommand
