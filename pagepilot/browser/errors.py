"""Exceptions raised while opening and driving a browser session.

Every error carries a message, a short machine-readable error code and an
optional details dict. The open command converts them into progress
messages; none of them escape the command's output stream.
"""

from typing import Optional


class BrowserCommandError(Exception):
    """Base error for the browser open command."""

    def __init__(
        self,
        message: str = "Browser command failed",
        error_code: str = "browser_command_failed",
        details: Optional[dict] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class PreflightError(BrowserCommandError):
    """Raised when Playwright or its browser binaries are unavailable."""

    def __init__(self, message: str = "Playwright is not available"):
        super().__init__(message=message, error_code="preflight_failed")


class RequestValidationError(BrowserCommandError):
    """Raised when request options are malformed or contradict each other."""

    def __init__(
        self,
        message: str = "Invalid request options",
        error_code: str = "invalid_request",
        details: Optional[dict] = None
    ):
        super().__init__(message=message, error_code=error_code, details=details)


class OptionConflictError(RequestValidationError):
    """Raised when mutually exclusive options are requested together."""

    def __init__(self, message: str, options: Optional[list] = None):
        super().__init__(
            message=message,
            error_code="option_conflict",
            details={"options": options} if options else {}
        )


class InvalidViewportFormat(RequestValidationError):
    """Raised when a viewport string is not WIDTHxHEIGHT."""

    def __init__(self, viewport: str):
        super().__init__(
            message=(
                f"Invalid viewport format: {viewport}. "
                f"Expected format: <width>x<height> (e.g. 1280x720)"
            ),
            error_code="invalid_viewport",
            details={"viewport": viewport}
        )


class InvalidWaitFormat(RequestValidationError):
    """Raised when an explicit ``time:`` wait carries a bad duration."""

    def __init__(self, wait: str):
        super().__init__(
            message=(
                f"Invalid time duration format: {wait}. "
                f"Expected format: time:Xs, time:Xms, or time:Xm"
            ),
            error_code="invalid_wait",
            details={"wait": wait}
        )


class AcquisitionError(BrowserCommandError):
    """Raised when connecting to or launching a browser fails."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(
            message=message,
            error_code="acquisition_failed",
            details={"cause": repr(cause)} if cause else {}
        )


class NavigationError(BrowserCommandError):
    """Raised when the initial load or a reload does not complete."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(
            message=message,
            error_code="navigation_failed",
            details={"url": url} if url else {}
        )


class QuiescenceTimeout(BrowserCommandError):
    """Raised when the network does not go idle within the timeout."""

    def __init__(self, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__(
            message=f"Network did not go idle within {timeout_ms}ms",
            error_code="quiescence_timeout",
            details={"timeout_ms": timeout_ms}
        )


class WaitTimeout(BrowserCommandError):
    """Raised when a wait directive cannot be satisfied."""

    def __init__(self, message: str, selector: Optional[str] = None):
        self.selector = selector
        super().__init__(
            message=message,
            error_code="wait_failed",
            details={"selector": selector} if selector else {}
        )


class CaptureError(BrowserCommandError):
    """Raised when HTML, screenshot or video capture fails."""

    def __init__(self, message: str, artifact: Optional[str] = None):
        self.artifact = artifact
        super().__init__(
            message=message,
            error_code="capture_failed",
            details={"artifact": artifact} if artifact else {}
        )
