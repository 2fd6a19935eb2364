"""Data models for a single browser open invocation.

SessionRequest is the validated input built once by the CLI and never
mutated. AcquiredSession holds the live Playwright handles for the duration
of the operation.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

from playwright.async_api import Browser, BrowserContext, Page
from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidViewportFormat, OptionConflictError

DEFAULT_TIMEOUT_MS = 30000

CURRENT_PAGE = "current"
RELOAD_CURRENT_PAGE = "reload-current"


class AcquisitionMode(str, Enum):
    """How a controllable page is obtained."""
    CONNECT = "connect"
    LAUNCH = "launch"


class NavigationMode(str, Enum):
    """What happens to the page location once a page is acquired."""
    CURRENT = "current"
    RELOAD_CURRENT = "reload-current"
    GOTO = "goto"


class SessionRequest(BaseModel):
    """Options for one browser open invocation."""

    model_config = ConfigDict(frozen=True)

    url: Optional[str] = Field(
        default=None,
        description="Address to open, or 'current' / 'reload-current' when connecting"
    )
    connect_to: Optional[int] = Field(
        default=None, gt=0, lt=65536,
        description="Local CDP port of a running Chrome instance"
    )
    headless: Optional[bool] = Field(default=None, description="Override headless mode")
    viewport: Optional[str] = Field(default=None, description="Viewport as WIDTHxHEIGHT")
    timeout: Optional[int] = Field(default=None, gt=0, description="Per-step timeout in ms")
    wait: Optional[str] = Field(default=None, description="Raw wait directive")
    html: bool = Field(default=False, description="Emit the page HTML")
    console: bool = Field(default=True, description="Capture console messages")
    network: bool = Field(default=True, description="Capture network activity")
    screenshot: Optional[str] = Field(default=None, description="Screenshot output path")
    video: Optional[Union[bool, str]] = Field(
        default=None,
        description="Record a video; a string names the output directory"
    )
    debug: bool = Field(default=False, description="Verbose diagnostics")

    @property
    def acquisition_mode(self) -> AcquisitionMode:
        if self.connect_to:
            return AcquisitionMode.CONNECT
        return AcquisitionMode.LAUNCH

    @property
    def navigation_mode(self) -> NavigationMode:
        if self.url == CURRENT_PAGE:
            return NavigationMode.CURRENT
        if self.url == RELOAD_CURRENT_PAGE:
            return NavigationMode.RELOAD_CURRENT
        return NavigationMode.GOTO

    @property
    def wants_video(self) -> bool:
        return bool(self.video)

    def check_compatible(self) -> None:
        """Reject option combinations that cannot be honoured.

        Raises:
            OptionConflictError: If video is requested while connecting, or a
                current-page sentinel is used without a connection
        """
        if self.acquisition_mode == AcquisitionMode.CONNECT and self.wants_video:
            raise OptionConflictError(
                "Cannot use --video when connecting to an existing Chrome instance "
                "(--connect-to). Video recording is only available when launching "
                "a new browser instance.",
                options=["connect_to", "video"]
            )

        if (self.navigation_mode != NavigationMode.GOTO
                and self.acquisition_mode != AcquisitionMode.CONNECT):
            raise OptionConflictError(
                f"'{self.url}' can only be used together with --connect-to",
                options=["url", "connect_to"]
            )


@dataclass
class AcquiredSession:
    """Live browser resources obtained for one invocation."""

    browser: Browser
    context: BrowserContext
    page: Page
    externally_owned: bool = False
    video_dir: Optional[Path] = None


def parse_viewport(viewport: str) -> Dict[str, int]:
    """Parse a WIDTHxHEIGHT string.

    Args:
        viewport: Viewport string such as ``1280x720``

    Returns:
        Dict with 'width' and 'height'

    Raises:
        InvalidViewportFormat: If the string is malformed
    """
    parts = viewport.lower().split("x")
    if len(parts) != 2:
        raise InvalidViewportFormat(viewport)

    try:
        width, height = (int(part) for part in parts)
    except ValueError:
        raise InvalidViewportFormat(viewport)

    if width <= 0 or height <= 0:
        raise InvalidViewportFormat(viewport)

    return {"width": width, "height": height}


def resolve_timeout(request_timeout: Optional[int], config_timeout: Optional[int]) -> int:
    """Pick the effective per-step timeout: request, then config, then 30s."""
    if request_timeout:
        return request_timeout
    if config_timeout:
        return config_timeout
    return DEFAULT_TIMEOUT_MS
