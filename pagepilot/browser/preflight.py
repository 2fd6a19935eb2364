"""Availability checks for Playwright and its Chromium build."""

import logging
from pathlib import Path

from playwright.async_api import Playwright, async_playwright

from .errors import PreflightError

logger = logging.getLogger(__name__)


async def start_playwright() -> Playwright:
    """Start the Playwright driver.

    Raises:
        PreflightError: If the driver cannot be started
    """
    try:
        playwright = await async_playwright().start()
    except Exception as e:
        raise PreflightError(f"Playwright is not available: {e}")

    logger.debug("Playwright driver started")
    return playwright


def ensure_browser_installed(playwright: Playwright) -> None:
    """Check that Playwright's Chromium binary is installed.

    Raises:
        PreflightError: If the executable is missing
    """
    executable = playwright.chromium.executable_path
    if not executable or not Path(executable).exists():
        raise PreflightError(
            "Playwright Chromium browser is not installed. "
            "Install it with: playwright install chromium"
        )
    logger.debug(f"Chromium executable: {executable}")
