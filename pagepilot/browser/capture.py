"""Page artifact capture: HTML, screenshots and video recordings."""

import logging
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from playwright.async_api import Page

from .errors import CaptureError

logger = logging.getLogger(__name__)

VIDEO_SIZE = {"width": 1280, "height": 720}

HTML_START_MARKER = "\n--- Page HTML Content ---\n\n"
HTML_END_MARKER = "\n--- End of HTML Content ---\n"


def setup_video_recording(video: Optional[Union[bool, str]]) -> Optional[Path]:
    """Prepare the directory a new context will record video into.

    Args:
        video: False/None for no recording, True for a temporary directory,
            or a directory path

    Returns:
        Created video directory, or None when recording is off
    """
    if not video:
        return None

    if isinstance(video, str):
        video_dir = Path(video).expanduser()
    else:
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        video_dir = Path(tempfile.gettempdir()) / "pagepilot-videos" / timestamp

    video_dir.mkdir(parents=True, exist_ok=True)
    logger.debug(f"Video recording directory: {video_dir}")
    return video_dir


async def stop_video_recording(page: Page, video_dir: Path) -> Optional[str]:
    """Finalize the page's recording.

    Playwright only writes the video file once the page is closed, so the
    page is closed here and must not be used afterwards.

    Args:
        page: Page whose recording should be finalized
        video_dir: Directory the context records into

    Returns:
        Confirmation message, or None if the page was not recording
    """
    video = page.video
    if not video:
        logger.debug("No active video recording on page")
        return None

    try:
        await page.close()
        video_path = await video.path()
    except Exception as e:
        raise CaptureError(f"Failed to save video recording: {e}", artifact=str(video_dir))

    logger.debug(f"Video recording saved: {video_path}")
    return f"Video saved to {video_path}\n"


async def capture_screenshot(page: Page, path: Union[str, Path]) -> Path:
    """Take a full-page screenshot.

    Args:
        page: Page to capture
        path: Output file path; parent directories are created

    Returns:
        Path the screenshot was written to

    Raises:
        CaptureError: If the screenshot fails
    """
    screenshot_path = Path(path).expanduser()
    try:
        screenshot_path.parent.mkdir(parents=True, exist_ok=True)
        await page.screenshot(path=str(screenshot_path), full_page=True)
    except Exception as e:
        raise CaptureError(f"Failed to take screenshot: {e}", artifact=str(screenshot_path))

    logger.debug(f"Screenshot saved: {screenshot_path}")
    return screenshot_path


async def capture_html(page: Page) -> str:
    """Return the full page markup."""
    try:
        return await page.content()
    except Exception as e:
        raise CaptureError(f"Failed to read page content: {e}", artifact="html")
