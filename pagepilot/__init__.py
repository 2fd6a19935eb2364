"""pagepilot - open a page in Chromium and report what happened.

Launches a new Playwright-controlled Chromium or attaches to a running
Chrome over CDP, navigates, waits, and reports console output, network
activity, HTML, screenshots and video.
"""

__version__ = "1.0.0"
