#!/usr/bin/env python3
"""Main CLI entry point for pagepilot using Typer."""

import asyncio
import logging
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from .. import __version__
from ..browser import OpenCommand, SessionRequest
from .config import load_configuration, print_configuration


class ExitCode(IntEnum):
    """CLI exit codes."""
    SUCCESS = 0
    CONFIG_ERROR = 3


app = typer.Typer(
    name="pagepilot",
    help="pagepilot - open a page in Chromium and report what happened",
    add_completion=False,
    rich_markup_mode="rich"
)


@app.callback()
def main():
    """
    pagepilot - open a page in Chromium and report what happened.

    Launches a new browser or attaches to a running Chrome, then prints
    console output, network activity and optional captures.
    """
    pass


@app.command(name="version")
def show_version():
    """Show version information."""
    typer.echo(f"pagepilot v{__version__}")


@app.command(name="open")
def open_page(
    url: Annotated[
        Optional[str],
        typer.Argument(help="URL to open, or 'current' / 'reload-current' with --connect-to")
    ] = None,

    # Browser acquisition
    connect_to: Annotated[
        Optional[int],
        typer.Option("--connect-to", help="Attach to Chrome running with --remote-debugging-port")
    ] = None,

    headless: Annotated[
        Optional[bool],
        typer.Option("--headless/--headed", help="Run a launched browser headless or with GUI")
    ] = None,

    viewport: Annotated[
        Optional[str],
        typer.Option("--viewport", help="Viewport size as WIDTHxHEIGHT, e.g. 1280x720")
    ] = None,

    # Navigation
    timeout: Annotated[
        Optional[int],
        typer.Option("--timeout", help="Timeout for each navigation/wait step in milliseconds")
    ] = None,

    wait: Annotated[
        Optional[str],
        typer.Option("--wait", help="Wait after load: '2s', 'time:500ms', '#id', 'css:.cls', 'selector:...'")
    ] = None,

    # Diagnostics and captures
    html: Annotated[
        bool,
        typer.Option("--html/--no-html", help="Print the page HTML")
    ] = False,

    console: Annotated[
        bool,
        typer.Option("--console/--no-console", help="Capture console messages")
    ] = True,

    network: Annotated[
        bool,
        typer.Option("--network/--no-network", help="Capture network activity")
    ] = True,

    screenshot: Annotated[
        Optional[str],
        typer.Option("--screenshot", help="Save a full-page screenshot to this path")
    ] = None,

    video: Annotated[
        bool,
        typer.Option("--video", help="Record a video of the session (launch only)")
    ] = False,

    video_dir: Annotated[
        Optional[Path],
        typer.Option("--video-dir", help="Directory for the video recording (implies --video)")
    ] = None,

    # Configuration and debugging
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to configuration file")
    ] = None,

    debug: Annotated[
        bool,
        typer.Option("--debug", help="Show debug logging")
    ] = False,

    print_config: Annotated[
        bool,
        typer.Option("--print-config", help="Print effective configuration and exit")
    ] = False,
):
    """
    Open a URL in a browser and report console, network and captures.

    Examples:

        # Open a page and wait two seconds
        pagepilot open https://example.com --wait 2s --screenshot /tmp/out.png

        # Inspect the page already open in Chrome (started with --remote-debugging-port=9222)
        pagepilot open current --connect-to 9222

        # Reload it and dump the HTML
        pagepilot open reload-current --connect-to 9222 --html
    """
    try:
        config = load_configuration(
            config_file=config_file,
            cli_overrides=_browser_overrides(headless, timeout),
            search_paths=[Path.cwd()]
        )
    except Exception as e:
        typer.echo(f"❌ Configuration error: {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    if print_config:
        typer.echo(print_configuration(config))
        raise typer.Exit(code=ExitCode.SUCCESS.value)

    logging.basicConfig(
        level=logging.DEBUG if debug or config.output.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    if video_dir is not None:
        video_option = str(video_dir)
    else:
        video_option = True if video else None

    try:
        request = SessionRequest(
            url=url,
            connect_to=connect_to,
            headless=headless,
            viewport=viewport,
            timeout=timeout,
            wait=wait,
            html=html,
            console=console,
            network=network,
            screenshot=screenshot,
            video=video_option,
            debug=debug,
        )
    except ValidationError as e:
        typer.echo(f"❌ Invalid options: {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    command = OpenCommand(
        default_headless=config.browser.headless,
        default_viewport=config.browser.default_viewport,
        default_timeout=config.browser.timeout,
    )
    asyncio.run(_stream_messages(command, request))


def _browser_overrides(headless: Optional[bool], timeout: Optional[int]) -> Dict[str, Any]:
    """Map browser flags onto config keys so --print-config shows effective values."""
    overrides: Dict[str, Any] = {}
    if headless is not None:
        overrides["headless"] = headless
    if timeout is not None:
        overrides["timeout"] = timeout
    return {"browser": overrides} if overrides else {}


async def _stream_messages(command: OpenCommand, request: SessionRequest) -> None:
    async for message in command.execute(request):
        typer.echo(message)


if __name__ == "__main__":
    app()
