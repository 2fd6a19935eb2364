"""Unit tests for the Typer command line interface."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from pagepilot import __version__
from pagepilot.cli.main import ExitCode, app


class FakeCommand:
    """Stands in for OpenCommand and records what it was given."""

    instances = []

    def __init__(self, **defaults):
        self.defaults = defaults
        self.request = None
        FakeCommand.instances.append(self)

    async def execute(self, request):
        self.request = request
        yield "Launching browser..."
        yield "Browser closed.\n"


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("HEADLESS", "DEFAULT_VIEWPORT", "TIMEOUT", "VERBOSE"):
        monkeypatch.delenv(f"PAGEPILOT_{name}", raising=False)
    FakeCommand.instances = []
    return CliRunner()


class TestCLI:
    """Tests for CLI commands."""

    def test_version(self, runner):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert f"pagepilot v{__version__}" in result.output

    def test_open_streams_messages(self, runner):
        with patch('pagepilot.cli.main.OpenCommand', FakeCommand):
            result = runner.invoke(app, [
                "open", "https://example.com",
                "--wait", "2s",
                "--viewport", "800x600",
                "--no-network",
                "--html",
            ])

        assert result.exit_code == 0, result.output
        assert "Launching browser..." in result.output
        assert "Browser closed." in result.output

        request = FakeCommand.instances[0].request
        assert request.url == "https://example.com"
        assert request.wait == "2s"
        assert request.viewport == "800x600"
        assert request.network is False
        assert request.console is True
        assert request.html is True
        assert request.video is None

    def test_video_dir_implies_video(self, runner, tmp_path):
        with patch('pagepilot.cli.main.OpenCommand', FakeCommand):
            result = runner.invoke(app, [
                "open", "https://example.com", "--video-dir", str(tmp_path / "videos")
            ])

        assert result.exit_code == 0, result.output
        assert FakeCommand.instances[0].request.video == str(tmp_path / "videos")

    def test_video_flag(self, runner):
        with patch('pagepilot.cli.main.OpenCommand', FakeCommand):
            runner.invoke(app, ["open", "https://example.com", "--video"])

        assert FakeCommand.instances[0].request.video is True

    def test_connect_options(self, runner):
        with patch('pagepilot.cli.main.OpenCommand', FakeCommand):
            result = runner.invoke(app, ["open", "current", "--connect-to", "9222", "--headed"])

        assert result.exit_code == 0, result.output
        request = FakeCommand.instances[0].request
        assert request.connect_to == 9222
        assert request.headless is False

    def test_config_defaults_passed_to_command(self, runner, tmp_path):
        (tmp_path / "pagepilot.yaml").write_text(
            "browser:\n  headless: false\n  defaultViewport: 1024x768\n  timeout: 10000\n"
        )

        with patch('pagepilot.cli.main.OpenCommand', FakeCommand):
            result = runner.invoke(app, ["open", "https://example.com"])

        assert result.exit_code == 0, result.output
        assert FakeCommand.instances[0].defaults == {
            'default_headless': False,
            'default_viewport': "1024x768",
            'default_timeout': 10000,
        }

    def test_print_config(self, runner, tmp_path):
        (tmp_path / "pagepilot.yaml").write_text("browser:\n  timeout: 10000\n")

        with patch('pagepilot.cli.main.OpenCommand', FakeCommand):
            result = runner.invoke(app, ["open", "--print-config"])

        assert result.exit_code == ExitCode.SUCCESS
        assert "timeout: 10000" in result.output
        assert FakeCommand.instances == []

    def test_missing_config_file(self, runner, tmp_path):
        result = runner.invoke(app, ["open", "https://example.com", "--config", str(tmp_path / "nope.yaml")])

        assert result.exit_code == ExitCode.CONFIG_ERROR

    def test_invalid_port(self, runner):
        with patch('pagepilot.cli.main.OpenCommand', FakeCommand):
            result = runner.invoke(app, ["open", "current", "--connect-to", "70000"])

        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert FakeCommand.instances == []

    def test_print_config_reflects_browser_flags(self, runner, tmp_path):
        (tmp_path / "pagepilot.yaml").write_text("browser:\n  timeout: 10000\n  headless: true\n")

        result = runner.invoke(app, ["open", "--headed", "--timeout", "5000", "--print-config"])

        assert result.exit_code == ExitCode.SUCCESS
        assert "timeout: 5000" in result.output
        assert "headless: false" in result.output

    def test_browser_flags_become_command_defaults(self, runner, tmp_path):
        (tmp_path / "pagepilot.yaml").write_text("browser:\n  timeout: 10000\n")

        with patch('pagepilot.cli.main.OpenCommand', FakeCommand):
            result = runner.invoke(app, ["open", "https://example.com", "--timeout", "2500"])

        assert result.exit_code == 0, result.output
        assert FakeCommand.instances[0].defaults['default_timeout'] == 2500
        assert FakeCommand.instances[0].request.timeout == 2500

    def test_screenshot_path_passed_unchanged(self, runner):
        with patch('pagepilot.cli.main.OpenCommand', FakeCommand):
            result = runner.invoke(app, ["open", "https://example.com", "--screenshot", "./out.png"])

        assert result.exit_code == 0, result.output
        assert FakeCommand.instances[0].request.screenshot == "./out.png"
