"""CLI module for pagepilot.

This package provides the Typer command-line interface and the layered
configuration loader it uses for browser defaults.
"""

from .config import (
    # Configuration
    BrowserSettings,
    OutputSettings,
    PagePilotConfig,
    ConfigurationLoader,
    load_configuration,
    print_configuration,
)

__all__ = [
    # Configuration
    'BrowserSettings',
    'OutputSettings',
    'PagePilotConfig',
    'ConfigurationLoader',
    'load_configuration',
    'print_configuration',
]
