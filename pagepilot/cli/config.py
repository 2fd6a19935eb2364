"""Configuration system for the pagepilot CLI with proper precedence handling.

Configuration sources, highest precedence first:
CLI flags > environment variables > config file > auto-discovered file > defaults
"""

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

_VIEWPORT_RE = re.compile(r"^\d+x\d+$")


class BrowserSettings(BaseModel):
    """Process-wide browser defaults."""

    model_config = ConfigDict(populate_by_name=True)

    headless: Optional[bool] = Field(default=None, description="Run launched browsers headless")
    default_viewport: Optional[str] = Field(
        default=None,
        alias="defaultViewport",
        description="Viewport for launched browsers as WIDTHxHEIGHT"
    )
    timeout: Optional[int] = Field(default=None, gt=0, description="Per-step timeout in ms")

    @field_validator('default_viewport')
    @classmethod
    def validate_viewport(cls, v):
        if v is not None and not _VIEWPORT_RE.match(v):
            raise ValueError("defaultViewport must look like WIDTHxHEIGHT, e.g. 1280x720")
        return v


class OutputSettings(BaseModel):
    """Output configuration options."""
    verbose: bool = Field(default=False, description="Verbose logging")


class PagePilotConfig(BaseModel):
    """Complete CLI configuration with all sections."""

    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)

    # Metadata
    config_file_path: Optional[Path] = Field(default=None, description="Source config file")
    loaded_from: List[str] = Field(default_factory=list, description="Configuration sources")


class ConfigurationLoader:
    """Loads and merges configuration from multiple sources with proper precedence."""

    # Environment variable prefix
    ENV_PREFIX = "PAGEPILOT_"

    # Default configuration file names (searched in order)
    DEFAULT_CONFIG_FILES = [
        "pagepilot.yaml",
        "pagepilot.yml",
        ".pagepilot.yaml",
        ".pagepilot.yml",
        "pagepilot.json",
        ".pagepilot.json"
    ]

    def __init__(self):
        self.loaded_sources: List[str] = []

    def load_configuration(
        self,
        config_file: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        search_paths: Optional[List[Path]] = None
    ) -> PagePilotConfig:
        """Load configuration with proper precedence.

        Args:
            config_file: Explicitly specified config file
            cli_overrides: CLI flag overrides
            search_paths: Paths to search for config files

        Returns:
            Merged configuration

        Raises:
            FileNotFoundError: If an explicit config file does not exist
            ValueError: If a config file cannot be parsed
        """
        self.loaded_sources = ["defaults"]
        config_data: Dict[str, Any] = {}

        if config_file:
            if not config_file.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_file}")
            config_data = self._merge_config(config_data, self._load_config_file(config_file))
            self.loaded_sources.append(f"config file: {config_file}")
        else:
            discovered = self._discover_config_file(search_paths or [Path.cwd()])
            if discovered:
                source_file = discovered.pop("_source_file")
                config_data = self._merge_config(config_data, discovered)
                self.loaded_sources.append(f"auto-discovered: {source_file}")
                config_file = Path(source_file)

        env_config = self._load_environment_variables()
        if env_config:
            config_data = self._merge_config(config_data, env_config)
            self.loaded_sources.append("environment variables")

        if cli_overrides:
            config_data = self._merge_config(config_data, cli_overrides)
            self.loaded_sources.append("CLI flags")

        config_data["loaded_from"] = self.loaded_sources
        if config_file:
            config_data["config_file_path"] = config_file

        return PagePilotConfig(**config_data)

    def _discover_config_file(self, search_paths: List[Path]) -> Optional[Dict[str, Any]]:
        """Discover configuration file in search paths."""
        for search_path in search_paths:
            for config_filename in self.DEFAULT_CONFIG_FILES:
                config_path = search_path / config_filename
                if config_path.exists() and config_path.is_file():
                    config_data = self._load_config_file(config_path)
                    config_data["_source_file"] = str(config_path)
                    return config_data
        return None

    def _load_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML or JSON file."""
        suffix = config_path.suffix.lower()
        if suffix not in ('.yaml', '.yml', '.json'):
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")

        try:
            content = config_path.read_text(encoding='utf-8')
            if suffix == '.json':
                data = json.loads(content)
            else:
                data = yaml.safe_load(content) or {}
            return self._normalize_keys(data)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
        except OSError as e:
            raise ValueError(f"Error loading config file {config_path}: {e}")

    def _normalize_keys(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Rename camelCase file keys so later sources override them by field name."""
        if not isinstance(data, dict):
            raise ValueError("Configuration file must contain a mapping")
        browser = data.get("browser")
        if isinstance(browser, dict) and "defaultViewport" in browser:
            browser = dict(browser)
            browser["default_viewport"] = browser.pop("defaultViewport")
            data = {**data, "browser": browser}
        return data

    def _load_environment_variables(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        env_mapping = {
            f"{self.ENV_PREFIX}HEADLESS": "browser.headless",
            f"{self.ENV_PREFIX}DEFAULT_VIEWPORT": "browser.default_viewport",
            f"{self.ENV_PREFIX}TIMEOUT": "browser.timeout",
            f"{self.ENV_PREFIX}VERBOSE": "output.verbose",
        }

        for env_var, config_path in env_mapping.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                converted_value = self._convert_env_value(env_value, config_path)
                self._set_nested_value(config, config_path, converted_value)

        return config

    def _convert_env_value(self, value: str, config_path: str) -> Any:
        """Convert environment variable string to appropriate type."""
        if config_path.endswith(('.headless', '.verbose')):
            return value.lower() in ('true', '1', 'yes', 'on')

        if config_path.endswith('.timeout'):
            return int(value)

        return value

    def _set_nested_value(self, config: Dict[str, Any], path: str, value: Any):
        """Set a nested configuration value using dot notation."""
        keys = path.split('.')
        current = config

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Merge configuration dictionaries, with override taking precedence."""
        if not override:
            return base

        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value

        return result


def load_configuration(
    config_file: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
    search_paths: Optional[List[Path]] = None
) -> PagePilotConfig:
    """Convenience function to load configuration.

    Args:
        config_file: Path to configuration file
        cli_overrides: CLI flag overrides
        search_paths: Paths to search for config files

    Returns:
        Loaded and merged configuration
    """
    loader = ConfigurationLoader()
    return loader.load_configuration(config_file, cli_overrides, search_paths)


def print_configuration(config: PagePilotConfig, format: str = "yaml") -> str:
    """Render configuration in the given format for debugging.

    Args:
        config: Configuration to print
        format: Output format (yaml, json)

    Returns:
        Formatted configuration string
    """
    config_dict = config.model_dump(
        mode="json",
        exclude={'loaded_from', 'config_file_path'},
        exclude_none=False
    )

    if format.lower() == "json":
        return json.dumps(config_dict, indent=2, default=str)
    return yaml.safe_dump(config_dict, default_flow_style=False, sort_keys=True)
