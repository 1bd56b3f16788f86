"""
Reads and writes the project's `forgecast.ini` file.

All settings live in the `[DEFAULT]` section. Values are handed to
`PodcastConfig` as raw strings so that type coercion and range checks
happen in one place.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from forgecast.exceptions import ConfigurationError
from forgecast.models.config import PodcastConfig

log = logging.getLogger(__name__)

CONFIG_FILE_NAME = "forgecast.ini"


def _new_parser() -> configparser.ConfigParser:
    # Paths and URLs may contain '%', which interpolation would reject.
    return configparser.ConfigParser(interpolation=None)


def _default_settings() -> dict[str, str]:
    defaults = PodcastConfig.model_construct()
    return {key: str(getattr(defaults, key)) for key in sorted(PodcastConfig.get_ini_keys())}


class ConfigManager:
    """Loads, validates and migrates one project configuration file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = Path(config_file_path)

    @property
    def project_dir(self) -> Path:
        return self.config_file_path.parent

    def load_config(self, cli_options: dict[str, Any] | None = None) -> PodcastConfig:
        """
        Builds the effective configuration.

        Settings come from the INI file when it exists, with `cli_options`
        taking precedence. A project without a config file runs on the
        defaults.

        Raises:
            ConfigurationError: If the file cannot be parsed or a value is invalid.
        """
        settings: dict[str, Any] = {}
        if self.config_file_path.is_file():
            settings.update(self._read_settings())
        else:
            log.debug(f"No configuration at '{self.config_file_path}', using defaults.")

        settings.update(cli_options or {})

        try:
            return PodcastConfig(**settings, config_path=str(self.project_dir))
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """Writes a complete config file, filling unset keys with defaults."""
        values = _default_settings()
        for key in values:
            if settings.get(key) is not None:
                values[key] = str(settings[key])

        parser = _new_parser()
        parser["DEFAULT"] = values
        self._write(parser)

    def _read_settings(self) -> dict[str, str]:
        parser = _new_parser()
        try:
            parser.read(self.config_file_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e

        section = parser["DEFAULT"]
        missing = {
            key: value for key, value in _default_settings().items() if key not in section
        }
        if missing:
            section.update(missing)
            log.debug(f"Adding missing config keys: {', '.join(sorted(missing))}")
            try:
                self._write(parser)
                log.info("[yellow]Configuration file was updated with new default values.[/yellow]")
            except ConfigurationError as e:
                log.error(f"Could not save migrated configuration file: {e}")

        known = PodcastConfig.get_ini_keys()
        return {key: value for key, value in section.items() if key in known}

    def _write(self, parser: configparser.ConfigParser) -> None:
        try:
            self.project_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as f:
                parser.write(f)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e


def resolve_project_path(config: PodcastConfig, value: str) -> Path:
    """Resolves a configured path relative to the directory holding the config."""
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return Path(config.config_path) / path
