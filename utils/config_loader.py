"""
Configuration Loader
====================
Loads and validates the runner settings from YAML.
Falls back to built-in defaults when no config file exists.
"""

import os
import re
import shlex
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from core.errors import ConfigError


CONFIG_ENV_VAR = "SUITE_RUNNER_CONFIG"
DEFAULT_CONFIG_FILE = Path("config") / "runner.yaml"

DEFAULTS: Dict[str, Any] = {
    'manifest': "Cargo.toml",
    'command': ["cargo", "test"],
    'name_pattern': None,
    'fail_fast': True,
    'log_dir': None,
}


class ConfigLoader:
    """Loads and validates configuration files."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        if config_file is None:
            config_file = os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE
        self.config_file = Path(config_file)
        self.params: Dict[str, Any] = dict(DEFAULTS)
        self.loaded_from: Optional[Path] = None

    def load_all(self, required: bool = False) -> None:
        """
        Load the config file over the defaults.

        Args:
            required: Raise when the file is missing instead of
                keeping the defaults
        """
        if self.config_file.exists():
            self.params.update(self._load_yaml(self.config_file))
            self.loaded_from = self.config_file
        elif required:
            raise ConfigError(f"Config file not found: {self.config_file}")

        self.params['command'] = self._normalize_command(self.params['command'])
        self._validate()

    def update(self, **overrides: Any) -> None:
        """Apply overrides (None values are ignored) and re-validate."""
        for key, value in overrides.items():
            if value is not None:
                self.params[key] = value
        self.params['command'] = self._normalize_command(self.params['command'])
        self._validate()

    def _load_yaml(self, filepath: Path) -> Dict[str, Any]:
        """Load a YAML configuration file."""
        try:
            with open(filepath, 'r') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {filepath}: {e}")

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigError(f"{filepath} must hold a mapping, got {type(config).__name__}")
        return config

    @staticmethod
    def _normalize_command(command: Any) -> List[str]:
        """Accept a list of arguments or a shell-style string."""
        if isinstance(command, str):
            return shlex.split(command)
        if isinstance(command, (list, tuple)):
            return [str(part) for part in command]
        raise ConfigError(f"command must be a list or a string, got {type(command).__name__}")

    def _validate(self) -> None:
        """Validate the merged parameters."""
        unknown = sorted(set(self.params) - set(DEFAULTS))
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        manifest = self.params['manifest']
        if not isinstance(manifest, str) or not manifest:
            raise ConfigError("manifest must be a non-empty filename")
        if "/" in manifest or os.sep in manifest:
            raise ConfigError(f"manifest must be a bare filename, got {manifest!r}")

        if not self.params['command']:
            raise ConfigError("command must not be empty")

        pattern = self.params['name_pattern']
        if pattern is not None:
            try:
                re.compile(pattern)
            except (re.error, TypeError) as e:
                raise ConfigError(f"Invalid name_pattern {pattern!r}: {e}")

        if not isinstance(self.params['fail_fast'], bool):
            raise ConfigError("fail_fast must be true or false")

        log_dir = self.params['log_dir']
        if log_dir is not None and (not isinstance(log_dir, str) or not log_dir):
            raise ConfigError(f"log_dir must be a directory path or null, got {log_dir!r}")

    def get(self, *keys: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Example:
            config.get('manifest')
            config.get('command')
        """
        value = self.params
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key, default)
            else:
                return default
        return value


class Config:
    """Global configuration singleton."""
    _instance: ConfigLoader = None

    @classmethod
    def initialize(cls, config_file: Optional[Union[str, Path]] = None) -> ConfigLoader:
        """Initialize the global configuration."""
        if cls._instance is None:
            loader = ConfigLoader(config_file)
            loader.load_all(required=config_file is not None)
            cls._instance = loader
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the global configuration."""
        cls._instance = None

    @classmethod
    def get(cls, *keys: str, default: Any = None) -> Any:
        """Get configuration value."""
        if cls._instance is None:
            raise RuntimeError("Config not initialized. Call Config.initialize() first.")
        return cls._instance.get(*keys, default=default)
