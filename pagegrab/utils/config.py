import os
import re
import yaml
import logging
from typing import Dict, Any, Optional

from ..constants import (
    USER_AGENT,
    DEVICE_NAME,
    FILE_EXTENSION,
    DEFAULT_TIMEOUT,
    LOGGER_NAME,
)
from ..errors import ConfigError

logger = logging.getLogger(LOGGER_NAME)

DEFAULT_SETTINGS: Dict[str, Any] = {
    'user_agent': USER_AGENT,
    'device': DEVICE_NAME,
    'timeout': DEFAULT_TIMEOUT,
    'headless': True,
    'download_dir': '.',
    'file_extension': FILE_EXTENSION,
    'log_file': None,
    'log_dir': 'logs',
}

# Accepted types per setting; None is allowed only for log_file
SETTING_TYPES: Dict[str, tuple] = {
    'user_agent': (str,),
    'device': (str,),
    'timeout': (int, float),
    'headless': (bool,),
    'download_dir': (str,),
    'file_extension': (str,),
    'log_file': (str, type(None)),
    'log_dir': (str,),
}


class ConfigManager:
    """Configuration management with environment variable substitution and validation."""

    def __init__(self, config_path: str = "pagegrab.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path (str): Path to the YAML configuration file

        Raises:
            ConfigError: If the file exists but cannot be parsed or is invalid
        """
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load and process the configuration file.

        Returns:
            dict: Processed configuration, with defaults when no file exists
        """
        if not os.path.exists(self.config_path):
            logger.debug(f"Configuration file not found, using defaults: {self.config_path}")
            return {'settings': dict(DEFAULT_SETTINGS)}

        try:
            with open(self.config_path, 'r') as file:
                config = yaml.safe_load(file)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration {self.config_path}: {e}") from e

        if config is None:
            config = {}

        config = self._substitute_env_vars(config)
        self._validate_config(config)

        settings = dict(DEFAULT_SETTINGS)
        settings.update(config.get('settings') or {})
        config['settings'] = settings
        return config

    def _substitute_env_vars(self, config: Any) -> Any:
        """
        Recursively substitute environment variables in the configuration.

        Args:
            config: Configuration object (dict, list, or scalar)

        Returns:
            Configuration with environment variables substituted
        """
        if isinstance(config, dict):
            return {k: self._substitute_env_vars(v) for k, v in config.items()}
        elif isinstance(config, list):
            return [self._substitute_env_vars(item) for item in config]
        elif isinstance(config, str):
            # Replace ${VAR} or $VAR with environment variable
            pattern = r'\${([^}]+)}|\$([a-zA-Z0-9_]+)'

            def replace_env_var(match):
                var_name = match.group(1) or match.group(2)
                return os.environ.get(var_name, f"${var_name}")

            return re.sub(pattern, replace_env_var, config)
        else:
            return config

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate the configuration structure.

        Args:
            config (dict): Configuration to validate

        Raises:
            ConfigError: If configuration is invalid
        """
        if not isinstance(config, dict):
            raise ConfigError("Configuration must be a dictionary")

        settings = config.get('settings') or {}
        if not isinstance(settings, dict):
            raise ConfigError("'settings' must be a dictionary")

        for key, value in settings.items():
            if key not in SETTING_TYPES:
                raise ConfigError(f"Unknown setting '{key}'")
            # bool is an int subclass, keep it out of numeric settings
            if isinstance(value, bool) and bool not in SETTING_TYPES[key]:
                raise ConfigError(f"Setting '{key}' has invalid type bool")
            if not isinstance(value, SETTING_TYPES[key]):
                raise ConfigError(f"Setting '{key}' has invalid type {type(value).__name__}")

        if 'timeout' in settings and settings['timeout'] <= 0:
            raise ConfigError("'timeout' must be greater than zero")

        if 'user_agent' in settings and not settings['user_agent'].strip():
            raise ConfigError("'user_agent' must not be empty")

        extension = settings.get('file_extension')
        if extension is not None and not extension.startswith('.'):
            raise ConfigError("'file_extension' must start with '.'")

    def get_settings(self) -> Dict[str, Any]:
        """
        Get the settings merged over the defaults.

        Returns:
            dict: All settings
        """
        return self.config['settings']

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """
        Get a single setting.

        Args:
            key (str): Setting name
            default: Value returned when the setting is missing

        Returns:
            The setting value or default
        """
        return self.config['settings'].get(key, default)
