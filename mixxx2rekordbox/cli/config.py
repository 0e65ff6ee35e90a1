"""
CLI Configuration Management

Provides configuration loading and management for the Mixxx to Rekordbox CLI.
Values come from built-in defaults, a JSON configuration file and environment
variables (a nearby .env file is loaded first), in increasing priority.
"""

import os
import json
import copy
import platform
from typing import Dict, Any, Optional
from pathlib import Path

from dotenv import load_dotenv

from ..core.models import EXPORT_FILENAME
from ..utils.logging_config import get_logger

logger = get_logger('cli')


class CLIConfig:
    """
    CLI configuration manager

    Features:
    - Multiple configuration sources (file, environment, defaults)
    - Platform-specific configuration paths
    - Environment variable overrides
    - Dot-path access to single options
    """

    def __init__(self, config_path: Optional[str] = None, load_env_file: bool = True):
        """Initialize configuration manager"""
        self.config_path = config_path or self._get_default_config_path()
        self._config_cache: Optional[Dict[str, Any]] = None
        self._defaults = self._get_default_config()

        if load_env_file:
            # Look for .env in current directory and parent directories
            env_path = self._find_env_file()
            if env_path:
                load_dotenv(env_path)

    def _get_default_config_path(self) -> str:
        """Get default configuration file path based on platform"""
        if platform.system() == "Windows":
            config_dir = os.path.expandvars(r"%APPDATA%\Mixxx2Rekordbox")
        elif platform.system() == "Darwin":  # macOS
            config_dir = os.path.expanduser("~/Library/Application Support/Mixxx2Rekordbox")
        else:  # Linux and others
            config_dir = os.path.expanduser("~/.config/mixxx2rekordbox")

        return os.path.join(config_dir, "config.json")

    def _find_env_file(self) -> Optional[str]:
        """Find .env file in current directory or parent directories"""
        current_dir = Path.cwd()

        # Check current directory and up to 3 parent directories
        for _ in range(4):
            env_file = current_dir / '.env'
            if env_file.exists():
                return str(env_file)
            if current_dir == current_dir.parent:  # Reached root
                break
            current_dir = current_dir.parent

        return None

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values"""
        return {
            # Application settings
            "app": {
                "debug": False,
                "log_level": "INFO",
                "log_dir": None,
            },

            # Export settings
            "export": {
                "old_base": "",
                "new_base": "",
                "include_playlists": True,
                "include_crates": True,
                "output_path": EXPORT_FILENAME,
            },
        }

    def load_config(self, force_reload: bool = False) -> Dict[str, Any]:
        """
        Load configuration from all sources

        Args:
            force_reload: Force reload from file (ignore cache)

        Returns:
            Merged configuration dictionary
        """
        if self._config_cache is not None and not force_reload:
            return self._config_cache

        # Start with defaults
        config = copy.deepcopy(self._defaults)

        # Load from configuration file
        file_config = self._load_from_file()
        if file_config:
            config = self._deep_merge(config, file_config)

        # Apply environment variable overrides
        env_config = self._load_from_environment()
        if env_config:
            config = self._deep_merge(config, env_config)

        config = self._validate_config(config)

        self._config_cache = config
        return config

    def _load_from_file(self) -> Optional[Dict[str, Any]]:
        """Load configuration from JSON file"""
        if not os.path.exists(self.config_path):
            return None

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {self.config_path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {self.config_path}: not a JSON object")
            return None
        return data

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load configuration overrides from environment variables"""
        config = {}

        # Map environment variables to config keys
        env_mappings = {
            'M2R_OLD_BASE': ('export', 'old_base', str),
            'M2R_NEW_BASE': ('export', 'new_base', str),
            'M2R_INCLUDE_PLAYLISTS': ('export', 'include_playlists', self._str_to_bool),
            'M2R_INCLUDE_CRATES': ('export', 'include_crates', self._str_to_bool),
            'M2R_OUTPUT': ('export', 'output_path', str),
            'M2R_LOG_LEVEL': ('app', 'log_level', str),
            'M2R_LOG_DIR': ('app', 'log_dir', str),
            'M2R_DEBUG': ('app', 'debug', self._str_to_bool),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                config.setdefault(section, {})[key] = converter(value)

        return config

    def _str_to_bool(self, value: str) -> bool:
        """Convert string to boolean"""
        return value.strip().lower() in ('true', '1', 'yes', 'on', 'enabled')

    def _deep_merge(self, base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries"""
        result = base.copy()

        for key, value in update.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _validate_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Sanitize configuration values"""
        for section in ('app', 'export'):
            if not isinstance(config.get(section), dict):
                logger.warning(f"Config section '{section}' is not an object, using defaults")
                config[section] = copy.deepcopy(self._defaults[section])

        app = config['app']
        level = str(app.get('log_level') or 'INFO').upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            logger.warning(f"Unknown log level {level}, using INFO")
            level = 'INFO'
        app['log_level'] = level

        export = config['export']
        for key in ('include_playlists', 'include_crates'):
            if isinstance(export.get(key), str):
                export[key] = self._str_to_bool(export[key])

        for section, key in (('export', 'old_base'), ('export', 'new_base'),
                             ('export', 'output_path'), ('app', 'log_dir')):
            value = config[section].get(key)
            if value is not None and not isinstance(value, str):
                logger.warning(f"Config option '{section}.{key}' is not a string, ignoring it")
                config[section][key] = self._defaults[section][key]

        return config

    def save_config(self, config: Optional[Dict[str, Any]] = None) -> bool:
        """
        Save configuration to file

        Args:
            config: Configuration to save (uses current if None)

        Returns:
            True if saved successfully
        """
        if config is None:
            config = self.load_config()

        try:
            os.makedirs(os.path.dirname(self.config_path) or '.', exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(config, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Failed to save config file {self.config_path}: {e}")
            return False

        # Clear cache to force reload
        self._config_cache = None
        return True

    def get_option(self, path: str, default: Any = None) -> Any:
        """
        Get a configuration option using dot notation

        Args:
            path: Dot-separated path (e.g., 'export.old_base')
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        value = self.load_config()

        try:
            for key in path.split('.'):
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def set_option(self, path: str, value: Any) -> bool:
        """
        Set a configuration option using dot notation and save it

        Args:
            path: Dot-separated path (e.g., 'export.include_crates')
            value: Value to set

        Returns:
            True if set successfully
        """
        config = self.load_config()
        keys = path.split('.')

        # Navigate to the parent dict
        target = config
        for key in keys[:-1]:
            target = target.setdefault(key, {})

        target[keys[-1]] = value
        return self.save_config(config)


__all__ = ['CLIConfig']
