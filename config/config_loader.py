"""
Configuration loader for FinManager.
Loads the appropriate configuration based on environment with support for
local overrides and environment variable overrides.
"""

import os
import logging
import yaml
from typing import Dict, Any, Optional
from dotenv import load_dotenv

from utils.error_handling import ConfigurationError

# Load environment variables from .env file
load_dotenv()

# Initialize logger
logger = logging.getLogger(__name__)

ENVIRONMENTS = ('development', 'staging', 'production')

# Environment variable -> (section, key, type)
ENV_OVERRIDES = {
    'FINMANAGER_API_URL': ('api', 'base_url', str),
    'FINMANAGER_API_TIMEOUT': ('api', 'timeout_seconds', float),
    'FINMANAGER_MOCK_LOGIN': ('auth', 'mock_login', bool),
    'FINMANAGER_SESSION_DIR': ('session', 'storage_dir', str),
    'FINMANAGER_CACHE_STALE_SECONDS': ('cache', 'stale_seconds', float),
    'FINMANAGER_HOST': ('server', 'host', str),
    'FINMANAGER_PORT': ('server', 'port', int),
}

REQUIRED_KEYS = {
    'api': ['base_url'],
    'session': ['cookie_name'],
}

_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'off')


class ConfigLoader:
    """
    Configuration loader for the console.

    Features:
    - Environment-based configuration (dev/staging/prod)
    - Local override support (<env>.local.yaml, not committed)
    - Environment variable overrides
    - Configuration validation
    """

    def __init__(self, env: Optional[str] = None, config_dir: Optional[str] = None):
        """
        Initialize the configuration loader.

        Args:
            env: Optional environment override (development, staging, production)
            config_dir: Directory holding the YAML files (defaults to this package)
        """
        self.env = env or os.environ.get('FINMANAGER_ENV', 'development')
        self.config_dir = config_dir or os.path.dirname(os.path.abspath(__file__))
        self.config_cache: Dict[str, Dict[str, Any]] = {}

        # Validate environment
        if self.env not in ENVIRONMENTS:
            logger.warning(f"Invalid environment: {self.env}, defaulting to development")
            self.env = 'development'

        logger.info(f"Initialized ConfigLoader for environment: {self.env}")

    def load_config(self, reload: bool = False) -> Dict[str, Any]:
        """
        Load the appropriate configuration based on environment.

        Args:
            reload: Force reload configuration from disk

        Returns:
            Dict[str, Any]: Configuration dictionary

        Raises:
            ConfigurationError: the environment's file is missing or invalid
        """
        # Return cached config if available and not reloading
        if "main" in self.config_cache and not reload:
            return self.config_cache["main"]

        config_path = os.path.join(self.config_dir, f"{self.env}.yaml")

        logger.info(f"Loading configuration from {config_path}")

        if not os.path.exists(config_path):
            logger.error(f"Configuration file not found: {config_path}")
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                details={"environment": self.env}
            )

        config = _read_yaml(config_path)

        # Set environment in config
        config['environment'] = self.env

        # Check for local overrides
        local_config_path = os.path.join(self.config_dir, f"{self.env}.local.yaml")
        if os.path.exists(local_config_path):
            logger.info(f"Loading local override configuration from {local_config_path}")
            _deep_merge(config, _read_yaml(local_config_path))

        self._apply_env_overrides(config)

        if not self.validate_config(config):
            raise ConfigurationError(
                "Configuration validation failed",
                details={"environment": self.env}
            )

        # Cache the config
        self.config_cache["main"] = config

        return config

    def _apply_env_overrides(self, config: Dict[str, Any]) -> None:
        """
        Apply FINMANAGER_* environment variables on top of the file configuration.

        Args:
            config: Configuration to update in place
        """
        for var, (section, key, value_type) in ENV_OVERRIDES.items():
            raw = os.environ.get(var)
            if raw is None or raw == '':
                continue
            try:
                value = _coerce(raw, value_type)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {var}: {raw!r}", cause=e)
            config.setdefault(section, {})[key] = value
            logger.info(f"Configuration {section}.{key} overridden by {var}")

    def validate_config(self, config: Dict[str, Any]) -> bool:
        """
        Validate the loaded configuration.

        Args:
            config: Configuration to validate

        Returns:
            bool: True if configuration is valid, False otherwise
        """
        valid = True
        for section, keys in REQUIRED_KEYS.items():
            if not isinstance(config.get(section), dict):
                logger.error(f"Missing required configuration section: {section}")
                valid = False
                continue
            missing_keys = [key for key in keys if not config[section].get(key)]
            if missing_keys:
                logger.error(f"Missing required configuration keys in {section}: {missing_keys}")
                valid = False

        failure_rate = config.get("payouts", {}).get("failure_rate", 0)
        if not 0 <= float(failure_rate) <= 1:
            logger.error(f"payouts.failure_rate must be between 0 and 1, got {failure_rate}")
            valid = False

        return valid


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, 'r') as config_file:
        try:
            data = yaml.safe_load(config_file)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}", cause=e)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration in {path} must be a mapping")
    return data


def _coerce(raw: str, value_type: type) -> Any:
    if value_type is bool:
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"not a boolean: {raw}")
    return value_type(raw)


# Helper function for deep merging dictionaries
def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with override values taking precedence.

    Args:
        base: Base dictionary
        override: Dictionary with override values

    Returns:
        Dict[str, Any]: Merged dictionary
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(reload: bool = False, env: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the appropriate configuration based on environment.

    Args:
        reload: Force reload configuration from disk
        env: Optional environment override

    Returns:
        Dict[str, Any]: Configuration dictionary
    """
    loader = ConfigLoader(env=env)
    return loader.load_config(reload=reload)
