"""
Configuration Loader

Utilities for loading YAML connection profiles and FORTINET_* environment
variables into a form ClientConfig accepts.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import os

ENV_PREFIX = "FORTINET_"

# Environment names that do not map one-to-one onto ClientConfig fields
ENV_ALIASES = {
    'id': 'transaction_id'
}

BOOLEAN_KEYS = {'insecure', 'verbose'}
INTEGER_KEYS = {'transaction_id'}


def parse_flag(value: Any) -> bool:
    """Interpret 1/0, true/false, yes/no and on/off as a boolean"""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


class ConfigLoader:
    """
    Load connection profiles and environment overrides.
    """

    @staticmethod
    def load(config_path: str, required_keys: Optional[list] = None) -> Dict[str, Any]:
        """
        Load a YAML configuration file.

        Args:
            config_path: Path to YAML file
            required_keys: List of keys that must be present in config

        Returns:
            Configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If required keys are missing or the file is not a mapping
            yaml.YAMLError: If YAML is invalid
        """
        path = Path(config_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path, 'r') as f:
            config = yaml.safe_load(f)

        if config is None:
            config = {}

        if not isinstance(config, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_path}")

        if required_keys:
            missing = [key for key in required_keys if key not in config]
            if missing:
                raise ValueError(f"Missing required configuration keys: {missing}")

        return ConfigLoader.normalize(config)

    @staticmethod
    def from_environment(
        environ: Optional[Mapping[str, str]] = None,
        env_prefix: str = ENV_PREFIX
    ) -> Dict[str, Any]:
        """
        Collect settings from environment variables.

        FORTINET_HOSTNAME becomes 'hostname', FORTINET_ID becomes
        'transaction_id', and so on. Empty values are ignored.

        Args:
            environ: Mapping to read (os.environ if omitted)
            env_prefix: Prefix for environment variables
        """
        environ = os.environ if environ is None else environ
        config = {}

        for key, value in environ.items():
            if key.startswith(env_prefix) and value != "":
                config[key[len(env_prefix):].lower()] = value

        return ConfigLoader.normalize(config)

    @staticmethod
    def load_with_env_override(
        config_path: Optional[str],
        env_prefix: str = ENV_PREFIX,
        environ: Optional[Mapping[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Load a profile (if given) and override it with environment variables.

        Args:
            config_path: Path to YAML file, or None for environment only
            env_prefix: Prefix for environment variables
            environ: Mapping to read (os.environ if omitted)

        Returns:
            Configuration dictionary with env overrides applied
        """
        config = ConfigLoader.load(config_path) if config_path else {}
        config.update(ConfigLoader.from_environment(environ, env_prefix))
        return config

    @staticmethod
    def normalize(config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply key aliases and coerce flag/integer values"""
        normalized = {}

        for key, value in config.items():
            key = ENV_ALIASES.get(str(key).lower(), str(key).lower())

            if key in BOOLEAN_KEYS:
                value = parse_flag(value)
            elif key in INTEGER_KEYS:
                try:
                    value = int(value)
                except (TypeError, ValueError):
                    raise ValueError(f"{key} must be an integer, got {value!r}") from None

            normalized[key] = value

        return normalized
