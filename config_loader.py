"""Configuration loader with YAML support and environment variable substitution."""

import copy
import os
import re
from pathlib import Path
from typing import Any, Dict
from urllib.parse import urlparse

import yaml

from exceptions import ConfigError

PROGRAM_DIR = Path(__file__).resolve().parent
DEFAULT_USER_AGENT = 'wordpress-markdown-migrator/1.0'
PROXY_SCHEMES = ('http', 'https', 'socks4', 'socks4a', 'socks5', 'socks5h')


class ConfigLoader:
    """Handles loading and validation of configuration files."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

    @classmethod
    def defaults(cls) -> Dict[str, Any]:
        """Return the default configuration tree."""
        return {
            'export': {
                'output_directory': str(PROGRAM_DIR / 'posts'),
                'progress_bars': True,
            },
            'migration': {
                'canonicalize': True,
                'post_workers': 4,
                'asset_workers': 4,
            },
            'network': {
                'proxy': None,
                'request_timeout': 30,
                'user_agent': DEFAULT_USER_AGENT,
            },
            'logging': {
                'level': None,
                'file': None,
            },
        }

    @classmethod
    def load(cls, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a dictionary")

        return cls._substitute_env_vars_recursive(config_data)

    @classmethod
    def merge(cls, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge ``override`` into a copy of ``base``."""
        merged = copy.deepcopy(base)
        for key, value in (override or {}).items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = cls.merge(merged[key], value)
            else:
                merged[key] = copy.deepcopy(value)
        return merged

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigError: If validation fails
        """
        for field in ('migration.post_workers', 'migration.asset_workers'):
            value = get_nested(config, field, 4)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigError(f"{field} must be a positive integer")

        timeout = get_nested(config, 'network.request_timeout', 30)
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
            raise ConfigError("network.request_timeout must be a positive number")

        for field in ('migration.canonicalize', 'export.progress_bars'):
            if not isinstance(get_nested(config, field, True), bool):
                raise ConfigError(f"{field} must be a boolean")

        output_dir = get_nested(config, 'export.output_directory')
        if not output_dir:
            raise ConfigError("Missing required configuration: export.output_directory")
        if os.path.exists(output_dir) and not os.path.isdir(output_dir):
            raise ConfigError(f"export.output_directory '{output_dir}' is not a directory")

        proxy = get_nested(config, 'network.proxy')
        if proxy:
            cls._validate_proxy(proxy)

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration with CLI arguments.
        CLI arguments take precedence over config file values.

        Args:
            config: Base configuration dictionary
            args: CLI arguments with attributes matching config keys

        Returns:
            Merged configuration dictionary
        """
        merged = copy.deepcopy(config)
        for section in ('export', 'migration', 'network', 'logging'):
            merged.setdefault(section, {})

        if getattr(args, 'output_dir', None):
            merged['export']['output_directory'] = args.output_dir

        if getattr(args, 'no_progress', False):
            merged['export']['progress_bars'] = False

        if getattr(args, 'canonicalize', None) is not None:
            merged['migration']['canonicalize'] = args.canonicalize

        if getattr(args, 'post_workers', None) is not None:
            merged['migration']['post_workers'] = args.post_workers

        if getattr(args, 'asset_workers', None) is not None:
            merged['migration']['asset_workers'] = args.asset_workers

        if getattr(args, 'proxy', None):
            merged['network']['proxy'] = args.proxy

        if getattr(args, 'timeout', None) is not None:
            merged['network']['request_timeout'] = args.timeout

        if getattr(args, 'log_file', None):
            merged['logging']['file'] = args.log_file

        return merged

    @classmethod
    def _substitute_env_vars_recursive(cls, data: Any) -> Any:
        """Recursively substitute environment variables in data structure."""
        if isinstance(data, dict):
            return {key: cls._substitute_env_vars_recursive(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars_recursive(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_vars(data)
        else:
            return data

    @classmethod
    def _substitute_env_vars(cls, value: str) -> str:
        """Substitute environment variables in a string value."""
        def replace_match(match):
            env_value = os.getenv(match.group(1))
            return env_value if env_value is not None else match.group(0)

        return cls.ENV_VAR_PATTERN.sub(replace_match, value)

    @staticmethod
    def _validate_proxy(proxy: str) -> None:
        """Validate proxy URL format."""
        if not isinstance(proxy, str):
            raise ConfigError("network.proxy must be a URL string")
        parsed = urlparse(proxy)
        if parsed.scheme not in PROXY_SCHEMES:
            raise ConfigError(f"network.proxy must use one of {', '.join(PROXY_SCHEMES)}: {proxy}")
        if not parsed.netloc:
            raise ConfigError(f"network.proxy missing hostname: {proxy}")


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "network.proxy")
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    value = config
    for key in path.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value


__all__ = ['ConfigLoader', 'get_nested']
