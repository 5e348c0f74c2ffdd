"""Mirror configuration loading and validation.

Settings come from three layers, later layers winning:
1. An optional YAML file (default: wiki-mirror.yaml)
2. Environment variables, loaded from a .env file with python-dotenv
3. Command-line options

Configuration file structure:
    base_url: "https://wiki.example.org"
    output_dir: "/srv/wiki-dump"
    page_size: 25
    max_workers: 10
    request_timeout: 30
    git_remote: origin
    git_branch: main
    git_timeout: 120
    fail_on_empty_commit: false
"""

import os
from dataclasses import fields, replace
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import yaml
from dotenv import load_dotenv

from .errors import ConfigError
from .models import MirrorConfig

DEFAULT_CONFIG_PATH = "wiki-mirror.yaml"


class ConfigLoader:
    """Handles configuration file loading, environment overrides and validation."""

    # Environment variable -> MirrorConfig field
    ENV_VARS = {
        'WIKI_MIRROR_BASE_URL': 'base_url',
        'WIKI_MIRROR_OUTPUT_DIR': 'output_dir',
        'WIKI_MIRROR_PAGE_SIZE': 'page_size',
        'WIKI_MIRROR_MAX_WORKERS': 'max_workers',
    }

    INT_FIELDS = {'page_size', 'max_workers', 'request_timeout', 'git_timeout'}
    BOOL_FIELDS = {'fail_on_empty_commit'}

    @classmethod
    def load(cls, config_path: Optional[str] = None, use_env: bool = True) -> MirrorConfig:
        """Load configuration from a YAML file and the environment.

        A missing file at the default location yields defaults; a missing file
        at an explicitly given path is an error.

        Args:
            config_path: Path to the YAML configuration file
            use_env: Whether to apply WIKI_MIRROR_* environment overrides

        Returns:
            Validated MirrorConfig

        Raises:
            ConfigError: If the file cannot be read or is invalid
        """
        path = config_path or DEFAULT_CONFIG_PATH
        values: Dict[str, Any] = {}

        try:
            with open(path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            if config_path is not None:
                raise ConfigError(f"Configuration file not found at {path}")
            content = ""
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}")

        if content.strip():
            try:
                parsed = yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML syntax: {str(e)}")

            if parsed is not None:
                if not isinstance(parsed, dict):
                    raise ConfigError(
                        f"Configuration must be a YAML dictionary, got {type(parsed).__name__}"
                    )
                values.update(parsed)

        if use_env:
            load_dotenv()
            for env_var, field_name in cls.ENV_VARS.items():
                env_value = os.getenv(env_var)
                if env_value:
                    values[field_name] = env_value

        return cls._parse_config(values)

    @classmethod
    def apply_overrides(cls, config: MirrorConfig, **overrides: Any) -> MirrorConfig:
        """Return a copy of ``config`` with non-None overrides applied and validated."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        values = {f.name: getattr(config, f.name) for f in fields(config)}
        values.update(changes)
        return cls._parse_config(values)

    @classmethod
    def _parse_config(cls, values: Dict[str, Any]) -> MirrorConfig:
        """Coerce and validate raw configuration values.

        Raises:
            ConfigError: If a field is unknown or invalid
        """
        known = {f.name for f in fields(MirrorConfig)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"Unknown field(s): {', '.join(unknown)}")

        coerced: Dict[str, Any] = {}
        for name, value in values.items():
            if name in cls.INT_FIELDS:
                coerced[name] = cls._to_int(name, value)
            elif name in cls.BOOL_FIELDS:
                coerced[name] = cls._to_bool(name, value)
            elif value is None:
                coerced[name] = None
            else:
                coerced[name] = str(value)

        config = replace(MirrorConfig(), **coerced)
        cls._validate(config)
        return config

    @staticmethod
    def _to_int(name: str, value: Any) -> Optional[int]:
        if value is None:
            return None
        if isinstance(value, bool):
            raise ConfigError(f"must be an integer, got {value!r}", name)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"must be an integer, got {value!r}", name)

    @staticmethod
    def _to_bool(name: str, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ('true', 'yes', '1'):
            return True
        if isinstance(value, str) and value.strip().lower() in ('false', 'no', '0'):
            return False
        raise ConfigError(f"must be a boolean, got {value!r}", name)

    @staticmethod
    def _validate(config: MirrorConfig) -> None:
        parsed = urlparse(config.base_url or "")
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ConfigError(
                f"must be an absolute http(s) URL, got {config.base_url!r}", 'base_url'
            )

        if not config.output_dir:
            raise ConfigError("cannot be empty", 'output_dir')

        if config.page_size is None or config.page_size < 1:
            raise ConfigError(f"must be positive, got {config.page_size}", 'page_size')

        if config.max_workers is not None and config.max_workers < 1:
            raise ConfigError(f"must be positive, got {config.max_workers}", 'max_workers')

        if config.request_timeout is None or config.request_timeout < 1:
            raise ConfigError(
                f"must be positive, got {config.request_timeout}", 'request_timeout'
            )

        if config.git_timeout is None or config.git_timeout < 1:
            raise ConfigError(f"must be positive, got {config.git_timeout}", 'git_timeout')

        if config.start_path is not None and not config.start_path.startswith('/'):
            raise ConfigError(
                f"must start with '/', got {config.start_path!r}", 'start_path'
            )
