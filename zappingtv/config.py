"""
Configuration management for ZappingTV.

Handles loading, validation, and access to application configuration.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

from zappingtv.constants import (
    ACTIVATION_CHECK_LINKED_URL,
    ACTIVATION_GET_CODE_URL,
    CHANNEL_LIST_URL,
    DEFAULT_TIMEOUT_SECONDS,
    HEARTBEAT_INTERVAL_SECONDS,
    HEARTBEAT_URL,
    LOG_FILE,
    MPV_DEFAULT_ARGS,
    PLAY_TOKEN_LOGIN_URL,
    SMART_TV_URL,
    TOKEN_FILE,
    USER_AGENT,
)

# Global configuration instance
_config: Optional["ZappingConfig"] = None


class EndpointsConfig(BaseModel):
    """Upstream API endpoints."""
    activation_get_code: str = ACTIVATION_GET_CODE_URL
    activation_check_linked: str = ACTIVATION_CHECK_LINKED_URL
    play_token_login: str = PLAY_TOKEN_LOGIN_URL
    heartbeat: str = HEARTBEAT_URL
    channel_list: str = CHANNEL_LIST_URL
    smart_tv: str = SMART_TV_URL  # Page where the activation code is entered


class ApiConfig(BaseModel):
    """Upstream API client configuration."""
    user_agent: str = USER_AGENT
    verify_ssl: bool = False  # Upstream certificates do not verify
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    endpoints: EndpointsConfig = Field(default_factory=EndpointsConfig)


class PlayerConfig(BaseModel):
    """Media player configuration."""
    path: str = "mpv"
    extra_args: list[str] = Field(default_factory=lambda: list(MPV_DEFAULT_ARGS))
    heartbeat_interval: float = HEARTBEAT_INTERVAL_SECONDS


class CredentialsConfig(BaseModel):
    """Device token persistence."""
    token_file: str = TOKEN_FILE

    @property
    def token_path(self) -> Path:
        """Token file with ``~`` expanded."""
        return Path(self.token_file).expanduser()


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: str = LOG_FILE
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_bytes: int = 5 * 1024 * 1024
    backup_count: int = 2
    clear_on_startup: bool = True
    console: bool = False  # Console output would interleave with prompts


class ZappingConfig(BaseModel):
    """Main ZappingTV configuration."""
    api: ApiConfig = Field(default_factory=ApiConfig)
    player: PlayerConfig = Field(default_factory=PlayerConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> ZappingConfig:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file. Defaults to ./config.yaml, then
            ~/.config/zappingtv/config.yaml.

    Returns:
        Loaded and validated configuration.
    """
    global _config

    if config_path is None:
        possible_paths = [
            Path("config.yaml"),
            Path.home() / ".config" / "zappingtv" / "config.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data: dict[str, Any] = {}

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

    # Apply environment variable overrides
    env_overrides = _get_env_overrides()
    _deep_merge(config_data, env_overrides)

    _config = ZappingConfig(**config_data)
    return _config


def get_config() -> ZappingConfig:
    """
    Get the current configuration.

    Returns:
        Current configuration (loads default if not yet loaded).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> ZappingConfig:
    """Drop the cached configuration and load it again from disk."""
    global _config
    _config = None
    return load_config()


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_map = {
        "ZAPPINGTV_TOKEN_FILE": ("credentials", "token_file"),
        "ZAPPINGTV_MPV_PATH": ("player", "path"),
        "ZAPPINGTV_LOG_LEVEL": ("logging", "level"),
        "ZAPPINGTV_LOG_FILE": ("logging", "file"),
        "ZAPPINGTV_VERIFY_SSL": ("api", "verify_ssl"),
        "ZAPPINGTV_USER_AGENT": ("api", "user_agent"),
    }

    for env_var, path in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            _set_nested(overrides, path, _parse_env_value(value))

    return overrides


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type."""
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value


def _set_nested(d: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    """Set a nested dictionary value from a path tuple."""
    for key in path[:-1]:
        d = d.setdefault(key, {})
    d[path[-1]] = value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Deep merge override into base dictionary."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
