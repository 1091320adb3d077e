"""
Configuration settings management for tppctl.

Settings are assembled once at startup and passed explicitly to every
component; nothing else in the package reads the process environment.

Sources, lowest precedence first:
    - Built-in defaults
    - Optional YAML file (~/.tppctl/config.yaml, or the TPPCTL_CONFIG path)
      holding ambient settings only: log_level, editor, timeout, verify_tls
    - Environment variables

TPP_URL and TOKEN are required and are only ever taken from the environment.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from tppctl.errors import ConfigurationError

# Default configuration directory
DEFAULT_CONFIG_DIR = Path.home() / ".tppctl"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"

DEFAULT_EDITOR = "vim"
DEFAULT_LOG_LEVEL = "WARNING"

REQUIRED_ENV_VARS = ("TPP_URL", "TOKEN")


@dataclass
class Settings:
    """
    Complete tppctl configuration.

    Attributes:
        tpp_url: Base URL of the platform; endpoint paths are appended as-is.
        token: Bearer token sent with every request.
        editor: Editor command used by 'edit'.
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        timeout: Request timeout in seconds, or None for no timeout.
        verify_tls: Whether to verify the server's TLS certificate.
    """

    tpp_url: str
    token: str
    editor: str = DEFAULT_EDITOR
    log_level: str = DEFAULT_LOG_LEVEL
    timeout: float | None = None
    verify_tls: bool = True

    def __repr__(self) -> str:
        # Keep the token out of logs and tracebacks
        return (
            f"Settings(tpp_url={self.tpp_url!r}, token='***', "
            f"editor={self.editor!r}, log_level={self.log_level!r}, "
            f"timeout={self.timeout!r}, verify_tls={self.verify_tls!r})"
        )


def get_config_path(environ: Mapping[str, str] | None = None) -> Path:
    """
    Get the configuration file path.

    Returns the path from the TPPCTL_CONFIG environment variable if set,
    otherwise the default path (~/.tppctl/config.yaml).
    """
    env = os.environ if environ is None else environ
    env_path = env.get("TPPCTL_CONFIG")
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_FILE


def load_config(
    environ: Mapping[str, str] | None = None,
    config_path: Path | None = None,
) -> Settings:
    """
    Build Settings from the environment and the optional config file.

    Args:
        environ: Environment mapping to read; defaults to os.environ.
        config_path: Optional path to the YAML file. If not provided, uses
                    TPPCTL_CONFIG or the default path.

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If TPP_URL or TOKEN is missing, or the config
                          file is unreadable or holds invalid settings.
    """
    env = os.environ if environ is None else environ

    for name in REQUIRED_ENV_VARS:
        if not env.get(name):
            raise ConfigurationError(f"{name} needs to be set in the environment")

    settings = Settings(tpp_url=env["TPP_URL"], token=env["TOKEN"])

    if config_path is None:
        config_path = get_config_path(env)

    if config_path.exists():
        try:
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")
        settings = _apply_config_data(settings, config_data)

    settings = _apply_environment_overrides(settings, env)

    _validate_config(settings)

    return settings


def _apply_config_data(settings: Settings, data: dict[str, Any]) -> Settings:
    """Apply configuration data from parsed YAML to settings."""
    tppctl_data = data.get("tppctl") or {}

    if "log_level" in tppctl_data:
        settings.log_level = str(tppctl_data["log_level"]).upper()
    if "editor" in tppctl_data:
        settings.editor = str(tppctl_data["editor"])
    if "timeout" in tppctl_data:
        timeout = tppctl_data["timeout"]
        settings.timeout = None if timeout is None else _to_float("timeout", timeout)
    if "verify_tls" in tppctl_data:
        settings.verify_tls = bool(tppctl_data["verify_tls"])

    return settings


def _apply_environment_overrides(
    settings: Settings, environ: Mapping[str, str]
) -> Settings:
    """Apply environment variable overrides to settings."""
    env_map: dict[str, tuple[str, Callable[[str], Any]]] = {
        "EDITOR": ("editor", str),
        "TPPCTL_LOG_LEVEL": ("log_level", str.upper),
        "TPPCTL_TIMEOUT": ("timeout", lambda x: _to_float("TPPCTL_TIMEOUT", x)),
    }

    for env_var, (attr, converter) in env_map.items():
        value = environ.get(env_var)
        if value:
            setattr(settings, attr, converter(value))

    return settings


def _to_float(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid {name}: {value!r} is not a number") from e


def _validate_config(settings: Settings) -> None:
    """
    Validate configuration settings.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if settings.log_level not in valid_log_levels:
        raise ConfigurationError(
            f"Invalid log_level: {settings.log_level}. "
            f"Must be one of: {', '.join(sorted(valid_log_levels))}"
        )

    if settings.timeout is not None and settings.timeout <= 0:
        raise ConfigurationError("timeout must be greater than 0")

    if not settings.editor.strip():
        raise ConfigurationError("editor must not be empty")
