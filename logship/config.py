# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to the forwarder, the transport client and the CLI.
#
# CLASSES:
# --------
# - PluginConfig (dataclass)
#     version: str                (default package version)
#     source: str                 (default "BARE-METAL", env SOURCE)
#
# - EndpointConfig (dataclass)
#     endpoint: str               (default New Relic Logs API v1)
#     license_key: str | None
#     api_key: str | None
#     timeout_seconds: float      (default 15.0)
#
# - ProxyConfig (dataclass)
#     proxy: str | None
#     ignore_system_proxy: bool   (default False)
#     ca_bundle_file: str | None
#     ca_bundle_dir: str | None
#     validate_proxy_certs: bool  (default True)
#
# - BufferConfig (dataclass)
#     buffer_size: int               (default 500)
#     buffer_timeout_seconds: float  (default 5.0)
#
# - AppConfig (dataclass)
#     plugin, endpoint, proxy, buffer
#
# FUNCTION:
# ---------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
# - reset_config() -> None
#     Forget the singleton (tests, reloads).
#
# USAGE:
# ------
#   from logship.config import get_config
#   config = get_config()
#   print(config.endpoint.endpoint)
#   print(config.buffer.buffer_size)
#
# ==============================================

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

from logship import __version__
from logship.errors import ConfigError

DEFAULT_ENDPOINT = "https://log-api.newrelic.com/log/v1"
DEFAULT_SOURCE = "BARE-METAL"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class PluginConfig:
    """Descriptor values injected into every canonical record."""
    version: str = __version__
    source: str = DEFAULT_SOURCE


@dataclass
class EndpointConfig:
    """Ingestion endpoint and credentials."""
    endpoint: str = DEFAULT_ENDPOINT
    license_key: Optional[str] = None
    api_key: Optional[str] = None
    timeout_seconds: float = 15.0


@dataclass
class ProxyConfig:
    """Outbound proxy and TLS trust settings."""
    proxy: Optional[str] = None
    ignore_system_proxy: bool = False
    ca_bundle_file: Optional[str] = None
    ca_bundle_dir: Optional[str] = None
    validate_proxy_certs: bool = True


@dataclass
class BufferConfig:
    """Buffer configuration for record batching."""
    buffer_size: int = 500
    buffer_timeout_seconds: float = 5.0


@dataclass
class AppConfig:
    """Main application configuration."""
    plugin: PluginConfig = field(default_factory=PluginConfig)
    endpoint: EndpointConfig = field(default_factory=EndpointConfig)
    proxy: ProxyConfig = field(default_factory=ProxyConfig)
    buffer: BufferConfig = field(default_factory=BufferConfig)


# Singleton instance
_config_instance: Optional[AppConfig] = None


def parse_bool(name: str, raw: Optional[str], default: bool) -> bool:
    """
    Parse a boolean environment value.

    Args:
        name: Variable name, used in the error message
        raw: Raw value or None when unset
        default: Value returned for unset or blank variables

    Returns:
        The parsed boolean

    Raises:
        ConfigError: If the value is not a recognised boolean spelling
    """
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(
        f"{name} must be a boolean, got {raw!r}",
        hint="use one of: true, false, yes, no, on, off, 1, 0",
    )


def _parse_number(name: str, raw: Optional[str], default, cast):
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def load_config(env_path: Optional[Path] = None) -> AppConfig:
    """
    Build a fresh AppConfig from the environment, after loading a .env file.

    Args:
        env_path: .env file to load. Defaults to the project root .env.

    Returns:
        AppConfig: Application configuration
    """
    if env_path is None:
        env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    plugin_config = PluginConfig(
        version=os.getenv("LOGSHIP_PLUGIN_VERSION") or __version__,
        source=os.getenv("SOURCE", DEFAULT_SOURCE)
    )

    endpoint_config = EndpointConfig(
        endpoint=os.getenv("LOGSHIP_ENDPOINT") or DEFAULT_ENDPOINT,
        license_key=os.getenv("LOGSHIP_LICENSE_KEY") or None,
        api_key=os.getenv("LOGSHIP_API_KEY") or None,
        timeout_seconds=_parse_number(
            "LOGSHIP_TIMEOUT_SECONDS", os.getenv("LOGSHIP_TIMEOUT_SECONDS"), 15.0, float
        )
    )

    proxy_config = ProxyConfig(
        proxy=os.getenv("LOGSHIP_PROXY") or None,
        ignore_system_proxy=parse_bool(
            "LOGSHIP_IGNORE_SYSTEM_PROXY", os.getenv("LOGSHIP_IGNORE_SYSTEM_PROXY"), False
        ),
        ca_bundle_file=os.getenv("LOGSHIP_CA_BUNDLE_FILE") or None,
        ca_bundle_dir=os.getenv("LOGSHIP_CA_BUNDLE_DIR") or None,
        validate_proxy_certs=parse_bool(
            "LOGSHIP_VALIDATE_PROXY_CERTS", os.getenv("LOGSHIP_VALIDATE_PROXY_CERTS"), True
        )
    )

    buffer_config = BufferConfig(
        buffer_size=_parse_number(
            "LOGSHIP_BUFFER_SIZE", os.getenv("LOGSHIP_BUFFER_SIZE"), 500, int
        ),
        buffer_timeout_seconds=_parse_number(
            "LOGSHIP_BUFFER_TIMEOUT_SECONDS", os.getenv("LOGSHIP_BUFFER_TIMEOUT_SECONDS"), 5.0, float
        )
    )

    return AppConfig(
        plugin=plugin_config,
        endpoint=endpoint_config,
        proxy=proxy_config,
        buffer=buffer_config
    )


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None
