"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. Arguments passed to get_config (CLI options)
2. Environment variables (SMS_*)
3. Config file (~/.sms/config.toml)
4. Default values

Environment variables:
- SMS_CONFIG_PATH: Path to config file (overrides default location)
- SMS_DATA_DIR: Data directory (default ~/.sms/)
- SMS_CACHE_DIR: Cache root for stream output (default <data dir>/cache)
- SMS_TRANSCODER_PATH: Path to the transcoder executable
- SMS_SEGMENT_DURATION: HLS segment duration in seconds (default 10)
- SMS_HWACCEL: Comma separated accelerators to use, or "none"
- SMS_LOG_LEVEL, SMS_LOG_FORMAT, SMS_LOG_FILE: Logging overrides
"""

from __future__ import annotations

import logging
import threading
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from sms_transcode.config.env import EnvReader
from sms_transcode.config.models import (
    DEFAULT_DATA_DIR,
    HardwareConfig,
    LoggingConfig,
    SMSConfig,
    StreamingConfig,
    ToolPathsConfig,
)
from sms_transcode.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = DEFAULT_DATA_DIR / "config.toml"

_config_cache: dict[tuple[Path | None, Path | None], SMSConfig] = {}
_config_lock = threading.Lock()


def get_default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Get the config file path, honouring SMS_CONFIG_PATH."""
    return EnvReader(env).get_path("SMS_CONFIG_PATH", default=DEFAULT_CONFIG_FILE)


def get_data_dir(env: Mapping[str, str] | None = None) -> Path:
    """Get the data directory, honouring SMS_DATA_DIR."""
    return EnvReader(env).get_path("SMS_DATA_DIR", default=DEFAULT_DATA_DIR)


def get_cache_dir(env: Mapping[str, str] | None = None) -> Path:
    """Get the cache root, honouring SMS_CACHE_DIR."""
    reader = EnvReader(env)
    return reader.get_path("SMS_CACHE_DIR", default=get_data_dir(env) / "cache")


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file. If None, uses default location.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    if path is None:
        path = get_default_config_path()

    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to load config file {path}: {e}") from e

    logger.debug("Loaded config from %s", path)
    return config


def _file_path(section: dict[str, Any], key: str) -> Path | None:
    value = section.get(key)
    return Path(value).expanduser() if value else None


def _build_hardware(
    reader: EnvReader, hardware_file: dict[str, Any]
) -> HardwareConfig:
    enabled = hardware_file.get("enabled", True)
    accelerators = tuple(hardware_file.get("accelerators", HardwareConfig.accelerators))

    env_accelerators = reader.get_list("SMS_HWACCEL")
    if env_accelerators is not None:
        if env_accelerators in ((), ("none",)):
            enabled = False
        else:
            enabled = True
            accelerators = env_accelerators

    vaapi_device = _file_path(hardware_file, "vaapi_device")
    return HardwareConfig(
        enabled=enabled,
        accelerators=accelerators,
        vaapi_device=vaapi_device or HardwareConfig.vaapi_device,
    )


def load_config(
    config_path: Path | None = None,
    transcoder_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> SMSConfig:
    """Build configuration with full precedence handling (uncached).

    Args:
        config_path: Path to config file (overrides SMS_CONFIG_PATH).
        transcoder_path: CLI override for the transcoder path.
        env: Environment mapping, defaults to os.environ.

    Returns:
        SMSConfig with merged configuration.

    Raises:
        ConfigError: If the config file or a merged value is invalid.
    """
    reader = EnvReader(env)
    file_config = load_config_file(config_path or get_default_config_path(env))

    tools_file = file_config.get("tools", {})
    streaming_file = file_config.get("streaming", {})
    hardware_file = file_config.get("hardware", {})
    logging_file = file_config.get("logging", {})

    data_dir = reader.get_path(
        "SMS_DATA_DIR",
        default=_file_path(streaming_file, "data_directory") or DEFAULT_DATA_DIR,
    )

    try:
        tools = ToolPathsConfig(
            transcoder=(
                transcoder_path
                or reader.get_path("SMS_TRANSCODER_PATH", must_exist=True)
                or _file_path(tools_file, "transcoder")
            ),
        )

        streaming = StreamingConfig(
            data_directory=data_dir,
            cache_directory=reader.get_path(
                "SMS_CACHE_DIR",
                default=_file_path(streaming_file, "cache_directory")
                or data_dir / "cache",
            ),
            segment_duration=reader.get_int(
                "SMS_SEGMENT_DURATION",
                streaming_file.get("segment_duration", 10),
            ),
        )

        hardware = _build_hardware(reader, hardware_file)

        logging_config = LoggingConfig(
            level=reader.get_str("SMS_LOG_LEVEL", logging_file.get("level", "info")),
            format=reader.get_str(
                "SMS_LOG_FORMAT", logging_file.get("format", "text")
            ),
            file=reader.get_path(
                "SMS_LOG_FILE", default=_file_path(logging_file, "file")
            ),
            include_stderr=logging_file.get("include_stderr", False),
            max_bytes=logging_file.get("max_bytes", 10_485_760),
            backup_count=logging_file.get("backup_count", 5),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    return SMSConfig(
        tools=tools,
        streaming=streaming,
        hardware=hardware,
        logging=logging_config,
    )


def get_config(
    config_path: Path | None = None,
    transcoder_path: Path | None = None,
) -> SMSConfig:
    """Get configuration from the process environment, cached per arguments.

    Args:
        config_path: Path to config file (overrides SMS_CONFIG_PATH).
        transcoder_path: CLI override for the transcoder path.

    Returns:
        Cached SMSConfig.
    """
    key = (config_path, transcoder_path)
    with _config_lock:
        config = _config_cache.get(key)
        if config is None:
            config = load_config(config_path, transcoder_path)
            _config_cache[key] = config
        return config


def clear_config_cache() -> None:
    """Drop cached configuration so the next get_config reloads it."""
    with _config_lock:
        _config_cache.clear()
