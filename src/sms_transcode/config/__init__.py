"""Configuration management for sms_transcode.

Configuration is loaded with precedence handling:
1. CLI options (highest priority)
2. Environment variables (SMS_*)
3. Config file (~/.sms/config.toml)
4. Default values (lowest priority)
"""

from sms_transcode.config.env import EnvReader
from sms_transcode.config.loader import (
    clear_config_cache,
    get_cache_dir,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config,
    load_config_file,
)
from sms_transcode.config.logging_factory import (
    build_logging_config,
    configure_logging_from_cli,
)
from sms_transcode.config.models import (
    HardwareConfig,
    LoggingConfig,
    SMSConfig,
    StreamingConfig,
    ToolPathsConfig,
)

__all__ = [
    # Models
    "HardwareConfig",
    "LoggingConfig",
    "SMSConfig",
    "StreamingConfig",
    "ToolPathsConfig",
    # Loader
    "EnvReader",
    "clear_config_cache",
    "get_cache_dir",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config",
    "load_config_file",
    # Logging
    "build_logging_config",
    "configure_logging_from_cli",
]
