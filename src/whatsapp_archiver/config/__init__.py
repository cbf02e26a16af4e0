"""Configuration loading and validation."""

from whatsapp_archiver.config.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    ConfigValidationError,
    InvalidTimezoneOffsetError,
)
from whatsapp_archiver.config.settings import (
    CONFIG_FILENAME,
    ArchiverConfig,
    find_config,
    load_config,
    parse_offset,
    save_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ArchiverConfig",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "InvalidTimezoneOffsetError",
    "find_config",
    "load_config",
    "parse_offset",
    "save_config",
]
