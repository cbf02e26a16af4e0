"""Configuration for WhatsApp Archiver.

Settings come from, highest priority first:

1. Environment variables (``WHATSAPP_ARCHIVER_SECTION__KEY``)
2. The config file (``.whatsapp-archiver.toml``)
3. Defaults

CLI options are applied on top by the commands themselves.
"""

from __future__ import annotations

import logging
import os
import re
import tomllib
from copy import deepcopy
from datetime import timedelta
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from whatsapp_archiver.config.exceptions import (
    ConfigNotFoundError,
    ConfigValidationError,
    InvalidTimezoneOffsetError,
)
from whatsapp_archiver.constants import MessageFormatType
from whatsapp_archiver.utils.paths import expand_user_path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".whatsapp-archiver.toml"
ENV_PREFIX = "WHATSAPP_ARCHIVER_"
DEFAULT_STATE_PATH = "~/.whatsapp-archiver/state"
DEFAULT_APPLICATION_NAME = "WhatsApp Archiver"

_OFFSET_PATTERN = re.compile(r"^([+-])(\d{2}):(\d{2})$")
_MAX_OFFSET_HOURS = 23
_MAX_MINUTES = 59


def parse_offset(value: str) -> timedelta:
    """Parse ``+HH:MM`` / ``-HH:MM`` into a timedelta."""
    found = _OFFSET_PATTERN.match(value.strip())
    if found is None:
        raise InvalidTimezoneOffsetError(value)
    sign, hours, minutes = found.groups()
    if int(hours) > _MAX_OFFSET_HOURS or int(minutes) > _MAX_MINUTES:
        raise InvalidTimezoneOffsetError(value)
    offset = timedelta(hours=int(hours), minutes=int(minutes))
    return -offset if sign == "-" else offset


class GoogleDocsSettings(BaseModel):
    """Google Docs service-account access."""

    credentials_path: str | None = Field(
        default=None,
        description="Path to the service-account JSON key",
    )
    application_name: str = Field(
        default=DEFAULT_APPLICATION_NAME,
        description="Name reported to the Google API",
    )

    @property
    def credentials_file(self) -> Path | None:
        return expand_user_path(self.credentials_path)


class StateSettings(BaseModel):
    """Where upload checkpoints are stored."""

    base_path: str = Field(
        default=DEFAULT_STATE_PATH,
        description="Directory holding checkpoint JSON files",
    )

    @field_validator("base_path")
    @classmethod
    def validate_base_path(cls, v: str) -> str:
        if not v.strip():
            msg = "state.base_path cannot be empty"
            raise ValueError(msg)
        if "\x00" in v:
            msg = "state.base_path contains invalid characters"
            raise ValueError(msg)
        return v

    @property
    def directory(self) -> Path:
        return Path(self.base_path).expanduser()


class ParserSettings(BaseModel):
    """Parsing options."""

    timezone_offset: str = Field(
        default="+00:00",
        description="UTC offset the exports were written in (+HH:MM)",
    )

    @field_validator("timezone_offset")
    @classmethod
    def validate_timezone_offset(cls, v: str) -> str:
        try:
            parse_offset(v)
        except InvalidTimezoneOffsetError as e:
            raise ValueError(str(e)) from e
        return v.strip()

    @property
    def offset(self) -> timedelta:
        return parse_offset(self.timezone_offset)


class OutputSettings(BaseModel):
    """Output format settings."""

    format: MessageFormatType = Field(
        default=MessageFormatType.DEFAULT,
        description="Formatter used for uploads and console output",
    )


class ArchiverConfig(BaseSettings):
    """Root configuration, mirroring the ``.whatsapp-archiver.toml`` schema."""

    google_docs: GoogleDocsSettings = Field(default_factory=GoogleDocsSettings)
    state: StateSettings = Field(default_factory=StateSettings)
    parser: ParserSettings = Field(default_factory=ParserSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)

    model_config = SettingsConfigDict(
        extra="forbid",
        validate_assignment=True,
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
    )


def find_config(start_dir: Path) -> Path | None:
    """Search ``start_dir`` and its parents for a config file."""
    current = start_dir.expanduser().resolve()
    for candidate in (current, *current.parents):
        config_path = candidate / CONFIG_FILENAME
        if config_path.is_file():
            return config_path
    return None


def _collect_env_override_paths() -> set[tuple[str, ...]]:
    """Return the config paths set through environment variables."""
    env_paths: set[tuple[str, ...]] = set()
    for key in os.environ:
        if not key.startswith(ENV_PREFIX):
            continue
        parts = [part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part]
        if parts:
            env_paths.add(tuple(parts))
    return env_paths


def _merge_config(
    base: dict[str, Any],
    override: dict[str, Any],
    env_override_paths: set[tuple[str, ...]],
    current_path: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Merge ``override`` into ``base``, skipping keys provided via env vars."""
    merged = deepcopy(base)
    for key, value in override.items():
        path = (*current_path, str(key).lower())
        if path in env_override_paths:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_config(merged[key], value, env_override_paths, path)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Path | None = None, *, start_dir: Path | None = None) -> ArchiverConfig:
    """Load configuration from an explicit file or the nearest config file.

    Without a file, defaults plus environment overrides are returned.

    Raises:
        ConfigNotFoundError: If ``config_path`` is given but missing.
        ConfigValidationError: If the merged configuration is invalid.

    """
    if config_path is not None:
        config_path = config_path.expanduser()
        if not config_path.is_file():
            raise ConfigNotFoundError(config_path)
    else:
        config_path = find_config(start_dir or Path.cwd())

    try:
        base_config = ArchiverConfig()
    except ValidationError as e:
        raise ConfigValidationError(None, e.errors()) from e

    if config_path is None:
        logger.debug("No %s found, using defaults", CONFIG_FILENAME)
        return base_config

    logger.info("Loading config from %s", config_path)
    try:
        file_data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(config_path, [{"loc": ("toml",), "msg": str(e)}]) from e

    merged = _merge_config(base_config.model_dump(mode="json"), file_data, _collect_env_override_paths())
    try:
        return ArchiverConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigValidationError(config_path, e.errors()) from e


def save_config(config: ArchiverConfig, directory: Path) -> Path:
    """Write ``config`` to ``directory/.whatsapp-archiver.toml`` and return the path."""
    directory.mkdir(parents=True, exist_ok=True)
    config_path = directory / CONFIG_FILENAME

    def _clean_nones(d: dict[str, Any]) -> dict[str, Any]:
        cleaned = {}
        for k, v in d.items():
            if v is None:
                continue
            cleaned[k] = _clean_nones(v) if isinstance(v, dict) else v
        return cleaned

    data = _clean_nones(config.model_dump(mode="json"))
    config_path.write_text(tomli_w.dumps(data), encoding="utf-8")
    logger.debug("Saved config to %s", config_path)
    return config_path
