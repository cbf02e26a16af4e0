"""Custom exceptions for configuration handling."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from whatsapp_archiver.exceptions import ArchiverError


class ConfigError(ArchiverError):
    """Base exception for all configuration-related errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested configuration file does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Configuration file not found: {path}")


class ConfigValidationError(ConfigError):
    """Raised when the configuration fails validation."""

    def __init__(self, source: Path | None, errors: Sequence[dict[str, Any]] | None = None) -> None:
        self.source = source
        self.errors = list(errors or [])
        where = f" in {source}" if source else ""
        details = "; ".join(
            f"{' -> '.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
            for error in self.errors
        )
        message = f"Configuration validation failed{where} with {len(self.errors)} error(s)"
        super().__init__(f"{message}: {details}" if details else f"{message}.")


class InvalidTimezoneOffsetError(ConfigError):
    """Raised when a UTC offset string is not of the form ``+HH:MM``."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid timezone offset: '{value}'. Expected +HH:MM or -HH:MM.")
