"""Exceptions raised by checkpoint storage."""

from __future__ import annotations

from pathlib import Path

from whatsapp_archiver.exceptions import ArchiverError


class StateError(ArchiverError):
    """Base exception for checkpoint storage errors."""


class CheckpointLoadError(StateError):
    """Raised when a checkpoint file exists but cannot be read or decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load checkpoint from '{path}': {reason}")


class CheckpointSaveError(StateError):
    """Raised when a checkpoint cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save checkpoint to '{path}': {reason}")
