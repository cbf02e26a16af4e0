"""Persistence of upload checkpoints."""

from whatsapp_archiver.state.exceptions import CheckpointLoadError, CheckpointSaveError, StateError
from whatsapp_archiver.state.json_store import JsonFileStateRepository, sanitize_filename_component

__all__ = [
    "CheckpointLoadError",
    "CheckpointSaveError",
    "JsonFileStateRepository",
    "StateError",
    "sanitize_filename_component",
]
