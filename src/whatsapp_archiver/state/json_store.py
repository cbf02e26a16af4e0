"""Checkpoint persistence as one JSON file per document and sender."""

from __future__ import annotations

import hashlib
import logging
import os
import uuid
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from tenacity.wait import wait_base

from whatsapp_archiver.checkpoint import ProcessingCheckpoint
from whatsapp_archiver.filters import SenderFilter
from whatsapp_archiver.infra.retry import state_retrying
from whatsapp_archiver.models import MessageId
from whatsapp_archiver.state.exceptions import CheckpointLoadError, CheckpointSaveError

logger = logging.getLogger(__name__)

MAX_FILENAME_COMPONENT_LENGTH = 100
HASH_SUFFIX_LENGTH = 8
# Characters rejected by at least one mainstream filesystem.
_INVALID_FILENAME_CHARS = frozenset('<>:"/\\|?*') | frozenset(chr(code) for code in range(32))


class _MessageIdRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    timestamp: datetime
    content_hash: str


class _CheckpointRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: uuid.UUID
    document_id: str
    last_processed_timestamp: datetime | None = None
    processed_message_ids: list[_MessageIdRecord] = Field(default_factory=list)
    sender_name: str | None = None

    @classmethod
    def from_checkpoint(cls, checkpoint: ProcessingCheckpoint) -> _CheckpointRecord:
        ordered = sorted(checkpoint.processed_message_ids, key=lambda mid: (mid.timestamp, mid.content_hash))
        return cls(
            id=checkpoint.id,
            document_id=checkpoint.document_id,
            last_processed_timestamp=checkpoint.last_processed_timestamp,
            processed_message_ids=[
                _MessageIdRecord(timestamp=mid.timestamp, content_hash=mid.content_hash) for mid in ordered
            ],
            sender_name=checkpoint.sender_filter,
        )

    def to_checkpoint(self, provided_sender: str | None) -> ProcessingCheckpoint:
        # The name stored with the checkpoint wins over the caller's spelling.
        sender = self.sender_name if self.sender_name and self.sender_name.strip() else provided_sender
        return ProcessingCheckpoint(
            id=self.id,
            document_id=self.document_id,
            last_processed_timestamp=self.last_processed_timestamp,
            processed_message_ids={
                MessageId(timestamp=record.timestamp, content_hash=record.content_hash)
                for record in self.processed_message_ids
            },
            sender_filter=sender,
        )


def sanitize_filename_component(name: str) -> str:
    """Lowercase ``name`` and make it safe as part of a file name.

    Spaces and invalid characters become ``_``. Results longer than 100
    characters are cut and suffixed with a short hash of the original so
    distinct long names stay distinct.
    """
    sanitized = "".join("_" if char == " " or char in _INVALID_FILENAME_CHARS else char for char in name.lower())
    if len(sanitized) <= MAX_FILENAME_COMPONENT_LENGTH:
        return sanitized
    digest = hashlib.sha256(name.encode("utf-8")).hexdigest()[:HASH_SUFFIX_LENGTH]
    keep = MAX_FILENAME_COMPONENT_LENGTH - HASH_SUFFIX_LENGTH - 1
    return f"{sanitized[:keep]}_{digest}"


class JsonFileStateRepository:
    """Stores ``ProcessingCheckpoint``s under ``base_path``.

    Reads and writes are retried on transient I/O errors. Writes go to a
    temporary file that then replaces the checkpoint, so a crash never leaves
    a half-written checkpoint behind.
    """

    def __init__(self, base_path: str | Path, *, wait: wait_base | None = None) -> None:
        if not str(base_path).strip():
            msg = "base_path cannot be empty or whitespace"
            raise ValueError(msg)
        self.base_path = Path(base_path).expanduser()
        self._wait = wait

    def checkpoint_path(self, document_id: str, sender_name: str | None = None) -> Path:
        stem = sanitize_filename_component(document_id)
        if sender_name:
            stem = f"{stem}__{sanitize_filename_component(sender_name)}"
        return self.base_path / f"{stem}.json"

    def get_checkpoint(self, document_id: str, sender_filter: SenderFilter | None = None) -> ProcessingCheckpoint:
        """Load the checkpoint for ``document_id``, or start a fresh one."""
        if not document_id or not document_id.strip():
            msg = "document_id cannot be empty or whitespace"
            raise ValueError(msg)

        sender_name = sender_filter.sender_name if sender_filter else None
        path = self.checkpoint_path(document_id, sender_name)
        if not path.exists():
            logger.debug("No checkpoint at %s, starting fresh", path)
            return ProcessingCheckpoint(document_id=document_id, sender_filter=sender_name)

        try:
            for attempt in state_retrying(self._wait):
                with attempt:
                    raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CheckpointLoadError(path, str(exc)) from exc

        try:
            checkpoint = _CheckpointRecord.model_validate_json(raw).to_checkpoint(sender_name)
        except ValidationError as exc:
            raise CheckpointLoadError(path, f"{exc.error_count()} validation error(s)") from exc

        logger.debug("Loaded checkpoint %s with %d processed messages", path, checkpoint.processed_count)
        return checkpoint

    def save_checkpoint(self, checkpoint: ProcessingCheckpoint) -> Path:
        """Persist ``checkpoint`` atomically and return the file written."""
        path = self.checkpoint_path(checkpoint.document_id, checkpoint.sender_filter)
        payload = _CheckpointRecord.from_checkpoint(checkpoint).model_dump_json(
            by_alias=True, exclude_none=True, indent=2
        )

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            for attempt in state_retrying(self._wait):
                with attempt:
                    self._write_atomically(path, payload)
        except OSError as exc:
            raise CheckpointSaveError(path, str(exc)) from exc

        logger.debug("Saved checkpoint %s (%d processed messages)", path, checkpoint.processed_count)
        return path

    @staticmethod
    def _write_atomically(path: Path, payload: str) -> None:
        temp_path = path.with_name(f"{path.name}.{uuid.uuid4().hex}.tmp")
        try:
            temp_path.write_text(payload, encoding="utf-8")
            os.replace(temp_path, path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
