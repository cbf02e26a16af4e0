"""Idempotency checkpoint recording which messages reached a document."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from whatsapp_archiver.models import MessageId


class ProcessingCheckpoint(BaseModel):
    """Upload progress for one document, optionally scoped to one sender.

    ``last_processed_timestamp`` only moves forward: marking an older message
    as processed records its id but leaves the high-water mark alone.
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    document_id: str
    last_processed_timestamp: datetime | None = None
    processed_message_ids: set[MessageId] = Field(default_factory=set)
    sender_filter: str | None = None

    @field_validator("document_id")
    @classmethod
    def _document_id_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "document_id cannot be empty or whitespace"
            raise ValueError(msg)
        return value

    @property
    def processed_count(self) -> int:
        return len(self.processed_message_ids)

    def has_been_processed(self, message_id: MessageId) -> bool:
        return message_id in self.processed_message_ids

    def mark_as_processed(self, message_id: MessageId) -> None:
        self.processed_message_ids.add(message_id)
        if self.last_processed_timestamp is None or message_id.timestamp > self.last_processed_timestamp:
            self.last_processed_timestamp = message_id.timestamp
