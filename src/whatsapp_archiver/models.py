"""Domain models for parsed WhatsApp transcripts.

All models are frozen: a ``Transcript`` is built once at the end of a parse
and never mutated afterwards. Constructing a ``Message`` with a blank sender or
blank content raises ``pydantic.ValidationError``; the parser relies on this to
turn such buffers into parse failures instead of messages.
"""

from __future__ import annotations

import hashlib
import uuid
from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Annotated

from pydantic import AfterValidator, AwareDatetime, BaseModel, ConfigDict, Field, NonNegativeInt

if TYPE_CHECKING:
    from whatsapp_archiver.filters import Specification

HASH_DISPLAY_LENGTH = 8


def _require_text(value: str) -> str:
    if not value.strip():
        msg = "value cannot be empty or whitespace"
        raise ValueError(msg)
    return value


NonBlankStr = Annotated[str, AfterValidator(_require_text)]


def compute_content_hash(content: str) -> str:
    """Return the SHA-256 hex digest of ``content`` encoded as UTF-8."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


class MessageId(BaseModel):
    """Stable identity of a message: its timestamp plus a hash of its content."""

    model_config = ConfigDict(frozen=True)

    timestamp: AwareDatetime
    content_hash: NonBlankStr

    @classmethod
    def create(cls, timestamp: datetime, content: str) -> MessageId:
        if not content or not content.strip():
            msg = "content cannot be empty or whitespace"
            raise ValueError(msg)
        return cls(timestamp=timestamp, content_hash=compute_content_hash(content))

    def __str__(self) -> str:
        return f"{self.timestamp.isoformat()}_{self.content_hash[:HASH_DISPLAY_LENGTH]}"


class Message(BaseModel):
    """A single chat message."""

    model_config = ConfigDict(frozen=True)

    timestamp: AwareDatetime
    sender: NonBlankStr
    content: NonBlankStr

    @property
    def id(self) -> MessageId:
        return MessageId.create(self.timestamp, self.content)


class ParsingMetadata(BaseModel):
    """Statistics about one parse pass over a source."""

    model_config = ConfigDict(frozen=True)

    source_name: NonBlankStr
    parsed_at: datetime
    total_lines: NonNegativeInt
    parsed_message_count: NonNegativeInt
    failed_line_count: NonNegativeInt


class Transcript(BaseModel):
    """Aggregate root: the ordered messages of one export plus parse metadata.

    Messages keep source order. The parser never re-sorts them, so they are not
    necessarily chronological.
    """

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    messages: tuple[Message, ...] = ()
    metadata: ParsingMetadata

    @property
    def message_count(self) -> int:
        return len(self.messages)

    def filter_messages(self, specification: Specification[Message]) -> list[Message]:
        """Return the messages satisfying ``specification``, in source order."""
        return [message for message in self.messages if specification.is_satisfied_by(message)]

    def messages_by_sender(self, sender_name: str) -> list[Message]:
        """Return messages whose sender matches ``sender_name`` case-insensitively."""
        from whatsapp_archiver.filters import SenderFilter

        return self.filter_messages(SenderFilter(sender_name))

    def messages_in_range(self, start: datetime, end: datetime) -> list[Message]:
        """Return messages with ``start <= timestamp <= end``."""
        return [message for message in self.messages if start <= message.timestamp <= end]

    def distinct_senders(self) -> list[str]:
        """Return each sender once, in order of first appearance."""
        return list(dict.fromkeys(message.sender for message in self.messages))

    def with_messages(self, messages: Iterable[Message]) -> Transcript:
        """Return a new transcript holding ``messages`` and the same metadata."""
        return Transcript(messages=tuple(messages), metadata=self.metadata)
