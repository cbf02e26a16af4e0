"""Single-pass parser turning WhatsApp export lines into a ``Transcript``.

The scanner is either idle or building one message. A line opening with a
bracketed timestamp closes the message being built and starts the next one;
any other line continues the current message, or is an orphan when there is
none. Malformed content never aborts the pass: it is counted as a failed line
and scanning continues.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from whatsapp_archiver.input_adapters.whatsapp.classifier import NoiseKind, classify
from whatsapp_archiver.input_adapters.whatsapp.grammar import match_line, resolve_timestamp, starts_with_timestamp
from whatsapp_archiver.input_adapters.whatsapp.normalization import strip_control_characters, strip_edit_tag
from whatsapp_archiver.input_adapters.whatsapp.reader import read_lines
from whatsapp_archiver.models import Message, ParsingMetadata, Transcript

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MessageBuffer:
    """A message whose body may still grow with continuation lines."""

    timestamp: datetime
    sender: str
    lines: list[str] = field(default_factory=list)

    def append(self, line: str) -> None:
        self.lines.append(strip_control_characters(line))

    @property
    def content(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True, slots=True)
class Accepted:
    message: Message


@dataclass(frozen=True, slots=True)
class Filtered:
    reason: NoiseKind


@dataclass(frozen=True, slots=True)
class Failed:
    reason: str


type ParseOutcome = Accepted | Filtered | Failed


@dataclass(slots=True)
class ParseStats:
    """Counters collected during one pass."""

    total_lines: int = 0
    messages: list[Message] = field(default_factory=list)
    failed_lines: int = 0
    filtered: int = 0

    def record(self, outcome: ParseOutcome) -> None:
        match outcome:
            case Accepted(message=message):
                self.messages.append(message)
            case Filtered(reason=reason):
                self.filtered += 1
                logger.debug("Dropped %s message", reason.value)
            case Failed(reason=reason):
                self.fail(reason)

    def fail(self, reason: str) -> None:
        self.failed_lines += 1
        logger.debug("Failed line: %s", reason)

    def to_transcript(self, source_name: str) -> Transcript:
        metadata = ParsingMetadata(
            source_name=source_name,
            parsed_at=datetime.now(UTC),
            total_lines=self.total_lines,
            parsed_message_count=len(self.messages),
            failed_line_count=self.failed_lines,
        )
        return Transcript(messages=tuple(self.messages), metadata=metadata)


def finalize(buffer: MessageBuffer) -> ParseOutcome:
    """Normalize a completed buffer and decide what becomes of it."""
    content = strip_edit_tag(strip_control_characters(buffer.content))
    if not content.strip():
        return Failed("empty content")
    if not buffer.sender:
        return Failed("empty sender")
    if (kind := classify(content)) is not None:
        return Filtered(kind)
    try:
        return Accepted(Message(timestamp=buffer.timestamp, sender=buffer.sender, content=content))
    except ValidationError as exc:
        return Failed(f"invalid message: {exc.error_count()} validation error(s)")


def _open_buffer(line: str, offset: timedelta | None) -> MessageBuffer | None:
    found = match_line(line)
    if found is None:
        return None
    timestamp = resolve_timestamp(found, offset)
    if timestamp is None:
        return None
    return MessageBuffer(timestamp=timestamp, sender=found.sender, lines=[found.content])


def parse_lines(
    lines: Iterable[str],
    source_name: str,
    *,
    timezone_offset: timedelta | None = None,
) -> Transcript:
    """Parse export ``lines`` into a transcript.

    Args:
        lines: Raw lines without line terminators.
        source_name: Identifier recorded in the metadata, usually the file name.
        timezone_offset: Fixed UTC offset the export was written in. UTC if omitted.

    Raises:
        ValueError: If ``source_name`` is blank or the offset is not a valid UTC offset.

    """
    if not source_name or not source_name.strip():
        msg = "source_name cannot be empty or whitespace"
        raise ValueError(msg)
    if timezone_offset is not None:
        timezone(timezone_offset)  # raises ValueError outside (-24h, 24h)

    stats = ParseStats()
    buffer: MessageBuffer | None = None

    for line in lines:
        stats.total_lines += 1
        if starts_with_timestamp(line):
            if buffer is not None:
                stats.record(finalize(buffer))
            buffer = _open_buffer(line, timezone_offset)
            if buffer is None:
                stats.fail("malformed timestamp line")
        elif buffer is not None:
            buffer.append(line)
        else:
            stats.fail("orphan line")

    if buffer is not None:
        stats.record(finalize(buffer))

    logger.info(
        "Parsed %s: %d messages, %d failed lines, %d filtered, %d lines total",
        source_name,
        len(stats.messages),
        stats.failed_lines,
        stats.filtered,
        stats.total_lines,
    )
    return stats.to_transcript(source_name)


def parse_file(path: str | Path, *, timezone_offset: timedelta | None = None) -> Transcript:
    """Read and parse an exported chat file, naming the source after the file."""
    lines = read_lines(path)
    return parse_lines(lines, Path(path).name, timezone_offset=timezone_offset)
