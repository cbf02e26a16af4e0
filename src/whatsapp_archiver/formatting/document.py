"""Rich documents built from a whole transcript.

A ``RichDocument`` is an ordered list of sections. The Google Docs client
renders each section kind with its own styling; ``to_plain_text`` gives a
lossy text rendering for logs and tests.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime
from itertools import groupby
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from whatsapp_archiver.models import Message, Transcript

MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6
UNKNOWN_SENDER = "Unknown"
TITLE_PREFIX = "WhatsApp Conversation Export - "


def _require_text(value: str, what: str) -> None:
    if not value or not value.strip():
        msg = f"{what} cannot be empty or whitespace"
        raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    text: str

    def __post_init__(self) -> None:
        if not MIN_HEADING_LEVEL <= self.level <= MAX_HEADING_LEVEL:
            msg = f"Heading level must be between {MIN_HEADING_LEVEL} and {MAX_HEADING_LEVEL}, got {self.level}"
            raise ValueError(msg)
        _require_text(self.text, "Heading text")


@dataclass(frozen=True, slots=True)
class BoldText:
    text: str

    def __post_init__(self) -> None:
        _require_text(self.text, "Bold text")


@dataclass(frozen=True, slots=True)
class Paragraph:
    text: str

    def __post_init__(self) -> None:
        _require_text(self.text, "Paragraph text")


@dataclass(frozen=True, slots=True)
class HorizontalRule:
    pass


@dataclass(frozen=True, slots=True)
class PageBreak:
    pass


@dataclass(frozen=True, slots=True)
class EmptyLine:
    pass


@dataclass(frozen=True, slots=True)
class MetadataField:
    label: str
    value: str

    def __post_init__(self) -> None:
        _require_text(self.label, "Metadata label")


type DocumentSection = Heading | BoldText | Paragraph | HorizontalRule | PageBreak | EmptyLine | MetadataField


def section_text(section: DocumentSection) -> str:
    """Plain-text rendering of one section."""
    match section:
        case Heading(text=text) | BoldText(text=text) | Paragraph(text=text):
            return text
        case HorizontalRule():
            return "---"
        case PageBreak():
            return "[PAGE BREAK]"
        case EmptyLine():
            return ""
        case MetadataField(label=label, value=value):
            return f"{label}: {value}"
    msg = f"Unknown section type: {type(section).__name__}"
    raise TypeError(msg)


@dataclass(slots=True)
class RichDocument:
    """Ordered sections of a formatted export."""

    sections: list[DocumentSection] = field(default_factory=list)

    def add(self, section: DocumentSection) -> None:
        self.sections.append(section)

    def __iter__(self) -> Iterator[DocumentSection]:
        return iter(self.sections)

    def __len__(self) -> int:
        return len(self.sections)

    def to_plain_text(self) -> str:
        return "\n".join(section_text(section) for section in self.sections)


def format_long_date(value: date | datetime) -> str:
    """``January 5, 2024``: full month name, unpadded day."""
    return f"{value:%B} {value.day}, {value.year}"


def _title(transcript: Transcript) -> str:
    sender = transcript.messages[0].sender if transcript.messages else UNKNOWN_SENDER
    return f"{TITLE_PREFIX}{sender}"


def _by_date(messages: tuple[Message, ...]) -> Iterator[tuple[date, list[Message]]]:
    """Yield ``(date, messages)`` by ascending date, messages ascending by time."""
    ordered = sorted(messages, key=lambda message: message.timestamp)
    for day, group in groupby(ordered, key=lambda message: message.timestamp.date()):
        yield day, list(group)


class GoogleDocsDocumentFormatter:
    """Lays a transcript out as a titled, date-sectioned rich document."""

    def format_document(self, transcript: Transcript) -> RichDocument:
        document = RichDocument()
        document.add(Heading(1, _title(transcript)))
        document.add(MetadataField("Export Date", format_long_date(transcript.metadata.parsed_at)))
        document.add(MetadataField("Total Messages", str(transcript.message_count)))
        document.add(HorizontalRule())

        for day, messages in _by_date(transcript.messages):
            document.add(Heading(2, format_long_date(day)))
            for message in messages:
                document.add(BoldText(f"{message.timestamp:%H:%M}"))
                document.add(Paragraph(message.content))
                document.add(HorizontalRule())
        return document

    def format_message(self, message: Message) -> str:
        msg = f"{type(self).__name__} formats whole transcripts; use format_document() instead"
        raise NotImplementedError(msg)


class MarkdownDocumentFormatter:
    """Same layout as ``GoogleDocsDocumentFormatter``, rendered as Markdown."""

    def format_document(self, transcript: Transcript) -> str:
        lines = [
            f"# {_title(transcript)}",
            "",
            f"**Export Date:** {format_long_date(transcript.metadata.parsed_at)}",
            f"**Total Messages:** {transcript.message_count}",
            "",
            "---",
        ]
        for day, messages in _by_date(transcript.messages):
            lines.extend(["", f"## {format_long_date(day)}"])
            for message in messages:
                lines.extend(["", f"**{message.timestamp:%H:%M}**", message.content, "", "---"])
        return "\n".join(lines) + "\n"

    def format_message(self, message: Message) -> str:
        msg = f"{type(self).__name__} formats whole transcripts; use format_document() instead"
        raise NotImplementedError(msg)
