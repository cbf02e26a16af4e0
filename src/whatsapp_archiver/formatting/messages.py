"""Per-message text formatters and the formatter factory."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Protocol

from whatsapp_archiver.constants import MessageFormatType
from whatsapp_archiver.formatting.document import GoogleDocsDocumentFormatter

if TYPE_CHECKING:
    from whatsapp_archiver.formatting.document import RichDocument
    from whatsapp_archiver.models import Message, Transcript

logger = logging.getLogger(__name__)


class MessageFormatter(Protocol):
    def format_message(self, message: Message) -> str: ...


class DocumentFormatter(MessageFormatter, Protocol):
    def format_document(self, transcript: Transcript) -> RichDocument: ...


def format_utc_offset(value: datetime) -> str:
    """``+05:30`` style offset of an aware datetime."""
    offset = value.utcoffset() or timedelta(0)
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


class DefaultMessageFormatter:
    """``[05/01/2024, 14:30:00] Alice: Hello``"""

    def format_message(self, message: Message) -> str:
        return f"[{message.timestamp:%d/%m/%Y, %H:%M:%S}] {message.sender}: {message.content}"


class CompactMessageFormatter:
    """``Alice: Hello``"""

    def format_message(self, message: Message) -> str:
        return f"{message.sender}: {message.content}"


class VerboseMessageFormatter:
    """Four labelled lines per message: date, time with offset, sender, content."""

    def format_message(self, message: Message) -> str:
        timestamp = message.timestamp
        return "\n".join(
            [
                f"Date: {timestamp:%A, %B %d, %Y}",
                f"Time: {timestamp:%I:%M:%S %p} {format_utc_offset(timestamp)}",
                f"From: {message.sender}",
                f"Message: {message.content}",
            ]
        )


_DOCUMENT_FORMATS = frozenset({MessageFormatType.GOOGLE_DOCS, MessageFormatType.MARKDOWN_DOCUMENT})


def create_formatter(format_type: MessageFormatType | str) -> MessageFormatter:
    """Return the formatter registered for ``format_type``.

    ``markdown_document`` is deprecated and resolves to the Google Docs
    document formatter.

    Raises:
        ValueError: If ``format_type`` names no known format.

    """
    kind = MessageFormatType(format_type)
    match kind:
        case MessageFormatType.DEFAULT:
            return DefaultMessageFormatter()
        case MessageFormatType.COMPACT:
            return CompactMessageFormatter()
        case MessageFormatType.VERBOSE:
            return VerboseMessageFormatter()
        case MessageFormatType.MARKDOWN_DOCUMENT:
            logger.warning("Format 'markdown_document' is deprecated; using 'google_docs' instead")
            return GoogleDocsDocumentFormatter()
        case MessageFormatType.GOOGLE_DOCS:
            return GoogleDocsDocumentFormatter()
    msg = f"Unsupported format: {format_type}"
    raise ValueError(msg)


def is_document_formatter(format_type: MessageFormatType | str) -> bool:
    """Return True if ``format_type`` produces a whole-document layout."""
    return MessageFormatType(format_type) in _DOCUMENT_FORMATS
