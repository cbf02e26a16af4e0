"""Formatting of messages and transcripts for output."""

from whatsapp_archiver.formatting.document import (
    BoldText,
    DocumentSection,
    EmptyLine,
    GoogleDocsDocumentFormatter,
    Heading,
    HorizontalRule,
    MarkdownDocumentFormatter,
    MetadataField,
    PageBreak,
    Paragraph,
    RichDocument,
)
from whatsapp_archiver.formatting.messages import (
    CompactMessageFormatter,
    DefaultMessageFormatter,
    DocumentFormatter,
    MessageFormatter,
    VerboseMessageFormatter,
    create_formatter,
    is_document_formatter,
)

__all__ = [
    "BoldText",
    "CompactMessageFormatter",
    "DefaultMessageFormatter",
    "DocumentFormatter",
    "DocumentSection",
    "EmptyLine",
    "GoogleDocsDocumentFormatter",
    "Heading",
    "HorizontalRule",
    "MarkdownDocumentFormatter",
    "MessageFormatter",
    "MetadataField",
    "PageBreak",
    "Paragraph",
    "RichDocument",
    "VerboseMessageFormatter",
    "create_formatter",
    "is_document_formatter",
]
