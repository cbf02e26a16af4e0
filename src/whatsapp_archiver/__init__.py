"""WhatsApp Archiver: parse WhatsApp chat exports and archive them to Google Docs."""

from whatsapp_archiver.input_adapters.whatsapp import parse_file, parse_lines
from whatsapp_archiver.models import Message, MessageId, ParsingMetadata, Transcript

__version__ = "0.1.0"
__all__ = [
    "Message",
    "MessageId",
    "ParsingMetadata",
    "Transcript",
    "parse_file",
    "parse_lines",
]
