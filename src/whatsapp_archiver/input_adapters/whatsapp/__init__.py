"""WhatsApp text export parsing."""

from whatsapp_archiver.input_adapters.whatsapp.grammar import GrammarMatch, match_line, resolve_timestamp, starts_with_timestamp
from whatsapp_archiver.input_adapters.whatsapp.parsing import parse_file, parse_lines
from whatsapp_archiver.input_adapters.whatsapp.reader import read_lines

__all__ = [
    "GrammarMatch",
    "match_line",
    "parse_file",
    "parse_lines",
    "read_lines",
    "resolve_timestamp",
    "starts_with_timestamp",
]
