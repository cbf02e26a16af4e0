"""Text clean-up applied to senders and message bodies."""

from __future__ import annotations

import re

# ZWSP, LRM/RLM, bidi embeddings/overrides/PDF and bidi isolates.
_CONTROL_CHARACTERS = re.compile("[\u200b\u200e\u200f\u202a-\u202e\u2066-\u2069]")

EDIT_MARKER = "<This message was edited>"


def strip_control_characters(text: str) -> str:
    """Remove invisible directional-formatting characters from ``text``."""
    if not text or text.isascii():
        return text
    return _CONTROL_CHARACTERS.sub("", text)


def strip_edit_tag(content: str) -> str:
    """Drop a trailing edit marker and the whitespace it leaves behind."""
    if content.endswith(EDIT_MARKER):
        return content[: -len(EDIT_MARKER)].rstrip()
    return content
