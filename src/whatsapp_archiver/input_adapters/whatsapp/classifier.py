"""Noise classification for finalized WhatsApp messages.

Noise is content that is dropped from the transcript without counting as a
parse failure: bare links, media and deleted-message placeholders, attachment
markers and group notifications generated by WhatsApp itself.

The system-notification rules are heuristics tuned against real exports. They
misfire on some short messages shaped like notifications ("John added sugar")
and miss notification wording not listed here. Both are known and accepted;
change the tables below only together with a test showing the new behavior.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)


class NoiseKind(str, Enum):
    """Why a message was dropped."""

    LINK_ONLY = "link_only"
    PLACEHOLDER = "placeholder"
    ATTACHMENT = "attachment"
    SYSTEM_NOTIFICATION = "system_notification"


PLACEHOLDERS = frozenset(
    {
        "image omitted",
        "video omitted",
        "audio omitted",
        "sticker omitted",
        "gif omitted",
        "document omitted",
        "contact card omitted",
        "<media omitted>",
        "this message was deleted",
        "you deleted this message",
    }
)

_ATTACHMENT_PREFIX = "<attached:"

# A "?" or "!" or any of these markers means a person is talking.
CONVERSATIONAL_CHARACTERS = ("?", "!")
CONVERSATIONAL_MARKERS = ("someone ", "yesterday", "the new member")
_STANDALONE_WHO = re.compile(r"\bwho\b")

NOTIFICATION_SUFFIXES = ("added you", "left", "joined")
NOTIFICATION_PHRASES = (
    "changed this group's icon",
    "changed the group icon",
    "deleted this group's icon",
    "changed the group description",
    "changed this group's description",
    "deleted the group description",
    "changed this group's settings",
    "changed the group settings",
    "joined using this group's invite link",
    "reset this group's invite link",
    "messages and calls are end-to-end encrypted",
)
ADMIN_PHRASES = (
    "you're now an admin",
    "you're no longer an admin",
    "now an admin",
    "no longer an admin",
)

ADDED_EXCLUSIONS = ("i added", "to my", "contacts", "added a ", "added the ", "added some ")
_NAME = r"[A-ZÀ-Þ][\w'\-]*"
_ADDED_SHAPE = re.compile(rf"^{_NAME}(?:\s+{_NAME})*\s+added\s+\S+(?:\s+\S+){{0,3}}$")

PRONOUN_SUBJECTS = ("i ", "we ", "you ", "they ", "he ", "she ", "it ", "my ", "our ")
REMOVED_EXCLUSIONS = tuple(
    f"removed {word} " for word in ("the", "my", "your", "our", "their", "his", "her")
)
_REMOVED_SHAPE = re.compile(r"^\S.*\sremoved\s+\S")
_CREATED_GROUP_SHAPE = re.compile(r"\bcreated group [\"“].+[\"”]")
_SUBJECT_CHANGE_SHAPE = re.compile(r"\bchanged the subject (?:from|to) [\"“]")

_TRAILING_PUNCTUATION = ".,;: \t"


def is_link_only(content: str) -> bool:
    text = content.strip()
    return text.startswith(("http://", "https://")) and not any(char.isspace() for char in text)


def is_placeholder(content: str) -> bool:
    return content.strip().lower() in PLACEHOLDERS


def is_attachment(content: str) -> bool:
    text = content.strip()
    if not text.lower().startswith(_ATTACHMENT_PREFIX) or not text.endswith(">"):
        return False
    return bool(text[len(_ATTACHMENT_PREFIX) : -1].strip())


def _is_conversational(lowered: str) -> bool:
    if any(char in lowered for char in CONVERSATIONAL_CHARACTERS):
        return True
    if any(marker in lowered for marker in CONVERSATIONAL_MARKERS):
        return True
    return _STANDALONE_WHO.search(lowered) is not None


def _is_added_notification(original: str, lowered: str) -> bool:
    if " added " not in f" {lowered} ":
        return False
    if any(phrase in lowered for phrase in ADDED_EXCLUSIONS):
        return False
    return _ADDED_SHAPE.match(original) is not None


def _is_removed_notification(lowered: str) -> bool:
    if not _REMOVED_SHAPE.match(lowered):
        return False
    if lowered.startswith(PRONOUN_SUBJECTS):
        return False
    padded = f"{lowered} "
    return not any(phrase in padded for phrase in REMOVED_EXCLUSIONS)


def is_system_notification(content: str) -> bool:
    """Return True if ``content`` reads like a WhatsApp group notification."""
    original = content.strip()
    lowered = original.lower().replace("’", "'")
    if not lowered or _is_conversational(lowered):
        return False

    trimmed = lowered.rstrip(_TRAILING_PUNCTUATION)
    if trimmed.endswith(NOTIFICATION_SUFFIXES):
        return True
    if any(phrase in lowered for phrase in NOTIFICATION_PHRASES):
        return True
    if any(trimmed == phrase or trimmed.endswith(phrase) for phrase in ADMIN_PHRASES):
        return True
    if _is_added_notification(original.rstrip(_TRAILING_PUNCTUATION), lowered):
        return True
    if _is_removed_notification(lowered):
        return True
    if _CREATED_GROUP_SHAPE.search(lowered) and not lowered.startswith(PRONOUN_SUBJECTS):
        return True
    return _SUBJECT_CHANGE_SHAPE.search(lowered) is not None


RULES: tuple[tuple[NoiseKind, Callable[[str], bool]], ...] = (
    (NoiseKind.LINK_ONLY, is_link_only),
    (NoiseKind.PLACEHOLDER, is_placeholder),
    (NoiseKind.ATTACHMENT, is_attachment),
    (NoiseKind.SYSTEM_NOTIFICATION, is_system_notification),
)


def classify(content: str) -> NoiseKind | None:
    """Return the first noise rule ``content`` trips, or ``None`` to keep it."""
    for kind, rule in RULES:
        if rule(content):
            return kind
    return None


def is_noise(content: str) -> bool:
    return classify(content) is not None
