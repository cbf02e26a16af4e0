"""Timestamp grammars of WhatsApp text exports and their resolution to datetimes.

Two export dialects are recognized, tried in this order:

* 24-hour: ``[DD/MM/YYYY, HH:mm:ss] Sender: Content`` (day first)
* 12-hour: ``[M/D/YY, h:mm:ss AM] Sender: Content`` (month first)

Newer exports put a narrow no-break space before the meridiem and may prefix
the line with bidi marks; both are tolerated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, timezone

from whatsapp_archiver.constants import Grammar
from whatsapp_archiver.input_adapters.whatsapp.normalization import strip_control_characters

_LEADING_CONTROLS = "[\u200b\u200e\u200f\u202a-\u202e\u2066-\u2069]*"

TWENTY_FOUR_HOUR_PATTERN = re.compile(
    rf"^{_LEADING_CONTROLS}\[(\d{{1,2}}/\d{{1,2}}/\d{{4}}),\s*(\d{{1,2}}:\d{{2}}:\d{{2}})\]\s*([^:]+):\s*(.*)$"
)
TWELVE_HOUR_PATTERN = re.compile(
    rf"^{_LEADING_CONTROLS}\[(\d{{1,2}}/\d{{1,2}}/\d{{2,4}}),\s*(\d{{1,2}}:\d{{2}}:\d{{2}})\s*(AM|PM)\]\s*([^:]+):\s*(.*)$",
    re.IGNORECASE,
)
TIMESTAMP_PREFIX_PATTERN = re.compile(
    rf"^{_LEADING_CONTROLS}\[\d{{1,2}}/\d{{1,2}}/\d{{2,4}},\s*\d{{1,2}}:\d{{2}}:\d{{2}}(?:\s*(?:AM|PM))?\]",
    re.IGNORECASE,
)

YEAR_PIVOT = 50
_TWO_DIGIT_YEAR_LENGTH = 2
_NOON = 12


@dataclass(frozen=True, slots=True)
class GrammarMatch:
    """Raw fields captured from a message header line, not yet validated."""

    grammar: Grammar
    date_text: str
    time_text: str
    sender: str
    content: str
    meridiem: str | None = None


def starts_with_timestamp(line: str) -> bool:
    """Return True if ``line`` opens with a bracketed timestamp of either shape."""
    return TIMESTAMP_PREFIX_PATTERN.match(line) is not None


def match_line(line: str) -> GrammarMatch | None:
    """Match ``line`` against the 24-hour grammar, then the 12-hour one."""
    if found := TWENTY_FOUR_HOUR_PATTERN.match(line):
        date_text, time_text, sender, content = found.groups()
        return GrammarMatch(
            grammar=Grammar.TWENTY_FOUR_HOUR,
            date_text=date_text,
            time_text=time_text,
            sender=strip_control_characters(sender).strip(),
            content=content,
        )
    if found := TWELVE_HOUR_PATTERN.match(line):
        date_text, time_text, meridiem, sender, content = found.groups()
        return GrammarMatch(
            grammar=Grammar.TWELVE_HOUR,
            date_text=date_text,
            time_text=time_text,
            sender=strip_control_characters(sender).strip(),
            content=content,
            meridiem=meridiem.upper(),
        )
    return None


def expand_year(year_text: str) -> int:
    """Map two-digit year text onto 1950-2049; longer years pass through.

    The digit count decides, so ``"0049"`` stays year 49.
    """
    year = int(year_text)
    if len(year_text) != _TWO_DIGIT_YEAR_LENGTH:
        return year
    return 2000 + year if year < YEAR_PIVOT else 1900 + year


def to_24_hour(hour: int, meridiem: str) -> int:
    """Convert a 12-hour clock hour to 0-23."""
    if meridiem == "AM":
        return 0 if hour == _NOON else hour
    return hour if hour == _NOON else hour + _NOON


def resolve_timestamp(match: GrammarMatch, offset: timedelta | None = None) -> datetime | None:
    """Build an aware datetime from ``match``, or ``None`` if it names no real instant.

    The result carries ``offset`` as a fixed offset, UTC when omitted.
    """
    parts = match.date_text.split("/")
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        return None

    first, second = int(parts[0]), int(parts[1])
    if match.grammar is Grammar.TWENTY_FOUR_HOUR:
        day, month = first, second
    else:
        month, day = first, second
    year = expand_year(parts[2])

    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None

    time_parts = match.time_text.split(":")
    if len(time_parts) != 3 or not all(part.isdigit() for part in time_parts):
        return None
    hour, minute, second_value = (int(part) for part in time_parts)
    if match.grammar is Grammar.TWELVE_HOUR:
        if match.meridiem not in ("AM", "PM"):
            return None
        hour = to_24_hour(hour, match.meridiem)

    tzinfo = UTC if offset is None else timezone(offset)
    try:
        return datetime(year, month, day, hour, minute, second_value, tzinfo=tzinfo)
    except ValueError:
        return None
