"""Tests for per-message formatters and the formatter factory."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from whatsapp_archiver.constants import MessageFormatType
from whatsapp_archiver.formatting import (
    CompactMessageFormatter,
    DefaultMessageFormatter,
    GoogleDocsDocumentFormatter,
    VerboseMessageFormatter,
    create_formatter,
    is_document_formatter,
)


@pytest.fixture
def message(make_message):
    return make_message(
        content="Hello there",
        sender="Alice",
        timestamp=datetime(2024, 1, 5, 14, 30, 15, tzinfo=timezone(timedelta(hours=-3))),
    )


def test_default_formatter(message):
    assert DefaultMessageFormatter().format_message(message) == "[05/01/2024, 14:30:15] Alice: Hello there"


def test_compact_formatter(message):
    assert CompactMessageFormatter().format_message(message) == "Alice: Hello there"


def test_verbose_formatter(message):
    assert VerboseMessageFormatter().format_message(message) == (
        "Date: Friday, January 05, 2024\nTime: 02:30:15 PM -03:00\nFrom: Alice\nMessage: Hello there"
    )


def test_verbose_formatter_utc(make_message):
    message = make_message(timestamp=datetime(2024, 1, 5, 9, 5, 0, tzinfo=UTC))

    assert "Time: 09:05:00 AM +00:00" in VerboseMessageFormatter().format_message(message)


@pytest.mark.parametrize(
    ("format_type", "expected_class"),
    [
        (MessageFormatType.DEFAULT, DefaultMessageFormatter),
        (MessageFormatType.COMPACT, CompactMessageFormatter),
        (MessageFormatType.VERBOSE, VerboseMessageFormatter),
        (MessageFormatType.GOOGLE_DOCS, GoogleDocsDocumentFormatter),
        (MessageFormatType.MARKDOWN_DOCUMENT, GoogleDocsDocumentFormatter),
        ("compact", CompactMessageFormatter),
    ],
)
def test_create_formatter(format_type, expected_class):
    assert isinstance(create_formatter(format_type), expected_class)


def test_create_formatter_rejects_unknown_format():
    with pytest.raises(ValueError):
        create_formatter("fancy")


@pytest.mark.parametrize(
    ("format_type", "expected"),
    [
        (MessageFormatType.DEFAULT, False),
        (MessageFormatType.COMPACT, False),
        (MessageFormatType.VERBOSE, False),
        (MessageFormatType.GOOGLE_DOCS, True),
        (MessageFormatType.MARKDOWN_DOCUMENT, True),
    ],
)
def test_is_document_formatter(format_type, expected: bool):
    assert is_document_formatter(format_type) is expected
