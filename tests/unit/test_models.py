"""Tests for the transcript domain models."""

import hashlib
from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from whatsapp_archiver.models import Message, MessageId, ParsingMetadata, Transcript


@pytest.mark.parametrize(("sender", "content"), [("", "Hi"), ("   ", "Hi"), ("Alice", ""), ("Alice", " \n ")])
def test_message_rejects_blank_fields(sender: str, content: str):
    with pytest.raises(ValidationError):
        Message(timestamp=datetime(2024, 1, 1, tzinfo=UTC), sender=sender, content=content)


def test_message_requires_aware_timestamp():
    with pytest.raises(ValidationError):
        Message(timestamp=datetime(2024, 1, 1), sender="Alice", content="Hi")  # noqa: DTZ001


def test_message_is_immutable(make_message):
    message = make_message()

    with pytest.raises(ValidationError):
        message.content = "changed"


def test_message_id_hashes_content(make_message):
    """Verify the id is the timestamp plus the SHA-256 of the UTF-8 content."""
    message = make_message(content="Olá")

    assert message.id.timestamp == message.timestamp
    assert message.id.content_hash == hashlib.sha256("Olá".encode()).hexdigest()


def test_message_ids_are_equal_for_equal_content(make_message):
    """Verify ids are stable and usable as set members."""
    first = make_message(sender="Alice").id
    second = make_message(sender="Bob").id

    assert first == second
    assert len({first, second}) == 1


def test_message_id_str():
    timestamp = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
    message_id = MessageId.create(timestamp, "Hello")

    assert str(message_id) == f"2024-01-15T10:30:00+00:00_{message_id.content_hash[:8]}"


def test_message_id_create_rejects_empty_content():
    with pytest.raises(ValueError, match="content"):
        MessageId.create(datetime(2024, 1, 1, tzinfo=UTC), "  ")


def test_parsing_metadata_rejects_negative_counts():
    with pytest.raises(ValidationError):
        ParsingMetadata(
            source_name="chat.txt",
            parsed_at=datetime(2024, 1, 1, tzinfo=UTC),
            total_lines=-1,
            parsed_message_count=0,
            failed_line_count=0,
        )


def test_transcript_queries(make_message, make_transcript):
    # Given
    base = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
    messages = [
        make_message("one", "Alice", base),
        make_message("two", "bob", base + timedelta(hours=1)),
        make_message("three", "ALICE", base + timedelta(hours=2)),
    ]
    transcript = make_transcript(messages)

    # When / Then
    assert transcript.message_count == 3
    assert [m.content for m in transcript.messages_by_sender("alice")] == ["one", "three"]
    assert [m.content for m in transcript.messages_in_range(base, base + timedelta(hours=1))] == ["one", "two"]
    assert transcript.distinct_senders() == ["Alice", "bob", "ALICE"]


def test_with_messages_keeps_metadata(make_message, make_transcript):
    transcript = make_transcript([make_message("one"), make_message("two")])

    narrowed = transcript.with_messages(transcript.messages[:1])

    assert isinstance(narrowed, Transcript)
    assert narrowed.metadata == transcript.metadata
    assert narrowed.message_count == 1
    assert transcript.message_count == 2
