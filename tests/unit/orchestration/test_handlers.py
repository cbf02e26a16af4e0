"""Tests for the parse and upload command handlers."""

from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError
from tenacity import wait_none

from whatsapp_archiver.constants import MessageFormatType
from whatsapp_archiver.filters import SenderFilter
from whatsapp_archiver.formatting import RichDocument
from whatsapp_archiver.orchestration import (
    ParseChatCommand,
    ParseChatHandler,
    UploadToGoogleDocsCommand,
    UploadToGoogleDocsHandler,
)
from whatsapp_archiver.state.exceptions import CheckpointSaveError
from whatsapp_archiver.state.json_store import JsonFileStateRepository

CHAT_LINES = [
    "[01/01/2024, 10:05:00] Alice: Second",
    "[01/01/2024, 10:00:00] Alice: First",
    "[01/01/2024, 10:01:00] Bob: Not mine",
    "[01/01/2024, 10:02:00] alice: Lowercase sender",
]


class FakeDocs:
    def __init__(self) -> None:
        self.appended: list[tuple[str, str]] = []
        self.rich: list[tuple[str, RichDocument]] = []

    def append(self, document_id: str, content: str) -> None:
        self.appended.append((document_id, content))

    def append_rich(self, document_id: str, document: RichDocument) -> None:
        self.rich.append((document_id, document))


@pytest.fixture
def chat_file(write_chat) -> Path:
    return write_chat(CHAT_LINES)


@pytest.fixture
def state(tmp_path: Path) -> JsonFileStateRepository:
    return JsonFileStateRepository(tmp_path / "state", wait=wait_none())


def test_parse_handler_returns_everything_without_filter(chat_file: Path):
    transcript = ParseChatHandler().handle(ParseChatCommand(file_path=str(chat_file)))

    assert transcript.message_count == 4


def test_parse_handler_filters_by_sender_and_keeps_metadata(chat_file: Path):
    transcript = ParseChatHandler().handle(ParseChatCommand(file_path=str(chat_file), sender_filter="ALICE"))

    assert [m.content for m in transcript.messages] == ["Second", "First", "Lowercase sender"]
    assert transcript.metadata.parsed_message_count == 4


def test_parse_handler_passes_offset(chat_file: Path):
    command = ParseChatCommand(file_path=str(chat_file), timezone_offset=timedelta(hours=1))

    transcript = ParseChatHandler().handle(command)

    assert transcript.messages[0].timestamp.utcoffset() == timedelta(hours=1)


def test_upload_appends_sorted_lines_and_saves_checkpoint(chat_file: Path, state: JsonFileStateRepository):
    # Given
    docs = FakeDocs()
    handler = UploadToGoogleDocsHandler(docs, state)
    command = UploadToGoogleDocsCommand(file_path=str(chat_file), sender="Alice", document_id="doc-1")

    # When
    uploaded = handler.handle(command)

    # Then
    assert uploaded == 3
    assert docs.appended == [
        (
            "doc-1",
            "[01/01/2024, 10:00:00] Alice: First\n"
            "[01/01/2024, 10:02:00] alice: Lowercase sender\n"
            "[01/01/2024, 10:05:00] Alice: Second",
        )
    ]
    checkpoint = state.get_checkpoint("doc-1", SenderFilter("Alice"))
    assert checkpoint.processed_count == 3
    assert checkpoint.last_processed_timestamp == datetime(2024, 1, 1, 10, 5, tzinfo=UTC)


def test_upload_is_idempotent(chat_file: Path, state: JsonFileStateRepository):
    """Verify a second run uploads nothing."""
    docs = FakeDocs()
    handler = UploadToGoogleDocsHandler(docs, state)
    command = UploadToGoogleDocsCommand(file_path=str(chat_file), sender="Alice", document_id="doc-1")

    assert handler.handle(command) == 3
    assert handler.handle(command) == 0
    assert len(docs.appended) == 1


def test_upload_only_sends_new_messages(write_chat, state: JsonFileStateRepository):
    # Given
    docs = FakeDocs()
    handler = UploadToGoogleDocsHandler(docs, state)
    first = write_chat(CHAT_LINES[:2], name="first.txt")
    second = write_chat([*CHAT_LINES[:2], "[02/01/2024, 08:00:00] Alice: Next day"], name="second.txt")

    # When
    handler.handle(UploadToGoogleDocsCommand(file_path=str(first), sender="Alice", document_id="doc-1"))
    uploaded = handler.handle(UploadToGoogleDocsCommand(file_path=str(second), sender="Alice", document_id="doc-1"))

    # Then
    assert uploaded == 1
    assert docs.appended[-1] == ("doc-1", "[02/01/2024, 08:00:00] Alice: Next day")


def test_upload_with_document_format_uses_rich_append(chat_file: Path, state: JsonFileStateRepository):
    docs = FakeDocs()
    handler = UploadToGoogleDocsHandler(docs, state)
    command = UploadToGoogleDocsCommand(
        file_path=str(chat_file),
        sender="Alice",
        document_id="doc-1",
        formatter_type=MessageFormatType.GOOGLE_DOCS,
    )

    assert handler.handle(command) == 3

    assert docs.appended == []
    document_id, document = docs.rich[0]
    assert document_id == "doc-1"
    text = document.to_plain_text()
    assert "Total Messages: 3" in text
    assert text.index("First") < text.index("Lowercase sender") < text.index("Second")


def test_upload_uses_cached_transcript(state: JsonFileStateRepository, make_message, make_transcript):
    """Verify a cached transcript skips parsing entirely."""
    docs = FakeDocs()

    def parser(*_args, **_kwargs):
        pytest.fail("parser should not be called")

    handler = UploadToGoogleDocsHandler(docs, state, parser=parser)
    command = UploadToGoogleDocsCommand(
        file_path="unused.txt",
        sender="Alice",
        document_id="doc-1",
        formatter_type=MessageFormatType.COMPACT,
        cached_transcript=make_transcript([make_message("Cached")]),
    )

    assert handler.handle(command) == 1
    assert docs.appended == [("doc-1", "Alice: Cached")]


def test_upload_without_matching_messages_returns_zero(chat_file: Path, state: JsonFileStateRepository):
    docs = FakeDocs()
    handler = UploadToGoogleDocsHandler(docs, state)

    uploaded = handler.handle(UploadToGoogleDocsCommand(file_path=str(chat_file), sender="Zed", document_id="doc-1"))

    assert uploaded == 0
    assert docs.appended == []
    assert not state.checkpoint_path("doc-1", "Zed").exists()


def test_checkpoint_save_failure_after_append_is_reported(
    chat_file: Path, state: JsonFileStateRepository, caplog: pytest.LogCaptureFixture
):
    """Verify a failed checkpoint write surfaces and warns that the append already happened."""
    # Given
    docs = FakeDocs()
    handler = UploadToGoogleDocsHandler(docs, state)
    command = UploadToGoogleDocsCommand(file_path=str(chat_file), sender="Alice", document_id="doc-1")
    denied = PermissionError("read-only state directory")

    # When
    with (
        patch.object(JsonFileStateRepository, "_write_atomically", side_effect=denied),
        pytest.raises(CheckpointSaveError),
    ):
        handler.handle(command)

    # Then
    assert len(docs.appended) == 1
    assert "the next upload will send them again" in caplog.text


@pytest.mark.parametrize(
    "kwargs",
    [
        {"file_path": "", "sender": "Alice", "document_id": "doc"},
        {"file_path": "chat\x00.txt", "sender": "Alice", "document_id": "doc"},
        {"file_path": "chat.txt", "sender": " ", "document_id": "doc"},
        {"file_path": "chat.txt", "sender": "Alice", "document_id": ""},
    ],
)
def test_upload_command_validation(kwargs: dict):
    with pytest.raises(ValidationError):
        UploadToGoogleDocsCommand(**kwargs)


def test_parse_command_rejects_blank_sender_filter():
    with pytest.raises(ValidationError):
        ParseChatCommand(file_path="chat.txt", sender_filter="  ")