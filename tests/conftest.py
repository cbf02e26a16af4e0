from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import pytest

from whatsapp_archiver.models import Message, ParsingMetadata, Transcript


@pytest.fixture
def make_message() -> Callable[..., Message]:
    def _make(
        content: str = "Hello",
        sender: str = "Alice",
        timestamp: datetime | None = None,
    ) -> Message:
        return Message(
            timestamp=timestamp or datetime(2024, 1, 15, 10, 30, tzinfo=UTC),
            sender=sender,
            content=content,
        )

    return _make


@pytest.fixture
def make_transcript() -> Callable[..., Transcript]:
    def _make(messages: list[Message], source_name: str = "chat.txt") -> Transcript:
        metadata = ParsingMetadata(
            source_name=source_name,
            parsed_at=datetime(2024, 3, 5, 12, 0, tzinfo=UTC),
            total_lines=len(messages),
            parsed_message_count=len(messages),
            failed_line_count=0,
        )
        return Transcript(messages=tuple(messages), metadata=metadata)

    return _make


@pytest.fixture
def write_chat(tmp_path: Path) -> Callable[..., Path]:
    """Write chat lines to a file under ``tmp_path`` and return its path."""

    def _write(lines: list[str], name: str = "chat.txt") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
