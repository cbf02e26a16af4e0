"""Command handlers wiring the parser, formatters, Google Docs and checkpoints."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from whatsapp_archiver.filters import SenderFilter
from whatsapp_archiver.formatting.messages import create_formatter, is_document_formatter
from whatsapp_archiver.input_adapters.whatsapp.parsing import parse_file
from whatsapp_archiver.state.exceptions import StateError

if TYPE_CHECKING:
    from whatsapp_archiver.checkpoint import ProcessingCheckpoint
    from whatsapp_archiver.formatting.document import RichDocument
    from whatsapp_archiver.models import Transcript
    from whatsapp_archiver.orchestration.commands import ParseChatCommand, UploadToGoogleDocsCommand

logger = logging.getLogger(__name__)

type ChatParser = Callable[..., Transcript]


class DocsService(Protocol):
    def append(self, document_id: str, content: str) -> None: ...

    def append_rich(self, document_id: str, document: RichDocument) -> None: ...


class StateRepository(Protocol):
    def get_checkpoint(self, document_id: str, sender_filter: SenderFilter | None = None) -> ProcessingCheckpoint: ...

    def save_checkpoint(self, checkpoint: ProcessingCheckpoint) -> Path: ...


def _parse(parser: ChatParser, file_path: str, offset: timedelta | None) -> Transcript:
    return parser(Path(file_path), timezone_offset=offset)


class ParseChatHandler:
    """Parses an export and narrows it to one sender when asked."""

    def __init__(self, parser: ChatParser = parse_file) -> None:
        self._parser = parser

    def handle(self, command: ParseChatCommand) -> Transcript:
        transcript = _parse(self._parser, command.file_path, command.timezone_offset)
        if command.sender_filter is None:
            return transcript
        messages = transcript.filter_messages(SenderFilter(command.sender_filter))
        logger.info("Kept %d of %d messages from %s", len(messages), transcript.message_count, command.sender_filter)
        return transcript.with_messages(messages)


class UploadToGoogleDocsHandler:
    """Appends a sender's new messages to a Google Doc exactly once.

    Messages already recorded in the document's checkpoint are skipped, so
    running the same upload twice appends nothing the second time.
    """

    def __init__(
        self,
        docs_service: DocsService,
        state_repository: StateRepository,
        parser: ChatParser = parse_file,
    ) -> None:
        self._docs = docs_service
        self._state = state_repository
        self._parser = parser

    def handle(self, command: UploadToGoogleDocsCommand) -> int:
        """Upload pending messages and return how many were uploaded."""
        transcript = command.cached_transcript
        if transcript is None:
            transcript = _parse(self._parser, command.file_path, command.timezone_offset)

        sender_filter = SenderFilter(command.sender)
        checkpoint = self._state.get_checkpoint(command.document_id, sender_filter)

        pending = sorted(
            (
                message
                for message in transcript.filter_messages(sender_filter)
                if not checkpoint.has_been_processed(message.id)
            ),
            key=lambda message: message.timestamp,
        )
        if not pending:
            logger.info("No new messages from %s for document %s", command.sender, command.document_id)
            return 0

        formatter = create_formatter(command.formatter_type)
        if is_document_formatter(command.formatter_type):
            document = formatter.format_document(transcript.with_messages(pending))
            self._docs.append_rich(command.document_id, document)
        else:
            content = "\n".join(formatter.format_message(message) for message in pending)
            self._docs.append(command.document_id, content)

        for message in pending:
            checkpoint.mark_as_processed(message.id)
        try:
            self._state.save_checkpoint(checkpoint)
        except StateError:
            logger.error(
                "Appended %d messages to document %s but could not record them; "
                "the next upload will send them again",
                len(pending),
                command.document_id,
            )
            raise

        logger.info("Uploaded %d messages from %s to document %s", len(pending), command.sender, command.document_id)
        return len(pending)
