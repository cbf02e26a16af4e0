"""Google Docs client built on the official API library.

Docs addresses text by UTF-16 code unit, counted from 1 at the start of the
body. Every document ends with a newline the API refuses to delete, so the
last insertable position is ``end_index - 1``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from tenacity.wait import wait_base

from whatsapp_archiver.formatting.document import (
    BoldText,
    EmptyLine,
    Heading,
    HorizontalRule,
    MetadataField,
    PageBreak,
    Paragraph,
    RichDocument,
)
from whatsapp_archiver.google_docs.exceptions import CredentialsNotFoundError, DocsApiError
from whatsapp_archiver.infra.retry import docs_retrying

logger = logging.getLogger(__name__)

DOCS_SCOPES = ["https://www.googleapis.com/auth/documents"]
BODY_START_INDEX = 1
PAGE_BREAK_LENGTH = 2
HORIZONTAL_RULE_TEXT = "---"


def utf16_length(text: str) -> int:
    """Length of ``text`` in UTF-16 code units, the unit Docs indices count."""
    return len(text.encode("utf-16-le")) // 2


def _insert_text(index: int, text: str) -> dict[str, Any]:
    return {"insertText": {"location": {"index": index}, "text": text}}


def _paragraph_style(start: int, end: int, named_style: str) -> dict[str, Any]:
    return {
        "updateParagraphStyle": {
            "range": {"startIndex": start, "endIndex": end},
            "paragraphStyle": {"namedStyleType": named_style},
            "fields": "namedStyleType",
        }
    }


def _bold(start: int, end: int, *, bold: bool) -> dict[str, Any]:
    return {
        "updateTextStyle": {
            "range": {"startIndex": start, "endIndex": end},
            "textStyle": {"bold": bold},
            "fields": "bold",
        }
    }


def build_rich_requests(document: RichDocument, start_index: int) -> list[dict[str, Any]]:
    """Translate ``document`` into batchUpdate requests inserted from ``start_index``.

    Inserted text inherits the style of the paragraph it lands in, so every
    text section sets its paragraph style and boldness explicitly.
    """
    requests: list[dict[str, Any]] = []
    index = start_index

    def add_paragraph(text: str, named_style: str, bold_length: int = 0) -> None:
        nonlocal index
        line = f"{text}\n"
        length = utf16_length(line)
        requests.append(_insert_text(index, line))
        requests.append(_paragraph_style(index, index + length, named_style))
        requests.append(_bold(index, index + length, bold=False))
        if bold_length:
            requests.append(_bold(index, index + bold_length, bold=True))
        index += length

    for section in document:
        match section:
            case Heading(level=level, text=text):
                add_paragraph(text, f"HEADING_{level}")
            case BoldText(text=text):
                add_paragraph(text, "NORMAL_TEXT", bold_length=utf16_length(text))
            case Paragraph(text=text):
                add_paragraph(text, "NORMAL_TEXT")
            case MetadataField(label=label, value=value):
                add_paragraph(f"{label}: {value}", "NORMAL_TEXT", bold_length=utf16_length(f"{label}:"))
            case HorizontalRule():
                add_paragraph(HORIZONTAL_RULE_TEXT, "NORMAL_TEXT")
            case EmptyLine():
                requests.append(_insert_text(index, "\n"))
                index += 1
            case PageBreak():
                requests.append({"insertPageBreak": {"location": {"index": index}}})
                index += PAGE_BREAK_LENGTH
    return requests


class GoogleDocsClient:
    """Writes transcripts into existing Google Docs.

    Construct it with ``from_service_account_file`` in production; tests pass
    a fake ``documents`` resource directly.
    """

    def __init__(self, documents: Any, *, wait: wait_base | None = None) -> None:
        self._documents = documents
        self._wait = wait

    @classmethod
    def from_service_account_file(
        cls,
        credentials_path: Path | None,
        *,
        wait: wait_base | None = None,
    ) -> GoogleDocsClient:
        if credentials_path is None or not credentials_path.is_file():
            raise CredentialsNotFoundError(credentials_path)
        credentials = service_account.Credentials.from_service_account_file(
            str(credentials_path), scopes=DOCS_SCOPES
        )
        service = build("docs", "v1", credentials=credentials, cache_discovery=False)
        logger.debug("Google Docs client ready using %s", credentials_path)
        return cls(service.documents(), wait=wait)

    def _execute(self, document_id: str, operation: str, request: Callable[[], Any]) -> dict[str, Any]:
        try:
            for attempt in docs_retrying(self._wait):
                with attempt:
                    response = request().execute()
        except HttpError as exc:
            status = int(exc.resp.status) if exc.resp is not None else None
            raise DocsApiError(document_id, operation, exc.reason or str(exc), status) from exc
        except (ConnectionError, TimeoutError) as exc:
            raise DocsApiError(document_id, operation, str(exc) or type(exc).__name__) from exc
        return response or {}

    def _end_index(self, document_id: str) -> int:
        document = self._execute(document_id, "get", lambda: self._documents.get(documentId=document_id))
        content = document.get("body", {}).get("content", [])
        if not content:
            return BODY_START_INDEX + 1
        return int(content[-1].get("endIndex", BODY_START_INDEX + 1))

    def _batch_update(self, document_id: str, requests: list[dict[str, Any]]) -> None:
        if not requests:
            return
        self._execute(
            document_id,
            "batchUpdate",
            lambda: self._documents.batchUpdate(documentId=document_id, body={"requests": requests}),
        )

    def upload(self, document_id: str, content: str) -> None:
        """Replace the whole body of the document with ``content``."""
        _require_document_id(document_id)
        end_index = self._end_index(document_id)
        requests: list[dict[str, Any]] = []
        if end_index > BODY_START_INDEX + 1:
            requests.append(
                {"deleteContentRange": {"range": {"startIndex": BODY_START_INDEX, "endIndex": end_index - 1}}}
            )
        if content:
            requests.append(_insert_text(BODY_START_INDEX, content))
        self._batch_update(document_id, requests)
        logger.info("Replaced content of document %s", document_id)

    def append(self, document_id: str, content: str) -> None:
        """Append ``content`` on a new line at the end of the document."""
        _require_document_id(document_id)
        index = max(self._end_index(document_id) - 1, BODY_START_INDEX)
        self._batch_update(document_id, [_insert_text(index, f"\n{content}")])
        logger.info("Appended %d characters to document %s", len(content), document_id)

    def append_rich(self, document_id: str, document: RichDocument) -> None:
        """Append a formatted ``RichDocument`` at the end of the document."""
        _require_document_id(document_id)
        end_index = self._end_index(document_id)
        index = max(end_index - 1, BODY_START_INDEX)
        requests: list[dict[str, Any]] = []
        if end_index > BODY_START_INDEX + 1:
            # Open a fresh paragraph so existing text keeps its own style.
            requests.append(_insert_text(index, "\n"))
            index += 1
        requests.extend(build_rich_requests(document, index))
        self._batch_update(document_id, requests)
        logger.info("Appended %d sections to document %s", len(document), document_id)


def _require_document_id(document_id: str) -> None:
    if not document_id or not document_id.strip():
        msg = "document_id cannot be empty or whitespace"
        raise ValueError(msg)
