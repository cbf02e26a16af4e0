"""Exceptions raised by the Google Docs integration."""

from __future__ import annotations

from pathlib import Path

from whatsapp_archiver.exceptions import ArchiverError


class GoogleDocsError(ArchiverError):
    """Base exception for Google Docs errors."""


class CredentialsNotFoundError(GoogleDocsError):
    """Raised when the service-account key file is missing or not configured."""

    def __init__(self, path: Path | None) -> None:
        self.path = path
        if path is None:
            super().__init__("No Google service-account credentials configured (google_docs.credentials_path)")
        else:
            super().__init__(f"Google service-account credentials not found: {path}")


class DocsApiError(GoogleDocsError):
    """Raised when a Docs API call fails for good."""

    def __init__(self, document_id: str, operation: str, reason: str, status: int | None = None) -> None:
        self.document_id = document_id
        self.operation = operation
        self.reason = reason
        self.status = status
        code = f" (HTTP {status})" if status is not None else ""
        super().__init__(f"Google Docs {operation} failed for document '{document_id}'{code}: {reason}")
