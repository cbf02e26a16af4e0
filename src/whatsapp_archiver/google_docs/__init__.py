"""Google Docs output."""

from whatsapp_archiver.google_docs.client import GoogleDocsClient, build_rich_requests, utf16_length
from whatsapp_archiver.google_docs.exceptions import CredentialsNotFoundError, DocsApiError, GoogleDocsError

__all__ = [
    "CredentialsNotFoundError",
    "DocsApiError",
    "GoogleDocsClient",
    "GoogleDocsError",
    "build_rich_requests",
    "utf16_length",
]
