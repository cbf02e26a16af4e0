"""Exceptions for the WhatsApp input adapter."""

from whatsapp_archiver.exceptions import ArchiverError


class WhatsAppError(ArchiverError):
    """Base exception for WhatsApp adapter errors."""


class ChatFileNotFoundError(WhatsAppError):
    """Raised when the chat export file does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"WhatsApp chat file not found: {path}")


class ChatFileReadError(WhatsAppError):
    """Raised when the chat export cannot be read after retrying."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read '{path}': {reason}")
