"""Application commands and their handlers."""

from whatsapp_archiver.orchestration.commands import ParseChatCommand, UploadToGoogleDocsCommand
from whatsapp_archiver.orchestration.handlers import ParseChatHandler, UploadToGoogleDocsHandler

__all__ = ["ParseChatCommand", "ParseChatHandler", "UploadToGoogleDocsCommand", "UploadToGoogleDocsHandler"]
