"""Validated requests accepted by the command handlers."""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, field_validator

from whatsapp_archiver.constants import MessageFormatType
from whatsapp_archiver.models import Transcript
from whatsapp_archiver.utils.paths import has_invalid_path_chars


def _validate_file_path(value: str) -> str:
    if not value.strip():
        msg = "file_path cannot be empty or whitespace"
        raise ValueError(msg)
    if has_invalid_path_chars(value):
        msg = "file_path contains invalid characters"
        raise ValueError(msg)
    return value


class ParseChatCommand(BaseModel):
    """Parse one export, optionally keeping only one sender's messages."""

    model_config = ConfigDict(frozen=True)

    file_path: str
    sender_filter: str | None = None
    timezone_offset: timedelta | None = None

    @field_validator("file_path")
    @classmethod
    def validate_file_path(cls, v: str) -> str:
        return _validate_file_path(v)

    @field_validator("sender_filter")
    @classmethod
    def validate_sender_filter(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            msg = "sender_filter cannot be whitespace; omit it to keep every sender"
            raise ValueError(msg)
        return v


class UploadToGoogleDocsCommand(BaseModel):
    """Upload one sender's not-yet-uploaded messages to a Google Doc."""

    model_config = ConfigDict(frozen=True)

    file_path: str
    sender: str
    document_id: str
    formatter_type: MessageFormatType = MessageFormatType.DEFAULT
    timezone_offset: timedelta | None = None
    cached_transcript: Transcript | None = None

    @field_validator("file_path")
    @classmethod
    def validate_file_path(cls, v: str) -> str:
        return _validate_file_path(v)

    @field_validator("sender", "document_id")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "value cannot be empty or whitespace"
            raise ValueError(msg)
        return v
