"""Centralized exceptions for the WhatsApp Archiver application."""


class ArchiverError(Exception):
    """Base exception for all WhatsApp Archiver errors."""
