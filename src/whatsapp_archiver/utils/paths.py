"""Path helpers."""

from __future__ import annotations

from pathlib import Path


def expand_user_path(path: str | Path | None) -> Path | None:
    """Expand a leading ``~`` to the user's home directory.

    Blank input yields ``None`` so optional settings stay unset.
    """
    if path is None:
        return None
    text = str(path)
    if not text.strip():
        return None
    return Path(text).expanduser()


def has_invalid_path_chars(path: str) -> bool:
    """Return True if ``path`` contains characters no filesystem accepts."""
    return "\x00" in path
