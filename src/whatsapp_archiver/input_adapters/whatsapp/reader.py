"""Reading chat export files from disk."""

from __future__ import annotations

import logging
from pathlib import Path

from tenacity.wait import wait_base

from whatsapp_archiver.infra.retry import io_retrying
from whatsapp_archiver.input_adapters.whatsapp.exceptions import ChatFileNotFoundError, ChatFileReadError

logger = logging.getLogger(__name__)


def _read(path: Path) -> list[str]:
    with path.open(encoding="utf-8-sig", newline=None) as handle:
        return [line.rstrip("\n") for line in handle]


def read_lines(path: str | Path, *, wait: wait_base | None = None) -> list[str]:
    """Return the lines of a UTF-8 export without their terminators.

    A byte-order mark is ignored and ``\\r\\n`` endings are normalized. Transient
    ``OSError``s are retried; a missing file fails immediately.

    Raises:
        ValueError: If ``path`` is blank.
        ChatFileNotFoundError: If the file does not exist.
        ChatFileReadError: If reading still fails after retrying.

    """
    if not str(path).strip():
        msg = "path cannot be empty or whitespace"
        raise ValueError(msg)

    file_path = Path(path)
    if not file_path.is_file():
        raise ChatFileNotFoundError(str(file_path))

    try:
        for attempt in io_retrying(wait):
            with attempt:
                lines = _read(file_path)
    except FileNotFoundError as exc:
        raise ChatFileNotFoundError(str(file_path)) from exc
    except OSError as exc:
        raise ChatFileReadError(str(file_path), str(exc)) from exc

    logger.debug("Read %d lines from %s", len(lines), file_path)
    return lines
