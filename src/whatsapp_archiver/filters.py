"""Message selection rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from whatsapp_archiver.models import Message


class Specification[T](Protocol):
    """A predicate over ``T`` that can be passed around as a value."""

    def is_satisfied_by(self, candidate: T) -> bool: ...


@dataclass(frozen=True, slots=True)
class SenderFilter:
    """Selects messages written by one sender, ignoring case."""

    sender_name: str
    _folded: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.sender_name or not self.sender_name.strip():
            msg = "sender_name cannot be empty or whitespace"
            raise ValueError(msg)
        object.__setattr__(self, "_folded", self.sender_name.casefold())

    def is_satisfied_by(self, candidate: Message) -> bool:
        return candidate.sender.casefold() == self._folded
