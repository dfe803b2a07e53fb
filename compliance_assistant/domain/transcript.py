"""Transcript domain entities"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List


class Origin(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class TranscriptEntry:
    """One exchanged message"""
    origin: Origin
    text: str


class Transcript:
    """Append-only message log for the active session."""

    def __init__(self):
        self._entries: List[TranscriptEntry] = []

    def append(self, origin: Origin, text: str) -> TranscriptEntry:
        entry = TranscriptEntry(origin=origin, text=text)
        self._entries.append(entry)
        return entry

    def clear(self) -> None:
        self._entries.clear()

    @property
    def entries(self) -> List[TranscriptEntry]:
        """Copy of the entries, oldest first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TranscriptEntry]:
        return iter(list(self._entries))
