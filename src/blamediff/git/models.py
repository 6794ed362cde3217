"""Data models for diff classification and blame results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class LineKind(str, Enum):
    OLD_FILE = "old_file"
    NEW_FILE = "new_file"
    HUNK_HEADER = "hunk_header"
    CONTEXT = "context"
    REMOVED = "removed"
    ADDED = "added"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class HunkHeader:
    """Old/new line ranges from an ``@@ -a,b +c,d @@`` line."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int

    @property
    def old_end(self) -> int:
        return self.old_start + self.old_count


@dataclass(frozen=True)
class BlameResult:
    """Per-line revisions for one hunk's old-side range."""

    revisions: Tuple[str, ...] = ()
    width: int = 6  # widest identifier, never below the abbreviation length
