"""Annotation engine — per-line state machine producing blame prefixes.

Feed every diff line through :meth:`DiffAnnotator.process_line` in input
order. File and hunk headers update the state; context and removed lines get
the revision that last touched them, added lines a filler column.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from blamediff.git.blame import ABBREV, BlameResolver, is_boundary
from blamediff.git.diff_parser import (
    DEFAULT_OLD_PREFIXES,
    classify,
    parse_hunk_header,
    parse_old_path,
    strip_ansi,
)
from blamediff.git.models import LineKind

BOUNDARY_GLYPH = "·"
UNKNOWN_GLYPH = "?"
ADDED_GLYPH = "+"


@dataclass
class ParseState:
    """Where the annotator is in the diff."""

    current_file: Optional[str] = None
    hunk_start: int = 0
    cursor: int = 0  # old-side line number of the next context/removed line
    revisions: List[str] = field(default_factory=list)
    width: int = ABBREV
    old_remaining: int = 0
    new_remaining: int = 0

    @property
    def in_hunk(self) -> bool:
        return self.old_remaining > 0 or self.new_remaining > 0

    def lookup(self) -> Optional[str]:
        """Return the revision at the cursor, None outside the resolved range."""
        idx = self.cursor - self.hunk_start
        if 0 <= idx < len(self.revisions):
            return self.revisions[idx]
        return None


class DiffAnnotator:
    """Compute the blame prefix for each line of a unified diff.

    Usage::

        annotator = DiffAnnotator(BlameResolver(GitBackend(root)))
        for line in diff_lines:
            prefix = annotator.process_line(line)
    """

    def __init__(
        self,
        resolver: BlameResolver,
        old_prefixes: Iterable[str] = DEFAULT_OLD_PREFIXES,
    ) -> None:
        self.resolver = resolver
        self.old_prefixes = tuple(old_prefixes)
        self.state = ParseState()
        self.candidates: Set[str] = set()

    def process_line(self, raw_line: str) -> Optional[str]:
        """Update state with *raw_line* and return its prefix (or None)."""
        line = strip_ansi(raw_line)
        state = self.state
        kind = classify(line, in_hunk=state.in_hunk)

        if kind is LineKind.OLD_FILE:
            state.current_file = parse_old_path(line, self.old_prefixes)
            state.revisions = []
            return None
        if kind is LineKind.NEW_FILE:
            return None
        if kind is LineKind.HUNK_HEADER:
            self._start_hunk(line)
            return None
        if kind is LineKind.CONTEXT or kind is LineKind.REMOVED:
            self._consume(kind)
            return self._old_side_prefix()
        if kind is LineKind.ADDED:
            self._consume(kind)
            return f"{ADDED_GLYPH * state.width} "

        if not line.startswith("\\"):
            # "\ No newline at end of file" belongs to the hunk, nothing else does
            state.old_remaining = state.new_remaining = 0
        return None

    def annotate_line(self, raw_line: str) -> str:
        """Return *raw_line* with its prefix, if any."""
        prefix = self.process_line(raw_line)
        return raw_line if prefix is None else prefix + raw_line

    # ---- internals ----

    def _start_hunk(self, line: str) -> None:
        state = self.state
        header = parse_hunk_header(line)
        state.old_remaining = header.old_count
        state.new_remaining = header.new_count
        state.hunk_start = state.cursor = header.old_start

        if state.current_file is None:
            state.revisions = []
            state.width = ABBREV
            return

        result = self.resolver.resolve(state.current_file, header.old_start, header.old_end)
        state.revisions = list(result.revisions)
        state.width = result.width

    def _consume(self, kind: LineKind) -> None:
        state = self.state
        if kind is not LineKind.ADDED:
            state.old_remaining = max(state.old_remaining - 1, 0)
        if kind is not LineKind.REMOVED:
            state.new_remaining = max(state.new_remaining - 1, 0)

    def _old_side_prefix(self) -> str:
        state = self.state
        rev = state.lookup()
        state.cursor += 1
        if rev is None:
            return f"{UNKNOWN_GLYPH * state.width} "
        if is_boundary(rev):
            return f"{BOUNDARY_GLYPH * state.width} "
        self.candidates.add(rev)
        return f"{rev:<{state.width}} "
