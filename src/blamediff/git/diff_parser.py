"""Unified diff line classification — one line at a time, positional.

The annotator never sees the diff as a whole: lines arrive from a pipe and
must be classified as they come. A line is only treated as a file or hunk
header where one can structurally appear; inside a hunk body the leading
character alone decides, so content such as ``--- foo`` or ``+++`` that was
removed or added stays a body line.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from blamediff.git.models import HunkHeader, LineKind

# --- Regex patterns ---

_ANSI_RE = re.compile(
    r"\x1b\[[0-9;?]*[ -/]*[@-~]"  # CSI (colors, cursor movement)
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"  # OSC (hyperlinks, titles)
    r"|\x1b[@-Z\\-_]"  # two-character escapes
)
_HUNK_HEADER_RE = re.compile(
    r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@"
)

DEV_NULL = "/dev/null"
DEFAULT_OLD_PREFIXES = ("a/",)


class DiffParseError(Exception):
    """Raised when a structurally required diff line cannot be parsed."""


def strip_ansi(line: str) -> str:
    """Remove terminal escape sequences (e.g. from ``git diff --color``)."""
    if "\x1b" not in line:
        return line
    return _ANSI_RE.sub("", line)


def classify(line: str, *, in_hunk: bool = False) -> LineKind:
    """Classify *line* (already stripped of escapes) by its leading characters.

    *in_hunk* is True while the current hunk still has body lines to come.
    Outside a hunk only headers are recognised; commit messages, ``--stat``
    output and signatures that happen to start with a body marker are OTHER.
    """
    if in_hunk:
        # an empty line is context whose trailing space was stripped
        if line == "" or line.startswith(" "):
            return LineKind.CONTEXT
        if line.startswith("-"):
            return LineKind.REMOVED
        if line.startswith("+"):
            return LineKind.ADDED
        if line.startswith("@@ "):
            return LineKind.HUNK_HEADER
        return LineKind.OTHER

    if line.startswith("--- "):
        return LineKind.OLD_FILE
    if line.startswith("+++ "):
        return LineKind.NEW_FILE
    if line.startswith("@@ "):
        return LineKind.HUNK_HEADER
    return LineKind.OTHER


def parse_hunk_header(line: str) -> HunkHeader:
    """Parse ``@@ -36,7 +36,7 @@ ctx``. Omitted counts default to 1."""
    m = _HUNK_HEADER_RE.match(line)
    if m is None:
        raise DiffParseError(f"Malformed hunk header: {line!r}")
    old_start, old_count, new_start, new_count = m.groups()
    return HunkHeader(
        old_start=int(old_start),
        old_count=int(old_count) if old_count is not None else 1,
        new_start=int(new_start),
        new_count=int(new_count) if new_count is not None else 1,
    )


def parse_old_path(
    line: str, prefixes: Iterable[str] = DEFAULT_OLD_PREFIXES
) -> Optional[str]:
    """Return the pre-image path of a ``--- `` line, or None.

    None means blame cannot run: the old side is ``/dev/null`` (new file) or
    the path does not carry one of the expected one-level prefixes.
    """
    path = line[4:].rstrip("\t")  # git appends a TAB to paths with spaces
    if path == DEV_NULL:
        return None
    for prefix in prefixes:
        if path.startswith(prefix):
            return path[len(prefix):]
    return None
