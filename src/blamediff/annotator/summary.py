"""Candidate summary — chronological legend of the commits in the annotations."""

from __future__ import annotations

import logging
from typing import IO, Iterable, List

from blamediff.git.blame import RevisionBackend

logger = logging.getLogger(__name__)


def _timestamp(line: str) -> int:
    field = line.split(None, 1)[0] if line.strip() else ""
    try:
        return int(field)
    except ValueError:
        return 0


def sort_summary(output: str) -> List[str]:
    """Order ``<timestamp> <text>`` lines oldest first and drop the timestamp."""
    lines = sorted(output.splitlines(), key=_timestamp)
    result: List[str] = []
    for line in lines:
        parts = line.split(None, 1)
        result.append(parts[1] if len(parts) > 1 else "")
    return result


def write_candidate_summary(
    backend: RevisionBackend,
    candidates: Iterable[str],
    fmt: str,
    writer: IO[str],
    *,
    color: bool = True,
) -> None:
    """Describe every candidate commit with *fmt*, one line each, oldest first."""
    revs = sorted(candidates)
    if not revs:
        return
    logger.debug("summarising %d commits", len(revs))
    for line in sort_summary(backend.show(revs, fmt, color=color)):
        writer.write(line)
        writer.write("\n")
