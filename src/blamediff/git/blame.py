"""Blame resolution — one backend query per hunk, padded to a common width."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from blamediff.git.adapter import GitError
from blamediff.git.models import BlameResult

logger = logging.getLogger(__name__)

ABBREV = 6


class RevisionBackend(Protocol):
    """The revision-control queries the annotator depends on."""

    def rev_parse(self, rev: str) -> str: ...

    def merge_base(self, a: str, b: str) -> str: ...

    def blame(self, rev: str, path: str, start: int, count: int) -> List[str]: ...

    def show(self, revs: Sequence[str], fmt: str, *, color: bool = True) -> str: ...


def is_boundary(rev: str) -> bool:
    """True for ids that name no real commit.

    git marks commits at the edge of a limited blame range with a leading
    ``^`` and uncommitted lines with an all-zero id.
    """
    return rev.startswith("^") or set(rev) <= {"0"}


def make_blame_rev(backend: RevisionBackend, back_to: Optional[Sequence[str]] = None) -> str:
    """Pick the revision (or range) to blame against.

    With *back_to*, the first candidate that resolves to something other than
    HEAD limits blame to ``<merge-base>..`` so older history shows up as
    boundary lines. Otherwise blame runs against HEAD.
    """
    if not back_to:
        return "HEAD"
    head = backend.rev_parse("HEAD")
    for candidate in back_to:
        try:
            rev = backend.rev_parse(candidate)
        except GitError as exc:
            logger.info("skipping back-to candidate %s: %s", candidate, exc)
            continue
        if rev == head:
            logger.info("back-to candidate %s is HEAD, ignoring", candidate)
            continue
        base = backend.merge_base("HEAD", candidate)
        logger.debug("blaming back to %s (merge base of HEAD and %s)", base, candidate)
        return f"{base}.."
    return "HEAD"


class BlameResolver:
    """Resolve per-line revisions for old-side hunk ranges."""

    def __init__(
        self,
        backend: RevisionBackend,
        back_to: Optional[Sequence[str]] = None,
    ) -> None:
        self.backend = backend
        self.revision = make_blame_rev(backend, back_to)
        # results for the file currently being annotated only
        self._cache: Dict[Tuple[int, int], BlameResult] = {}
        self._cache_path: Optional[str] = None

    def resolve(self, path: str, old_start: int, old_end: int) -> BlameResult:
        """Return one revision per line in ``[old_start, old_end)``."""
        if path != self._cache_path:
            self._cache.clear()
            self._cache_path = path
        key = (old_start, old_end)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        count = old_end - old_start
        if count <= 0:
            result = BlameResult()
        else:
            revisions = tuple(self.backend.blame(self.revision, path, old_start, count))
            width = max([ABBREV, *(len(r) for r in revisions)])
            result = BlameResult(revisions=revisions, width=width)
            logger.debug(
                "blamed %s:%d-%d at %s (%d lines)",
                path, old_start, old_end, self.revision, len(revisions),
            )

        self._cache[key] = result
        return result
