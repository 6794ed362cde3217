"""Git interface layer — adapter, blame resolution, diff line classification."""

from blamediff.git.adapter import GitBackend, GitError, get_repo_root
from blamediff.git.blame import BlameResolver, RevisionBackend, is_boundary, make_blame_rev
from blamediff.git.diff_parser import (
    DiffParseError,
    classify,
    parse_hunk_header,
    parse_old_path,
    strip_ansi,
)
from blamediff.git.models import BlameResult, HunkHeader, LineKind

__all__ = [
    "BlameResolver",
    "BlameResult",
    "DiffParseError",
    "GitBackend",
    "GitError",
    "HunkHeader",
    "LineKind",
    "RevisionBackend",
    "classify",
    "get_repo_root",
    "is_boundary",
    "make_blame_rev",
    "parse_hunk_header",
    "parse_old_path",
    "strip_ansi",
]
