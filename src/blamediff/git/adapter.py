"""Git subprocess wrapper — rev-parse, merge-base, blame, show."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

# git blame prints boundary commits as "^" + <abbrev> chars and every other
# commit with one extra character, so 5 here gives 6-wide columns.
BLAME_ABBREV = 5
SHOW_ABBREV = 6


class GitError(Exception):
    """Raised when git is unavailable or a git query fails."""


def _run_git(args: List[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    command = f"git {' '.join(args)}"
    logger.debug("running %s", command)
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: {command}")

    if result.returncode != 0:
        raise GitError(f"{command}: {result.stderr.strip()}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    return Path(out.strip())


def rev_parse(repo_root: Path, rev: str) -> str:
    """Resolve a revision expression to a full object id."""
    return _run_git(["rev-parse", "--verify", rev], cwd=repo_root).strip()


def merge_base(repo_root: Path, a: str, b: str) -> str:
    """Return the best common ancestor of *a* and *b*."""
    return _run_git(["merge-base", a, b], cwd=repo_root).strip()


def blame_revisions(
    repo_root: Path, rev: str, path: str, start: int, count: int
) -> List[str]:
    """Return the abbreviated commit id for each of *count* lines from *start*."""
    output = _run_git(
        [
            "blame",
            rev,
            f"--abbrev={BLAME_ABBREV}",
            "-L",
            f"{start},+{count}",
            "--",
            path,
        ],
        cwd=repo_root,
    )
    # Each line: "<id> (<author> <date> <lineno>) <content>"
    return [line.split(None, 1)[0] for line in output.splitlines() if line.strip()]


def show_commits(
    repo_root: Path, revs: Sequence[str], fmt: str, *, color: bool = True
) -> str:
    """Return one ``<author-timestamp> <fmt>`` line per revision."""
    args = ["show", "-s", "--color" if color else "--no-color", f"--abbrev={SHOW_ABBREV}"]
    args.append(f"--format=%at {fmt}")
    args.extend(revs)
    return _run_git(args, cwd=repo_root).strip()


class GitBackend:
    """Revision backend answering queries with the ``git`` executable."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    def rev_parse(self, rev: str) -> str:
        return rev_parse(self.repo_root, rev)

    def merge_base(self, a: str, b: str) -> str:
        return merge_base(self.repo_root, a, b)

    def blame(self, rev: str, path: str, start: int, count: int) -> List[str]:
        return blame_revisions(self.repo_root, rev, path, start, count)

    def show(self, revs: Sequence[str], fmt: str, *, color: bool = True) -> str:
        return show_commits(self.repo_root, revs, fmt, color=color)
