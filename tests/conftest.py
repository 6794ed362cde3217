"""Shared test fixtures — sample diffs, a fake revision backend, temp git repos."""

from __future__ import annotations

import os
import subprocess
import textwrap
from pathlib import Path
from typing import Dict, Optional, Sequence

import pytest

from blamediff.annotator.engine import DiffAnnotator
from blamediff.git.blame import BlameResolver

from fakes import FakeBackend


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def make_annotator(backend):
    def _make(back_to: Optional[Sequence[str]] = None, **kwargs) -> DiffAnnotator:
        return DiffAnnotator(BlameResolver(backend, back_to), **kwargs)

    return _make


@pytest.fixture
def sample_patch() -> str:
    """Two files, five hunks; body lines that look like diff syntax included."""
    return textwrap.dedent("""\
        diff --git a/tests/bar.txt b/tests/bar.txt
        index 6d0a9487a999..5aa46cc774fb 10064
        --- a/tests/bar.txt
        +++ b/tests/bar.txt
        @@ -1,10 +1,10 @@
        -bar
        +barbara
         0.5
         1
         2
         3
         foobar
         bar ba baz
        -a
        -b
        +A
        +B
         C
        diff --git a/tests/foo.txt b/tests/foo.txt
        index 06259808ba40..482e77c74da8 100644
        --- a/tests/foo.txt
        +++ b/tests/foo.txt
        @@ -1,5 +1,5 @@
         foo
        -bar
        +baz
         a
         b
         c
        @@ -7,7 +7,7 @@ d
         +
         -
         +++
        -extra
        +wtextra
         bla
         ---
         @@ foo
        @@ -17,7 +17,7 @@ bar
         3
         4
         5
        -6
        +5z
         6a
         7
         8
        @@ -25,4 +25,3 @@ bar
         10
         11
         12
        -13
    """)


@pytest.fixture
def annotated_patch() -> str:
    """sample_patch annotated against HEAD."""
    return textwrap.dedent("""\
        diff --git a/tests/bar.txt b/tests/bar.txt
        index 6d0a9487a999..5aa46cc774fb 10064
        --- a/tests/bar.txt
        +++ b/tests/bar.txt
        @@ -1,10 +1,10 @@
        b40c1d -bar
        ++++++ +barbara
        6ec7db  0.5
        b40c1d  1
        b40c1d  2
        b40c1d  3
        6ec7db  foobar
        6ec7db  bar ba baz
        b40c1d -a
        b40c1d -b
        ++++++ +A
        ++++++ +B
        6ec7db  C
        diff --git a/tests/foo.txt b/tests/foo.txt
        index 06259808ba40..482e77c74da8 100644
        --- a/tests/foo.txt
        +++ b/tests/foo.txt
        @@ -1,5 +1,5 @@
        b40c1d  foo
        b40c1d -bar
        ++++++ +baz
        b40c1d  a
        b40c1d  b
        b40c1d  c
        @@ -7,7 +7,7 @@ d
        b40c1d  +
        b40c1d  -
        b40c1d  +++
        b40c1d -extra
        ++++++ +wtextra
        b40c1d  bla
        b40c1d  ---
        b40c1d  @@ foo
        @@ -17,7 +17,7 @@ bar
        b40c1d  3
        b40c1d  4
        b40c1d  5
        b40c1d -6
        ++++++ +5z
        6ec7db  6a
        b40c1d  7
        b40c1d  8
        @@ -25,4 +25,3 @@ bar
        b40c1d  10
        b40c1d  11
        b40c1d  12
        6ec7db -13
    """)


def _git(repo: Path, *args: str, env: Optional[Dict[str, str]] = None) -> str:
    full_env = dict(os.environ, **env) if env else None
    result = subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, check=True, text=True, env=full_env,
    )
    return result.stdout


def commit_all(repo: Path, message: str, date: str) -> str:
    """Commit everything with a fixed author/committer date; return the full id."""
    env = {"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date}
    _git(repo, "add", ".")
    _git(repo, "-c", "commit.gpgsign=false", "commit", "-q", "-m", message, env=env)
    return _git(repo, "rev-parse", "HEAD").strip()


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", "-q", str(tmp_path)], capture_output=True, check=True)
    _git(tmp_path, "config", "user.email", "test@test.com")
    _git(tmp_path, "config", "user.name", "Test")
    # Initial (root) commit; git blame shows root commits as boundaries
    (tmp_path / "README.md").write_text("# Test\n")
    commit_all(tmp_path, "init", "2020-01-01T00:00:00+00:00")
    return tmp_path


@pytest.fixture
def blamed_repo(tmp_git_repo: Path) -> dict:
    """A repo where f.txt comes from two commits and has an unstaged edit.

    Returns ``{"repo", "first", "second", "diff"}``.
    """
    repo = tmp_git_repo
    (repo / "f.txt").write_text("one\ntwo\nthree\nfour\n")
    first = commit_all(repo, "add f", "2021-01-01T00:00:00+00:00")
    (repo / "f.txt").write_text("one\ntwo\nTHREE\nfour\n")
    second = commit_all(repo, "shout three", "2022-01-01T00:00:00+00:00")
    (repo / "f.txt").write_text("uno\ntwo\nTHREE\nfour\n")
    diff = _git(repo, "diff", "--no-color")
    return {"repo": repo, "first": first, "second": second, "diff": diff}
