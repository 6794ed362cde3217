"""Integration tests for the git adapter against a temporary repository."""

from pathlib import Path

import pytest

from blamediff.git.adapter import (
    GitBackend,
    GitError,
    blame_revisions,
    get_repo_root,
    merge_base,
    rev_parse,
    show_commits,
)
from blamediff.git.blame import BlameResolver, is_boundary


class TestQueries:
    def test_repo_root(self, tmp_git_repo: Path):
        sub = tmp_git_repo / "sub"
        sub.mkdir()
        assert get_repo_root(sub).resolve() == tmp_git_repo.resolve()

    def test_not_a_repo(self, tmp_path: Path):
        with pytest.raises(GitError):
            get_repo_root(tmp_path)

    def test_rev_parse(self, blamed_repo):
        assert rev_parse(blamed_repo["repo"], "HEAD") == blamed_repo["second"]

    def test_rev_parse_unknown(self, blamed_repo):
        with pytest.raises(GitError, match="rev-parse"):
            rev_parse(blamed_repo["repo"], "no-such-branch")

    def test_merge_base(self, blamed_repo):
        repo = blamed_repo["repo"]
        assert merge_base(repo, "HEAD", blamed_repo["first"]) == blamed_repo["first"]

    def test_blame_revisions(self, blamed_repo):
        revs = blame_revisions(blamed_repo["repo"], "HEAD", "f.txt", 2, 2)
        assert len(revs) == 2
        assert blamed_repo["first"].startswith(revs[0])
        assert blamed_repo["second"].startswith(revs[1])
        assert len(revs[0]) >= 6

    def test_blame_range_marks_boundary(self, blamed_repo):
        rev = f"{blamed_repo['first']}.."
        revs = blame_revisions(blamed_repo["repo"], rev, "f.txt", 1, 4)
        assert [is_boundary(r) for r in revs] == [True, True, False, True]

    def test_blame_missing_file(self, blamed_repo):
        with pytest.raises(GitError, match="blame"):
            blame_revisions(blamed_repo["repo"], "HEAD", "nope.txt", 1, 1)

    def test_show_commits(self, blamed_repo):
        out = show_commits(
            blamed_repo["repo"],
            [blamed_repo["second"], blamed_repo["first"]],
            "%s",
            color=False,
        )
        lines = out.splitlines()
        assert len(lines) == 2
        assert lines[0].split(" ", 1)[1] == "shout three"
        assert int(lines[1].split(" ", 1)[0]) < int(lines[0].split(" ", 1)[0])


class TestGitBackend:
    def test_resolver_with_back_to(self, blamed_repo):
        backend = GitBackend(blamed_repo["repo"])
        resolver = BlameResolver(backend, [blamed_repo["first"]])
        assert resolver.revision == f"{blamed_repo['first']}.."
        result = resolver.resolve("f.txt", 1, 5)
        assert len(result.revisions) == 4
        assert result.width >= 6
