"""Tests for repository detection and the process-wide repository."""

import os
from pathlib import Path

import git
import pytest

from git_worktree_keeper.exceptions import GitCommandFailed, NotARepositoryError
from git_worktree_keeper.services.git.repository import (
    detect_default_branch,
    detect_repo,
    get_primary_remote,
    get_repo,
    reset_repo,
    update_default_branch,
)
from git_worktree_keeper.services.git.runner import run_git


class TestDetectRepo:
    """Test repository detection from the main and linked worktrees."""

    def test_detect_from_main_worktree(self, git_repo):
        repo = detect_repo()
        root = os.path.realpath(git_repo.working_dir)

        assert os.path.realpath(repo.root) == root
        assert repo.main_worktree_root == root
        assert repo.git_dir == os.path.join(root, ".git")
        assert repo.is_bare is False
        assert repo.default_branch == "main"

    def test_detect_from_linked_worktree_finds_main_root(self, git_repo, feature_worktree):
        repo = detect_repo(str(feature_worktree))

        assert os.path.realpath(repo.root) == str(feature_worktree)
        assert repo.main_worktree_root == os.path.realpath(git_repo.working_dir)

    def test_detect_from_subdirectory(self, git_repo):
        sub = Path(git_repo.working_dir) / "src" / "pkg"
        sub.mkdir(parents=True)
        repo = detect_repo(str(sub))
        assert repo.main_worktree_root == os.path.realpath(git_repo.working_dir)

    def test_not_a_repository(self, temp_dir):
        plain = temp_dir / "plain"
        plain.mkdir()
        with pytest.raises(NotARepositoryError):
            detect_repo(str(plain))

    def test_bare_repository(self, temp_dir):
        bare = temp_dir / "bare.git"
        git.Repo.init(bare, bare=True).close()
        repo = detect_repo(str(bare))
        assert repo.is_bare is True
        assert repo.main_worktree_root == str(bare)


class TestRepoSingleton:
    """Test the memoized repository accessors."""

    def test_get_repo_is_memoized_until_reset(self, git_repo):
        first = get_repo()
        assert get_repo() is first
        reset_repo()
        assert get_repo() is not first

    def test_update_default_branch_without_repo_is_noop(self):
        update_default_branch("origin")

    def test_update_default_branch_uses_remote_head(self, git_repo_with_remote):
        repo = get_repo()
        assert repo.default_branch == "main"

        git_repo_with_remote.git.branch('trunk')
        git_repo_with_remote.git.push('origin', 'trunk')
        git_repo_with_remote.git.remote('set-head', 'origin', 'trunk')

        update_default_branch("origin")
        assert repo.default_branch == "trunk"


class TestDefaultBranchAndRemote:
    """Test default branch and primary remote selection."""

    def test_master_fallback(self, git_repo):
        git_repo.git.branch('-M', 'master')
        assert detect_default_branch() == "master"

    def test_literal_main_when_nothing_matches(self, git_repo):
        git_repo.git.branch('-M', 'develop')
        assert detect_default_branch() == "main"

    def test_remote_head_wins(self, git_repo_with_remote):
        git_repo_with_remote.git.branch('-M', 'develop')
        assert detect_default_branch() == "main"

    def test_primary_remote_rules(self, git_repo):
        assert get_primary_remote() == "origin"

        git_repo.create_remote('upstream', 'https://example.com/a.git')
        assert get_primary_remote() == "upstream"

        git_repo.create_remote('fork', 'https://example.com/b.git')
        assert get_primary_remote() == "fork"

        git_repo.create_remote('origin', 'https://example.com/c.git')
        assert get_primary_remote() == "origin"
        assert get_primary_remote("fork") == "fork"


class TestRunGit:
    """Test the subprocess boundary."""

    def test_returns_stdout(self, git_repo):
        assert run_git("rev-parse", "--abbrev-ref", "HEAD") == "main"

    def test_failure_carries_status_and_stderr(self, git_repo):
        with pytest.raises(GitCommandFailed) as exc_info:
            run_git("rev-parse", "--verify", "no-such-ref")
        assert exc_info.value.status == 128
        assert exc_info.value.args_list == ["rev-parse", "--verify", "no-such-ref"]
        assert "stderr:" not in exc_info.value.stderr
