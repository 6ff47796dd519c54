"""Tests for the command-line interface."""

import importlib
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from git_worktree_keeper.cli.args import parse_args

# The package re-exports main(), which shadows the submodule attribute
cli_main = importlib.import_module("git_worktree_keeper.cli.main")


@pytest.fixture
def run_cli(git_repo, cache_dir, monkeypatch):
    """Run the CLI with an isolated cache and return (exit code, output)."""
    monkeypatch.setattr(
        "git_worktree_keeper.services.cache_service.user_cache_dir", lambda app: str(cache_dir)
    )

    def _run(*argv, answers=()):
        replies = iter(answers)
        with patch("builtins.input", side_effect=lambda prompt="": next(replies)):
            with cli_main.console.capture() as capture:
                code = cli_main.main(list(argv))
        return code, capture.get()

    return _run


class TestParseArgs:
    def test_default_command_is_list(self):
        args = parse_args([])
        assert args.command == "list"
        assert args.refresh is False

    def test_global_options(self):
        args = parse_args(["--workers", "4", "--remote", "upstream", "list", "--refresh"])
        assert args.workers == 4
        assert args.remote == "upstream"
        assert args.refresh is True

    def test_create_options(self):
        args = parse_args(["create", "feature/x", "--new", "--base", "develop"])
        assert (args.branch, args.new, args.base) == ("feature/x", True, "develop")


class TestCommands:
    """Run subcommands against a real repository."""

    def test_list(self, run_cli):
        code, output = run_cli("list")
        assert code == 0
        assert "main" in output

    def test_create_check_remove(self, run_cli, git_repo):
        code, output = run_cli("create", "feature/x", "--new")
        assert code == 0
        path = os.path.join(git_repo.working_dir, ".worktrees", "feature-x")
        assert Path(path).is_dir()

        code, output = run_cli("check", path)
        assert code == 0
        assert "SAFE" in output

        code, _ = run_cli("remove", path)
        assert code == 0
        assert not Path(path).exists()

    def test_remove_dirty_worktree_asks_first(self, run_cli, git_repo):
        run_cli("create", "feature/x", "--new")
        path = os.path.join(git_repo.working_dir, ".worktrees", "feature-x")
        Path(path, "wip.txt").write_text("wip\n")

        code, output = run_cli("remove", path, answers=["nope"])
        assert code == 1
        assert "DANGER" in output
        assert Path(path).is_dir()

        code, _ = run_cli("remove", path, answers=["x"])
        assert code == 0
        assert not Path(path).exists()

    def test_remove_main_worktree_is_refused(self, run_cli, git_repo):
        code, _ = run_cli("remove", git_repo.working_dir, "--force")
        assert code == 1
        assert Path(git_repo.working_dir).is_dir()

    def test_remove_and_delete_branch(self, run_cli, git_repo):
        run_cli("create", "feature/x", "--new")
        path = os.path.join(git_repo.working_dir, ".worktrees", "feature-x")

        code, _ = run_cli("remove", path, "--delete-branch")
        assert code == 0
        assert "feature/x" not in [h.name for h in git_repo.heads]

    def test_unknown_worktree_is_an_error(self, run_cli, temp_dir):
        code, output = run_cli("check", str(temp_dir / "nowhere"))
        assert code == 1
        assert "not found" in output

    def test_branches_and_prune(self, run_cli):
        assert run_cli("branches")[0] == 0
        assert run_cli("prune")[0] == 0

    def test_outside_repository(self, temp_dir, monkeypatch):
        plain = temp_dir / "plain"
        plain.mkdir()
        monkeypatch.chdir(plain)
        with cli_main.console.capture() as capture:
            code = cli_main.main(["list"])
        assert code == 1
        assert "Error" in capture.get()

    def test_push(self, run_cli, git_repo_with_remote, feature_worktree):
        code, output = run_cli("push", str(feature_worktree))
        assert code == 0
        assert "origin" in output
        assert "feature/auth" in [ref.remote_head for ref in git_repo_with_remote.remotes.origin.refs]
