"""Tests for display formatting."""

from rich.console import Console

from git_worktree_keeper.formatters import (
    format_branch_name,
    format_changes,
    format_last_commit,
    format_merged,
    format_safety_details,
    format_sync,
)
from git_worktree_keeper.models.branch import CommitInfo
from git_worktree_keeper.models.safety import SafetyInfo
from git_worktree_keeper.models.worktree import Worktree
from git_worktree_keeper.services.display_service import DisplayService


class TestWorktreeFormatters:
    def test_branch_markers(self):
        assert format_branch_name(Worktree(path="/r", branch="main", is_main=True, is_current=True)) == "@⌂ main"
        assert format_branch_name(Worktree(path="/r", branch="dev")) == "dev"
        assert format_branch_name(Worktree(path="/r", is_bare=True)) == "(bare)"

    def test_changes(self):
        assert format_changes(Worktree(path="/r", is_dirty=True, dirty_files=3)) == "+3"
        assert format_changes(Worktree(path="/r")) == ""

    def test_sync(self):
        assert format_sync(Worktree(path="/r", branch="b")) == "local"
        assert format_sync(Worktree(path="/r", branch="b", has_upstream=True)) == "synced"
        assert format_sync(Worktree(path="/r", branch="b", has_upstream=True, ahead=2, behind=1)) == "↑2 ↓1"
        assert format_sync(Worktree(path="/r", is_detached=True)) == ""

    def test_unknown_merge_state_is_not_merged(self):
        assert format_merged(Worktree(path="/r", is_merged=False, merge_known=False)) == "?"
        assert format_merged(Worktree(path="/r", is_merged=True, merge_known=True)) == "✓"
        assert format_merged(Worktree(path="/r", is_merged=False, merge_known=True)) == "✗"

    def test_last_commit_truncates_message(self):
        wt = Worktree(path="/r", last_commit_hash="abc1234", last_commit_message="x" * 60, last_commit_time="2 days ago")
        text = format_last_commit(wt, max_message=10)
        assert text == "abc1234 xxxxxxxxx… (2 days ago)"
        assert format_last_commit(Worktree(path="/r")) == ""


class TestSafetyFormatters:
    def test_details_list_reasons_and_commits(self):
        info = SafetyInfo()
        info.record_unique_commits([CommitInfo(f"h{i:06d}", f"commit {i}") for i in range(12)])
        info.record_unverified("merge status", "boom")

        lines = format_safety_details(info, max_commits=10)

        assert lines[0].startswith("Deleting will permanently lose work")
        assert "  • 12 commit(s) exist only on this branch" in lines
        assert "  ? could not verify merge status: boom" in lines
        assert "    h000000 commit 0" in lines
        assert lines[-1] == "    … and 2 more"


class TestDisplayService:
    def test_table_renders_rows(self):
        console = Console(width=200, record=True)
        display = DisplayService(console)
        worktrees = [
            Worktree(path="/repo", branch="main", is_main=True, merge_known=True, is_merged=True),
            Worktree(path="/repo/.worktrees/auth", branch="feature/auth", unique_commits=3),
        ]

        display.display_worktree_table(worktrees, "/repo", from_cache=True, show_legend=True)
        output = console.export_text()

        assert "Worktrees (cached)" in output
        assert ".worktrees/auth" in output
        assert "feature/auth" in output
        assert "Legend" in output
