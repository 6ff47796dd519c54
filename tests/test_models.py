"""Tests for worktree and safety models."""

import pytest

from git_worktree_keeper.models.branch import CommitInfo
from git_worktree_keeper.models.safety import SafetyInfo, SafetyLevel
from git_worktree_keeper.models.worktree import Worktree


class TestWorktree:
    """Test Worktree helpers."""

    def test_short_path(self):
        assert Worktree(path="/repo").short_path("/repo") == "."
        assert Worktree(path="/repo/.worktrees/a").short_path("/repo") == ".worktrees/a"
        assert Worktree(path="/elsewhere/a").short_path("/repo") == "/elsewhere/a"

    def test_branch_short(self):
        assert Worktree(path="/x", branch="feature/team/auth").branch_short == "auth"
        assert Worktree(path="/x", branch="main").branch_short == "main"

    def test_from_dict_ignores_unknown_keys(self):
        wt = Worktree.from_dict({"path": "/repo", "branch": "main", "future_field": 1})
        assert wt.path == "/repo"
        assert wt.branch == "main"

    def test_from_dict_requires_path(self):
        with pytest.raises(KeyError):
            Worktree.from_dict({"branch": "main"})

    def test_from_dict_rejects_non_mapping(self):
        with pytest.raises(TypeError):
            Worktree.from_dict(["/repo"])

    def test_from_dict_rejects_wrong_field_types(self):
        with pytest.raises(ValueError):
            Worktree.from_dict({"path": "/repo", "is_main": "yes"})
        with pytest.raises(ValueError):
            Worktree.from_dict({"path": "/repo", "dirty_files": False})

    def test_to_dict_round_trips(self):
        wt = Worktree(path="/repo", branch="main", is_dirty=True, dirty_files=3, merge_known=True)
        assert Worktree.from_dict(wt.to_dict()) == wt


class TestSafetyInfo:
    """Test the evidence accumulator."""

    def test_starts_safe(self):
        info = SafetyInfo()
        assert info.level == SafetyLevel.SAFE
        assert info.is_verified

    def test_level_ordering_and_names(self):
        assert SafetyLevel.SAFE < SafetyLevel.WARNING < SafetyLevel.DANGER
        assert str(SafetyLevel.WARNING) == "warning"

    def test_escalate_never_lowers(self):
        info = SafetyInfo()
        info.escalate(SafetyLevel.DANGER)
        info.escalate(SafetyLevel.WARNING)
        info.escalate(SafetyLevel.SAFE)
        assert info.level == SafetyLevel.DANGER

    def test_level_is_maximum_of_findings(self):
        info = SafetyInfo()
        info.record_unpushed(2)
        assert info.level == SafetyLevel.WARNING
        info.record_unique_commits([CommitInfo("abc1234", "wip")])
        assert info.level == SafetyLevel.DANGER
        info.record_merged(False, "main")
        assert info.level == SafetyLevel.DANGER
        assert len(info.reasons) == 3

    def test_zero_counts_stay_safe(self):
        info = SafetyInfo()
        info.record_uncommitted(0)
        info.record_unpushed(0)
        info.record_merged(True, "main")
        info.record_unique_commits([])
        assert info.level == SafetyLevel.SAFE
        assert info.reasons == []

    def test_unverified_forces_warning(self):
        info = SafetyInfo()
        info.record_unverified("merge status", "boom")
        assert info.level == SafetyLevel.WARNING
        assert not info.is_verified
        assert info.unverified == ["could not verify merge status: boom"]
