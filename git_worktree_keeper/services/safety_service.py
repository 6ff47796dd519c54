"""Deletion safety checks for worktrees.

Answers "what becomes unrecoverable if this worktree and its branch are
deleted now?". Every check runs against live repository state, and a check
that fails is recorded as unverified evidence rather than skipped, so an
uncertain result is never reported as SAFE.

Levels implied by each check (the result is the maximum):

- uncommitted, staged or untracked files: DANGER
- commits not pushed to the configured upstream: WARNING
- branch not merged into the default branch: WARNING
- commits on neither the default branch nor the remote tracking ref: DANGER
- any check that could not be completed: WARNING
"""

from typing import Optional, Union, TYPE_CHECKING

from git_worktree_keeper.exceptions import GitCommandFailed
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.repository import Repository
from git_worktree_keeper.models.safety import SafetyInfo
from git_worktree_keeper.models.worktree import DETACHED_SUFFIX, Worktree
from git_worktree_keeper.services.git.branch_queries import BranchQueries
from git_worktree_keeper.services.git.status import (
    count_unpushed_commits,
    get_dirty_status,
    get_head_commit,
    get_upstream_ref,
)

if TYPE_CHECKING:
    from git_worktree_keeper.config import Config

logger = get_logger(__name__)


def is_detached_branch(branch: str) -> bool:
    """True for an empty branch or a synthesized "<hash> (detached)" label."""
    return not branch or branch.endswith(DETACHED_SUFFIX)


class SafetyService:
    """Classifies how risky it is to delete a worktree."""

    def __init__(self, repo: Repository, config: Optional[Union["Config", dict]] = None):
        self.repo = repo
        config = config if config is not None else {}
        self.queries = BranchQueries(repo.root, config.get("remote", "") or "")

    def check_worktree(self, worktree: Worktree) -> SafetyInfo:
        """Classify a listed worktree against the repository's default branch."""
        branch = "" if worktree.is_detached else worktree.branch
        return self.check_safety(worktree.path, branch, self.repo.default_branch)

    def check_safety(self, path: str, branch: str, default_branch: str) -> SafetyInfo:
        """Classify deleting the worktree at ``path`` with ``branch`` checked out.

        Args:
            path: Worktree directory
            branch: Branch name; empty or a detached label for a detached HEAD
            default_branch: Branch that counts as "merged" and as recoverable

        Returns:
            SafetyInfo computed fresh from live state
        """
        info = SafetyInfo()
        detached = is_detached_branch(branch)

        self._check_uncommitted(info, path)

        if not default_branch:
            info.record_unverified("merge status", "default branch could not be determined")
            if not detached:
                self._check_unpushed(info, path, branch)
                info.record_unverified("unique commits", "default branch could not be determined")
            logger.debug(f"Safety of {path}: {info.level}")
            return info

        if detached:
            self._check_detached_merge(info, path, default_branch)
        elif branch == default_branch:
            # The default branch is merged into itself by definition and has
            # nothing to compare against.
            info.is_merged = True
            self._check_unpushed(info, path, branch)
        else:
            self._check_unpushed(info, path, branch)
            self._check_branch_merge(info, branch, default_branch)
            self._check_unique_commits(info, branch, default_branch)

        logger.debug(
            f"Safety of {path} ({branch or 'detached'}): {info.level} "
            f"reasons={info.reasons} unverified={info.unverified}"
        )
        return info

    def _check_uncommitted(self, info: SafetyInfo, path: str) -> None:
        try:
            _, count = get_dirty_status(path)
        except GitCommandFailed as e:
            info.record_unverified("uncommitted changes", e)
            return
        info.record_uncommitted(count)

    def _check_unpushed(self, info: SafetyInfo, path: str, branch: str) -> None:
        try:
            upstream = get_upstream_ref(path, branch)
            if not upstream:
                # Nothing to be ahead of; unique-commit check covers local-only work
                return
            info.record_unpushed(count_unpushed_commits(path, branch, upstream))
        except GitCommandFailed as e:
            info.record_unverified("unpushed commits", e)

    def _check_branch_merge(self, info: SafetyInfo, branch: str, default_branch: str) -> None:
        try:
            merged = self.queries.is_branch_merged(branch, default_branch)
        except GitCommandFailed as e:
            info.record_unverified("merge status", e)
            return
        info.record_merged(merged, default_branch)

    def _check_detached_merge(self, info: SafetyInfo, path: str, default_branch: str) -> None:
        try:
            head = get_head_commit(path)
            merged = self.queries.is_commit_merged(head, default_branch)
        except GitCommandFailed as e:
            info.record_unverified("merge status", e)
            return
        info.record_merged(merged, default_branch)

    def _check_unique_commits(self, info: SafetyInfo, branch: str, default_branch: str) -> None:
        try:
            commits = self.queries.get_unique_commits(branch, default_branch)
        except GitCommandFailed as e:
            info.record_unverified("unique commits", e)
            return
        info.record_unique_commits(commits)
