"""Deletion safety models.

SafetyInfo is an evidence accumulator: every finding goes through one of the
``record_*`` methods, and each of those can only raise the level. The final
level is therefore always the maximum implied by any single finding, and a
check that could not run never leaves the result at SAFE.
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List

from git_worktree_keeper.models.branch import CommitInfo


class SafetyLevel(IntEnum):
    """How risky it is to delete a worktree, ordered SAFE < WARNING < DANGER."""
    SAFE = 0
    WARNING = 1
    DANGER = 2

    def __str__(self) -> str:
        return self.name.lower()


@dataclass
class SafetyInfo:
    """Classification of one worktree plus the evidence behind it."""

    level: SafetyLevel = SafetyLevel.SAFE

    uncommitted_file_count: int = 0
    unpushed_commit_count: int = 0
    is_merged: bool = False
    unique_commits: List[CommitInfo] = field(default_factory=list)

    # Why the level is what it is, and which checks could not be completed
    reasons: List[str] = field(default_factory=list)
    unverified: List[str] = field(default_factory=list)

    @property
    def has_uncommitted_changes(self) -> bool:
        return self.uncommitted_file_count > 0

    @property
    def has_unpushed_commits(self) -> bool:
        return self.unpushed_commit_count > 0

    @property
    def has_unique_commits(self) -> bool:
        return bool(self.unique_commits)

    @property
    def unique_commit_count(self) -> int:
        return len(self.unique_commits)

    @property
    def is_verified(self) -> bool:
        """True when every check ran to completion."""
        return not self.unverified

    def escalate(self, level: SafetyLevel) -> None:
        """Raise the level to at least ``level``; never lowers it."""
        if level > self.level:
            self.level = level

    def record_uncommitted(self, count: int) -> None:
        self.uncommitted_file_count = count
        if count > 0:
            self.reasons.append(f"{count} uncommitted file(s) will be lost")
            self.escalate(SafetyLevel.DANGER)

    def record_unpushed(self, count: int) -> None:
        self.unpushed_commit_count = count
        if count > 0:
            self.reasons.append(f"{count} commit(s) not pushed to upstream")
            self.escalate(SafetyLevel.WARNING)

    def record_merged(self, merged: bool, into: str) -> None:
        self.is_merged = merged
        if not merged:
            self.reasons.append(f"not merged into {into}")
            self.escalate(SafetyLevel.WARNING)

    def record_unique_commits(self, commits: List[CommitInfo]) -> None:
        self.unique_commits = list(commits)
        if commits:
            self.reasons.append(f"{len(commits)} commit(s) exist only on this branch")
            self.escalate(SafetyLevel.DANGER)

    def record_unverified(self, check: str, error: object) -> None:
        """Record a check that could not be completed."""
        self.unverified.append(f"could not verify {check}: {error}")
        self.escalate(SafetyLevel.WARNING)
