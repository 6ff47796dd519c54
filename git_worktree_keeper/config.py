"""Configuration handling for git-worktree-keeper"""

from dataclasses import dataclass, fields
from typing import Optional

from git_worktree_keeper.models.safety import SafetyInfo, SafetyLevel


@dataclass
class Config:
    """Configuration for git-worktree-keeper with validation.

    Holds passive settings only; reading them from a file is the caller's job.
    """

    # Worktree layout
    worktree_dir: str = ".worktrees"  # Relative to the main worktree root
    default_base_branch: str = ""  # Empty = repository default branch
    remote: str = ""  # Empty = auto-detect

    # Enrichment
    workers: Optional[int] = None  # None = auto-detect
    sequential: bool = False

    # Snapshot cache
    refresh: bool = False  # Bypass the cache and list fresh
    cache_dir: Optional[str] = None  # None = user cache directory

    # Deletion confirmation policy
    confirm_dirty: bool = True
    confirm_unmerged: bool = True
    require_typing_for_unique: bool = True

    # Logging
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_worktree_dir()
        self._validate_workers()
        self.remote = (self.remote or "").strip()
        self.default_base_branch = (self.default_base_branch or "").strip()

    def _validate_worktree_dir(self):
        """Validate worktree_dir is not empty."""
        if not self.worktree_dir or not self.worktree_dir.strip():
            raise ValueError("worktree_dir cannot be empty")
        self.worktree_dir = self.worktree_dir.strip()

    def _validate_workers(self):
        """Validate workers is positive when set."""
        if self.workers is not None and self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    def needs_confirmation(self, info: SafetyInfo) -> bool:
        """Whether deleting a worktree with this classification needs a confirmation step."""
        if info.level == SafetyLevel.SAFE:
            return False
        if info.level == SafetyLevel.DANGER:
            return True
        if not info.is_verified:
            return True
        return (
            (info.has_uncommitted_changes and self.confirm_dirty)
            or (not info.is_merged and self.confirm_unmerged)
            or info.has_unpushed_commits
        )

    def requires_typed_confirmation(self, info: SafetyInfo) -> bool:
        """Whether the user must type a confirmation word rather than press a key."""
        return info.level == SafetyLevel.DANGER and self.require_typing_for_unique

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def get(self, key: str, default=None):
        """Get config value by key, dict style."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
