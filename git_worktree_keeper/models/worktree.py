"""Worktree data models."""

import os
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict

DETACHED_SUFFIX = " (detached)"


def detached_label(head: str) -> str:
    """Display label for a worktree checked out at a raw commit."""
    return f"{head[:7]}{DETACHED_SUFFIX}"


@dataclass
class Worktree:
    """A linked working directory of the repository and its status.

    Records are created fresh by every listing; the status fields are filled
    in once by the enricher and not changed afterwards.
    """

    path: str
    branch: str = ""
    head: str = ""
    is_current: bool = False
    is_main: bool = False
    is_detached: bool = False
    is_bare: bool = False

    # Working tree
    is_dirty: bool = False
    dirty_files: int = 0

    # Upstream tracking
    has_upstream: bool = False
    ahead: int = 0
    behind: int = 0

    # Merge state. merge_known is False when the merge check could not run,
    # which is different from "not merged".
    is_merged: bool = False
    merge_known: bool = False
    unique_commits: int = 0

    # Last commit
    last_commit_hash: str = ""
    last_commit_message: str = ""
    last_commit_time: str = ""

    @property
    def branch_short(self) -> str:
        """Last path segment of the branch name (feature/auth -> auth)."""
        return self.branch.rsplit("/", 1)[-1]

    def short_path(self, main_root: str) -> str:
        """Path relative to the main worktree root, or absolute when outside it."""
        try:
            rel = os.path.relpath(self.path, main_root)
        except ValueError:
            return self.path
        if rel == os.curdir:
            return "."
        if rel == os.pardir or rel.startswith(os.pardir + os.sep):
            return self.path
        return rel

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Worktree":
        """Create a Worktree from a dictionary, ignoring unknown keys.

        Raises:
            KeyError: If the required 'path' key is missing
            TypeError: If data is not a mapping
            ValueError: If a known field holds a value of the wrong type
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected a mapping, got {type(data).__name__}")
        filtered = {}
        for field in fields(cls):
            if field.name not in data:
                continue
            value = data[field.name]
            # bool is an int subclass; a count must not be True/False
            if not isinstance(value, field.type) or (field.type is int and isinstance(value, bool)):
                raise ValueError(
                    f"field '{field.name}' should be {field.type.__name__}, got {type(value).__name__}"
                )
            filtered[field.name] = value
        if "path" not in filtered:
            raise KeyError("path")
        return cls(**filtered)

    def __str__(self) -> str:
        main_marker = " (main)" if self.is_main else ""
        current_marker = " *" if self.is_current else ""
        return f"{self.branch or '(bare)'} @ {self.path}{main_marker}{current_marker}"
