"""Stash operations for a single worktree."""

import re
from dataclasses import dataclass
from typing import List

from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.services.git.runner import run_git, output_lines

logger = get_logger(__name__)

_STASH_REF_RE = re.compile(r"^stash@\{(\d+)\}$")


@dataclass
class StashEntry:
    """A single stash entry."""
    index: int
    message: str


def parse_stash_list(output: str) -> List[StashEntry]:
    """Parse ``git stash list`` output; malformed lines are skipped."""
    entries = []
    for line in output_lines(output):
        ref, _, message = line.strip().partition(": ")
        match = _STASH_REF_RE.match(ref)
        if not match:
            continue
        entries.append(StashEntry(index=int(match.group(1)), message=message))
    return entries


def list_stashes(worktree_path: str) -> List[StashEntry]:
    """Return the repository's stashes as seen from a worktree."""
    return parse_stash_list(run_git("stash", "list", cwd=worktree_path))


def get_stash_count(worktree_path: str) -> int:
    """Return the number of stash entries."""
    return len(output_lines(run_git("stash", "list", cwd=worktree_path)))


def create_stash(worktree_path: str, message: str = "") -> str:
    """Stash the worktree's changes and return git's summary line."""
    args = ["stash", "push"]
    if message:
        args += ["-m", message]
    output = run_git(*args, cwd=worktree_path).strip()
    logger.info(f"Stashed changes in {worktree_path}")
    return output


def pop_stash_at(worktree_path: str, index: int) -> None:
    """Apply and drop the stash entry at ``index``."""
    run_git("stash", "pop", f"stash@{{{index}}}", cwd=worktree_path)


def apply_stash(worktree_path: str, index: int) -> None:
    """Apply the stash entry at ``index`` without dropping it."""
    run_git("stash", "apply", f"stash@{{{index}}}", cwd=worktree_path)


def drop_stash(worktree_path: str, index: int) -> None:
    """Remove the stash entry at ``index``."""
    run_git("stash", "drop", f"stash@{{{index}}}", cwd=worktree_path)
