"""Git-related services for git-worktree-keeper."""

from .branch_queries import BranchQueries
from .enricher import enrich_worktree
from .repository import get_repo, reset_repo, update_default_branch, get_primary_remote
from .runner import run_git
from .worktrees import WorktreeService, parse_worktree_list

__all__ = [
    "BranchQueries",
    "WorktreeService",
    "enrich_worktree",
    "get_primary_remote",
    "get_repo",
    "parse_worktree_list",
    "reset_repo",
    "run_git",
    "update_default_branch",
]
