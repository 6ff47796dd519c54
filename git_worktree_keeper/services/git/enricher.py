"""Per-worktree status enrichment.

Fills in the display fields of one Worktree record. Each sub-query is best
effort: a failure leaves that field at its zero value and the rest of the
record is still populated. Deletion safety never reads these fields; it runs
its own checks (see safety_service).
"""

from typing import Optional, Set

from git_worktree_keeper.exceptions import GitCommandFailed
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.repository import Repository
from git_worktree_keeper.models.worktree import Worktree
from git_worktree_keeper.services.git.branch_queries import BranchQueries
from git_worktree_keeper.services.git.status import get_dirty_status, get_upstream_status, get_last_commit

logger = get_logger(__name__)


def enrich_worktree(
    worktree: Worktree,
    repo: Repository,
    queries: BranchQueries,
    merged_branches: Optional[Set[str]] = None,
) -> Worktree:
    """Populate the volatile fields of ``worktree`` in place.

    Only touches ``worktree``, so many calls can run concurrently on
    different records.

    Args:
        worktree: Record to fill in
        repo: Repository, for the default branch
        queries: Branch comparison service
        merged_branches: Branches merged into the default branch, if the
            caller already looked them up; queried here otherwise

    Returns:
        The same record, for convenience
    """
    if worktree.is_bare:
        return worktree

    path = worktree.path
    default_branch = repo.default_branch

    try:
        worktree.is_dirty, worktree.dirty_files = get_dirty_status(path)
    except GitCommandFailed as e:
        logger.debug(f"Could not get dirty status for {path}: {e}")

    if worktree.is_detached:
        # No branch to diff against, but the commit itself can still be
        # tested for reachability from the default branch.
        if worktree.head:
            try:
                worktree.is_merged = queries.is_commit_merged(worktree.head, default_branch)
                worktree.merge_known = True
            except GitCommandFailed as e:
                logger.debug(f"Could not check merge status of {worktree.head[:7]}: {e}")
    elif worktree.branch == default_branch:
        worktree.is_merged = True
        worktree.merge_known = True
    elif worktree.branch:
        _enrich_branch(worktree, default_branch, queries, merged_branches)

    try:
        (
            worktree.last_commit_hash,
            worktree.last_commit_message,
            worktree.last_commit_time,
        ) = get_last_commit(path)
    except GitCommandFailed as e:
        logger.debug(f"Could not get last commit for {path}: {e}")

    return worktree


def _enrich_branch(
    worktree: Worktree,
    default_branch: str,
    queries: BranchQueries,
    merged_branches: Optional[Set[str]],
) -> None:
    branch = worktree.branch

    worktree.ahead, worktree.behind, worktree.has_upstream = get_upstream_status(worktree.path, branch)

    try:
        if merged_branches is None:
            worktree.is_merged = queries.is_branch_merged(branch, default_branch)
        else:
            worktree.is_merged = branch in merged_branches
        worktree.merge_known = True
    except GitCommandFailed as e:
        logger.debug(f"Could not check merge status of {branch}: {e}")

    try:
        worktree.unique_commits = len(queries.get_unique_commits(branch, default_branch))
    except GitCommandFailed as e:
        logger.debug(f"Could not count unique commits on {branch}: {e}")
