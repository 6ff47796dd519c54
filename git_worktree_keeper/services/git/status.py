"""Working-tree and upstream status queries."""

from typing import Optional, Tuple

from git_worktree_keeper.exceptions import GitCommandFailed
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.services.git.runner import run_git, output_lines

logger = get_logger(__name__)

_FIELD_SEP = "\x1f"


def get_dirty_status(worktree_path: str) -> Tuple[bool, int]:
    """Count staged, unstaged and untracked files in a worktree.

    Returns:
        Tuple of (is_dirty, changed_file_count)

    Raises:
        GitCommandFailed: If git status cannot run in the worktree
    """
    output = run_git("status", "--porcelain", cwd=worktree_path)
    count = len(output_lines(output))
    return count > 0, count


def local_ref(branch: str) -> str:
    """Fully qualified ref of a local branch, so a same-named tag cannot shadow it."""
    return f"refs/heads/{branch}"


def get_upstream_ref(worktree_path: str, branch: str) -> str:
    """Return the full upstream ref configured for ``branch`` ("" when none).

    The ref comes from branch config, so it is returned even when the
    remote-tracking ref itself has been deleted.

    Raises:
        GitCommandFailed: If the query cannot run
    """
    return run_git(
        "for-each-ref", "--format=%(upstream)", local_ref(branch), cwd=worktree_path
    ).strip()


def get_upstream_status(worktree_path: str, branch: str) -> Tuple[int, int, bool]:
    """Return how many commits ``branch`` is ahead of / behind its upstream.

    A missing or unreadable upstream is not an error.

    Returns:
        Tuple of (ahead, behind, has_upstream)
    """
    try:
        upstream = get_upstream_ref(worktree_path, branch)
        if not upstream:
            return 0, 0, False
        output = run_git(
            "rev-list", "--left-right", "--count", f"{upstream}...{local_ref(branch)}", cwd=worktree_path
        )
    except GitCommandFailed:
        return 0, 0, False

    parts = output.split()
    if len(parts) != 2:
        return 0, 0, True
    behind, ahead = int(parts[0]), int(parts[1])
    return ahead, behind, True


def count_unpushed_commits(worktree_path: str, branch: str, upstream: str) -> int:
    """Count commits on ``branch`` that ``upstream`` does not have.

    Raises:
        GitCommandFailed: If the upstream ref cannot be resolved (e.g. gone)
    """
    output = run_git("rev-list", "--count", f"{upstream}..{local_ref(branch)}", cwd=worktree_path)
    return int(output.strip() or 0)


def get_head_commit(worktree_path: str) -> str:
    """Return the full hash HEAD points at in a worktree."""
    return run_git("rev-parse", "HEAD", cwd=worktree_path).strip()


def get_last_commit(worktree_path: str) -> Tuple[str, str, str]:
    """Return (short hash, subject, relative time) of HEAD in one query.

    Raises:
        GitCommandFailed: If the worktree has no commits or cannot be read
    """
    output = run_git(
        "log", "-1", f"--format=%h{_FIELD_SEP}%s{_FIELD_SEP}%cr", cwd=worktree_path
    ).strip()
    parts = output.split(_FIELD_SEP)
    parts += [""] * (3 - len(parts))
    return parts[0], parts[1], parts[2]


def fetch_all(repo_path: Optional[str] = None) -> None:
    """Fetch and prune every remote.

    Raises:
        GitCommandFailed: If the fetch fails
    """
    run_git("fetch", "--all", "--prune", cwd=repo_path)
    logger.info("Fetched all remotes")


def push_branch(worktree_path: str, branch: str, remote: str) -> None:
    """Push ``branch`` to ``remote`` and set it as the upstream.

    Raises:
        GitCommandFailed: If the push is rejected or the remote is unreachable
    """
    run_git("push", "-u", remote, f"{local_ref(branch)}:{local_ref(branch)}", cwd=worktree_path)
    logger.info(f"Pushed {branch} to {remote}")
