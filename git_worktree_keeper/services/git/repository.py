"""Repository detection for git-worktree-keeper.

The detected Repository is memoized for the whole process. ``get_repo`` and
``reset_repo`` are the accessor pair; ``update_default_branch`` is the single
permitted change after detection.
"""

import os
import threading
from typing import Optional

from git_worktree_keeper.exceptions import GitCommandFailed, NotARepositoryError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.repository import Repository
from git_worktree_keeper.services.git.runner import run_git, git_succeeds

logger = get_logger(__name__)

DEFAULT_BRANCH_CANDIDATES = ("main", "master")
FALLBACK_DEFAULT_BRANCH = "main"
FALLBACK_REMOTE = "origin"

_current_repo: Optional[Repository] = None
_repo_lock = threading.Lock()


def get_repo(path: Optional[str] = None) -> Repository:
    """Return the process-wide Repository, detecting it on first use.

    Args:
        path: Directory to detect from (default: current directory). Only used
            on the first call after start-up or ``reset_repo``.

    Raises:
        NotARepositoryError: If the directory is not inside a git repository
    """
    global _current_repo
    with _repo_lock:
        if _current_repo is None:
            _current_repo = detect_repo(path)
        return _current_repo


def reset_repo() -> None:
    """Forget the cached Repository so the next ``get_repo`` detects again."""
    global _current_repo
    with _repo_lock:
        _current_repo = None


def update_default_branch(configured_remote: str) -> None:
    """Re-detect the default branch now that a specific remote is configured.

    Does nothing if no repository has been detected yet or no remote is given.
    """
    with _repo_lock:
        repo = _current_repo
        if repo is None or not configured_remote:
            return
        branch = detect_default_branch(configured_remote, cwd=repo.root)
        if branch != repo.default_branch:
            logger.info(f"Default branch is now '{branch}' (remote '{configured_remote}')")
        repo.set_default_branch(branch)


def detect_repo(path: Optional[str] = None) -> Repository:
    """Detect the repository containing ``path`` without touching the cache."""
    cwd = os.path.abspath(path or os.getcwd())

    # The common dir is authoritative: inside a linked worktree, .git is only
    # a pointer into it.
    try:
        git_dir = run_git("rev-parse", "--git-common-dir", cwd=cwd).strip()
    except GitCommandFailed as e:
        raise NotARepositoryError(cwd, e.stderr or str(e)) from e

    if not os.path.isabs(git_dir):
        git_dir = os.path.join(cwd, git_dir)
    git_dir = os.path.realpath(git_dir)

    try:
        is_bare = run_git("rev-parse", "--is-bare-repository", cwd=cwd).strip() == "true"
        if is_bare:
            root = git_dir
            main_root = git_dir
        else:
            root = run_git("rev-parse", "--show-toplevel", cwd=cwd).strip()
            main_root = os.path.dirname(git_dir)
    except GitCommandFailed as e:
        raise NotARepositoryError(cwd, e.stderr or str(e)) from e

    repo = Repository(
        root=root,
        main_worktree_root=main_root,
        git_dir=git_dir,
        is_bare=is_bare,
        default_branch=detect_default_branch(cwd=cwd),
    )
    logger.debug(f"Detected {repo!r}")
    return repo


def list_remotes(cwd: Optional[str] = None) -> list:
    """Return remote names as listed by git (alphabetical)."""
    try:
        return run_git("remote", cwd=cwd).split()
    except GitCommandFailed:
        return []


def get_primary_remote(configured_remote: str = "", cwd: Optional[str] = None) -> str:
    """Pick the remote to treat as primary.

    The configured remote wins. Otherwise: the only remote if there is exactly
    one, else "origin" if present, else the alphabetically first. Falls back
    to "origin" when the repository has no remotes.
    """
    if configured_remote:
        return configured_remote

    remotes = list_remotes(cwd)
    if not remotes:
        return FALLBACK_REMOTE
    if len(remotes) == 1:
        return remotes[0]
    if FALLBACK_REMOTE in remotes:
        return FALLBACK_REMOTE
    return sorted(remotes)[0]


def detect_default_branch(configured_remote: str = "", cwd: Optional[str] = None) -> str:
    """Determine the repository's default branch.

    Order: the primary remote's symbolic HEAD, then a local "main" or
    "master" branch, then the literal "main".
    """
    remote = get_primary_remote(configured_remote, cwd)
    prefix = f"refs/remotes/{remote}/"
    try:
        ref = run_git("symbolic-ref", f"{prefix}HEAD", cwd=cwd).strip()
        if ref.startswith(prefix):
            return ref[len(prefix):]
    except GitCommandFailed:
        logger.debug(f"Remote '{remote}' has no symbolic HEAD")

    for branch in DEFAULT_BRANCH_CANDIDATES:
        if git_succeeds("rev-parse", "--verify", "--quiet", f"refs/heads/{branch}", cwd=cwd):
            return branch

    return FALLBACK_DEFAULT_BRANCH
