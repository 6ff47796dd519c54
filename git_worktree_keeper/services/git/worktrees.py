"""Worktree listing and lifecycle service for git-worktree-keeper."""

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import List, Optional, Set, Union, TYPE_CHECKING

from git_worktree_keeper.exceptions import GitCommandFailed, WorktreeNotFoundError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.repository import Repository
from git_worktree_keeper.models.worktree import Worktree, detached_label
from git_worktree_keeper.services.git.branch_queries import BranchQueries
from git_worktree_keeper.services.git.enricher import enrich_worktree
from git_worktree_keeper.services.git.runner import run_git
from git_worktree_keeper.utils.threading import get_optimal_worker_count

if TYPE_CHECKING:
    from git_worktree_keeper.config import Config

logger = get_logger(__name__)

BRANCH_REF_PREFIX = "refs/heads/"


def parse_worktree_list(output: str) -> List[Worktree]:
    """Parse ``git worktree list --porcelain`` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name   (or "detached", or "bare")
        (blank line between worktrees)

    A ``worktree`` line starts a new record; other recognized lines attach to
    the current one. Unrecognized and blank lines are ignored.
    """
    worktrees: List[Worktree] = []
    current: Optional[Worktree] = None

    def flush():
        if current is None:
            return
        if current.is_detached:
            current.branch = detached_label(current.head) if current.head else "(detached)"
        worktrees.append(current)

    for line in output.split("\n"):
        line = line.rstrip("\r")

        if line.startswith("worktree "):
            flush()
            current = Worktree(path=line[len("worktree "):])
            continue

        if current is None:
            continue

        if line.startswith("HEAD "):
            current.head = line[len("HEAD "):].strip()
        elif line.startswith("branch "):
            ref = line[len("branch "):].strip()
            if ref.startswith(BRANCH_REF_PREFIX):
                ref = ref[len(BRANCH_REF_PREFIX):]
            current.branch = ref
        elif line == "bare":
            current.is_bare = True
            current.branch = ""
        elif line == "detached":
            current.is_detached = True

    flush()
    return worktrees


def _is_within(path: str, root: str) -> bool:
    return path == root or path.startswith(root.rstrip(os.sep) + os.sep)


def mark_current_and_main(worktrees: List[Worktree], cwd: str, repo: Repository) -> None:
    """Set is_current and is_main on parsed records.

    Worktrees can be nested (the default location is inside the main
    worktree), so the deepest worktree containing ``cwd`` is the current one.
    """
    resolved_cwd = os.path.realpath(cwd)
    main_root = os.path.realpath(repo.main_worktree_root)

    best: Optional[Worktree] = None
    best_depth = -1
    for index, wt in enumerate(worktrees):
        resolved = os.path.realpath(wt.path)
        if repo.is_bare:
            wt.is_main = index == 0
        else:
            wt.is_main = resolved == main_root

        if _is_within(resolved_cwd, resolved):
            depth = len(Path(resolved).parts)
            if depth > best_depth:
                best, best_depth = wt, depth

    for wt in worktrees:
        wt.is_current = wt is best


def default_worktree_path(repo: Repository, branch: str, worktree_dir: str = ".worktrees") -> str:
    """Where a new worktree for ``branch`` goes by default."""
    return os.path.join(repo.main_worktree_root, worktree_dir, branch.replace("/", "-"))


class WorktreeService:
    """Service for listing and managing git worktrees."""

    def __init__(self, repo: Repository, config: Optional[Union["Config", dict]] = None):
        """Initialize the worktree service.

        Args:
            repo: Detected repository
            config: Configuration (workers, sequential, remote)
        """
        self.repo = repo
        self.config = config if config is not None else {}
        self.queries = BranchQueries(repo.root, self.config.get("remote", "") or "", repo.main_worktree_root)

    def list_worktrees(self, enrich: bool = True, cwd: Optional[str] = None) -> List[Worktree]:
        """List all worktrees of the repository.

        Args:
            enrich: Fill in status fields (dirty, upstream, merge, last commit)
            cwd: Directory used to decide which worktree is current

        Returns:
            Worktrees in git's listing order

        Raises:
            GitCommandFailed: If the listing query itself fails
        """
        output = run_git("worktree", "list", "--porcelain", cwd=self.repo.root)
        worktrees = parse_worktree_list(output)
        mark_current_and_main(worktrees, cwd or os.getcwd(), self.repo)

        logger.debug(f"Found {len(worktrees)} worktrees")
        if enrich:
            self.enrich_all(worktrees)
        return worktrees

    def enrich_all(self, worktrees: List[Worktree]) -> None:
        """Enrich every record, one unit of work per worktree, and wait for all.

        A failure while enriching one worktree is logged and never hides the
        other records.
        """
        if not worktrees:
            return

        merged_branches = self._lookup_merged_branches(worktrees)

        if self.config.get("sequential", False) or len(worktrees) == 1:
            for wt in worktrees:
                self._enrich_one(wt, merged_branches)
            return

        max_workers = get_optimal_worker_count(self.config.get("workers"), len(worktrees))
        logger.debug(f"Enriching {len(worktrees)} worktrees with {max_workers} workers")

        # Leaving the with-block waits for every submitted unit
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="enrich") as executor:
            future_to_worktree = {
                executor.submit(enrich_worktree, wt, self.repo, self.queries, merged_branches): wt
                for wt in worktrees
            }
            for future in as_completed(future_to_worktree):
                wt = future_to_worktree[future]
                try:
                    future.result()
                except Exception as e:
                    logger.error(f"Error enriching worktree {wt.path}: {e}")

    def _enrich_one(self, wt: Worktree, merged_branches: Optional[Set[str]]) -> None:
        try:
            enrich_worktree(wt, self.repo, self.queries, merged_branches)
        except Exception as e:
            logger.error(f"Error enriching worktree {wt.path}: {e}")

    def _lookup_merged_branches(self, worktrees: List[Worktree]) -> Optional[Set[str]]:
        """Run the merged-branch query once for all branch worktrees."""
        default_branch = self.repo.default_branch
        needs_lookup = any(
            wt.branch and not wt.is_detached and not wt.is_bare and wt.branch != default_branch
            for wt in worktrees
        )
        if not needs_lookup:
            return None
        try:
            return self.queries.get_merged_branches(default_branch)
        except GitCommandFailed as e:
            logger.debug(f"Could not list branches merged into {default_branch}: {e}")
            return None

    def find_worktree(self, path: str) -> Worktree:
        """Return the unenriched record for the worktree at ``path``.

        Raises:
            WorktreeNotFoundError: If no worktree lives exactly at ``path``
        """
        resolved = os.path.realpath(path)
        for wt in self.list_worktrees(enrich=False):
            if os.path.realpath(wt.path) == resolved:
                return wt
        raise WorktreeNotFoundError(path)

    def get_worktree_branches(self) -> Set[str]:
        """Get set of branch names that are checked out in worktrees."""
        return {
            wt.branch
            for wt in self.list_worktrees(enrich=False)
            if wt.branch and not wt.is_detached
        }

    def create_worktree(self, path: str, branch: str, new_branch: bool = False, base_branch: str = "") -> None:
        """Create a worktree at ``path``.

        Args:
            path: Directory for the new worktree (parent is created)
            branch: Branch to check out, or to create when ``new_branch``
            new_branch: Create ``branch`` starting at ``base_branch``
            base_branch: Start point for a new branch (default: HEAD)

        Raises:
            GitCommandFailed: If git refuses to create the worktree
        """
        Path(path).parent.mkdir(parents=True, exist_ok=True)

        if new_branch:
            args = ["worktree", "add", "-b", branch, path]
            if base_branch:
                args.append(base_branch)
        else:
            args = ["worktree", "add", path, branch]

        run_git(*args, cwd=self.repo.main_worktree_root)
        logger.info(f"Created worktree for {branch} at {path}")

    def remove_worktree(self, path: str, force: bool = False) -> None:
        """Remove the worktree at ``path``.

        Args:
            path: Path to the worktree directory
            force: Remove even if the worktree is dirty or locked

        Raises:
            GitCommandFailed: If git refuses to remove the worktree
        """
        args = ["worktree", "remove", path]
        if force:
            args.append("--force")
        run_git(*args, cwd=self.repo.main_worktree_root)
        logger.info(f"Removed worktree at {path}")

    def prune_worktrees(self) -> None:
        """Prune metadata of worktrees whose directories are gone.

        Raises:
            GitCommandFailed: If the prune fails
        """
        run_git("worktree", "prune", cwd=self.repo.main_worktree_root)
        logger.info("Pruned orphaned worktree metadata")
