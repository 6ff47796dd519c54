"""Core functionality for git-worktree-keeper"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple, Union

from git_worktree_keeper.config import Config
from git_worktree_keeper.exceptions import GitWorktreeKeeperError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.branch import Branch
from git_worktree_keeper.models.safety import SafetyInfo
from git_worktree_keeper.models.worktree import Worktree
from git_worktree_keeper.services.cache_service import CacheService
from git_worktree_keeper.services.git.repository import get_primary_remote, get_repo, update_default_branch
from git_worktree_keeper.services.git.status import fetch_all, push_branch
from git_worktree_keeper.services.git.worktrees import WorktreeService, default_worktree_path
from git_worktree_keeper.services.safety_service import SafetyService

logger = get_logger(__name__)

RefreshCallback = Callable[[Optional[List[Worktree]], Optional[Exception]], None]


class WorktreeKeeper:
    """Entry point for listing, caching, creating, removing and classifying worktrees.

    Methods block while git runs; an interactive front end calls them from a
    worker so its event loop stays responsive. Background refreshes run on a
    single worker owned by this object.
    """

    def __init__(self, config: Optional[Union[Config, dict]] = None, repo_path: Optional[str] = None):
        """Initialize WorktreeKeeper.

        Args:
            config: Configuration dict or Config object
            repo_path: Directory to detect the repository from (default: cwd)

        Raises:
            NotARepositoryError: If no repository can be detected
        """
        if config is None:
            self.config = Config()
        elif isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config

        self.repo = get_repo(repo_path)
        if self.config.remote:
            update_default_branch(self.config.remote)

        self.worktree_service = WorktreeService(self.repo, self.config)
        self.safety_service = SafetyService(self.repo, self.config)
        self.cache_service = CacheService(self.config.cache_dir)
        self.branch_queries = self.worktree_service.queries

        self._refresh_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="refresh")
        self.pending_refresh: Optional[Future] = None
        self._closed = False
        self._close_lock = threading.Lock()

    @property
    def cache_root(self) -> str:
        """The cache is anchored at the main worktree so every worktree shares it."""
        return self.repo.main_worktree_root

    def fetch(self) -> None:
        """Fetch and prune every remote so upstream comparisons are current."""
        fetch_all(self.repo.main_worktree_root)

    def list_worktrees(self) -> List[Worktree]:
        """List and enrich all worktrees, bypassing the cache."""
        return self.worktree_service.list_worktrees()

    def list_and_cache(self) -> List[Worktree]:
        """List fresh worktrees and save them as the new snapshot."""
        worktrees = self.list_worktrees()
        self.cache_service.save_cache(self.cache_root, worktrees)
        return worktrees

    def list_cached(self, on_refresh: Optional[RefreshCallback] = None) -> Tuple[List[Worktree], bool]:
        """Return worktrees from the snapshot if there is one, else list fresh.

        On a cache hit the snapshot is returned immediately and a background
        refresh is always started; ``on_refresh`` receives its result. On a
        miss the listing runs synchronously and is saved.

        Returns:
            Tuple of (worktrees, from_cache)

        Raises:
            GitWorktreeKeeperError: If a fresh listing is needed and fails
        """
        if not self.config.refresh:
            snapshot = self.cache_service.load_cache(self.cache_root)
            if snapshot is not None:
                logger.debug(f"Serving {len(snapshot.worktrees)} cached worktrees, refreshing")
                self.refresh_in_background(on_refresh)
                return snapshot.worktrees, True

        return self.list_and_cache(), False

    def refresh_in_background(self, callback: Optional[RefreshCallback] = None) -> Future:
        """Re-list and re-save on the background worker.

        After close() there is no worker; the refresh then runs inline and
        the returned future is already done.

        Args:
            callback: Called with (worktrees, None) on success or
                (None, error) on failure, from the worker thread

        Returns:
            Future resolving to the fresh worktrees
        """
        with self._close_lock:
            if not self._closed:
                self.pending_refresh = self._refresh_executor.submit(self._refresh, callback)
                return self.pending_refresh

        logger.debug("Keeper is closed, refreshing inline")
        future: Future = Future()
        try:
            future.set_result(self._refresh(callback))
        except GitWorktreeKeeperError as e:
            future.set_exception(e)
        self.pending_refresh = future
        return future

    def _refresh(self, callback: Optional[RefreshCallback]) -> List[Worktree]:
        try:
            worktrees = self.list_and_cache()
        except GitWorktreeKeeperError as e:
            logger.warning(f"Background refresh failed: {e}")
            if callback:
                callback(None, e)
            raise
        if callback:
            callback(worktrees, None)
        return worktrees

    def worktree_path_for(self, branch: str) -> str:
        """Default location for a worktree of ``branch``."""
        return default_worktree_path(self.repo, branch, self.config.worktree_dir)

    def create_worktree(
        self,
        branch: str,
        new_branch: bool = False,
        base_branch: str = "",
        path: Optional[str] = None,
    ) -> str:
        """Create a worktree for ``branch`` and return its path.

        A new branch starts at ``base_branch``, the configured base, or the
        default branch, in that order.
        """
        path = path or self.worktree_path_for(branch)
        if new_branch:
            base_branch = base_branch or self.config.default_base_branch or self.repo.default_branch
        self.worktree_service.create_worktree(path, branch, new_branch, base_branch)
        self.cache_service.clear_cache(self.cache_root)
        return path

    def remove_worktree(self, path: str, force: bool = False) -> None:
        """Remove the worktree at ``path``."""
        self.worktree_service.remove_worktree(path, force)
        self.cache_service.clear_cache(self.cache_root)

    def prune_worktrees(self) -> None:
        """Prune metadata of worktrees whose directories are gone."""
        self.worktree_service.prune_worktrees()
        self.cache_service.clear_cache(self.cache_root)

    def find_worktree(self, path: str) -> Worktree:
        """Look up the worktree at ``path`` without enriching it."""
        return self.worktree_service.find_worktree(path)

    def check_safety(self, worktree: Worktree) -> SafetyInfo:
        """Classify deleting a listed worktree, from live state."""
        return self.safety_service.check_worktree(worktree)

    def check_safety_for(self, path: str, branch: str, default_branch: Optional[str] = None) -> SafetyInfo:
        """Classify deleting the worktree at ``path`` with ``branch`` checked out."""
        if default_branch is None:
            default_branch = self.repo.default_branch
        return self.safety_service.check_safety(path, branch, default_branch)

    def list_branches(self) -> List[Branch]:
        """Local branches, remote branches and tags in display order."""
        return self.branch_queries.list_all_branches_with_worktree_status(
            self.worktree_service.get_worktree_branches(), self.repo.default_branch
        )

    def delete_branch(self, name: str, force: bool = False) -> None:
        """Delete a local branch (typically after removing its worktree)."""
        self.branch_queries.delete_branch(name, force)

    def push_branch(self, worktree: Worktree) -> str:
        """Push a worktree's branch to the primary remote and track it there.

        Returns:
            The remote pushed to

        Raises:
            GitWorktreeKeeperError: If the worktree has no branch
            GitCommandFailed: If the push fails
        """
        if worktree.is_detached or not worktree.branch:
            raise GitWorktreeKeeperError(f"{worktree.path} has no branch to push")
        remote = get_primary_remote(self.config.remote, cwd=self.repo.main_worktree_root)
        push_branch(worktree.path, worktree.branch, remote)
        self.cache_service.clear_cache(self.cache_root)
        return remote

    def close(self) -> None:
        """Wait for any background refresh and release the worker."""
        with self._close_lock:
            self._closed = True
        self._refresh_executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
