"""Snapshot cache for worktree listings.

One JSON snapshot per repository, shared by every running instance of the
tool. Readers take a shared lock and writers an exclusive lock on a companion
``.lock`` file; writers also replace the snapshot atomically (temp file +
rename) so a reader never sees a partial file. Any failure is a cache miss:
the cache only ever speeds things up and is never a source of truth.
"""
import json
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from platformdirs import user_cache_dir

from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import Worktree

# Import fcntl for POSIX file locking (Unix/Linux/macOS)
try:
    import fcntl
    HAS_FCNTL = True
except ImportError:
    HAS_FCNTL = False

logger = get_logger(__name__)

APP_NAME = "git-worktree-keeper"
LOCK_SUFFIX = ".lock"


class CacheUnavailable(Exception):
    """The cache lock could not be taken; callers treat this as a miss."""


@dataclass
class Snapshot:
    """The last saved worktree listing for a repository."""
    repo_root: str
    worktrees: List[Worktree]
    updated_at: datetime


class CacheService:
    """Manages the on-disk worktree snapshot for repositories."""

    def __init__(self, cache_dir: Optional[Union[str, Path]] = None):
        """Initialize the cache service.

        Args:
            cache_dir: Directory for snapshot files (default: user cache dir)
        """
        self.cache_dir = Path(cache_dir) if cache_dir else Path(user_cache_dir(APP_NAME))

    def cache_path(self, repo_root: str) -> Path:
        """Snapshot file for a repository.

        Keyed by the repository directory's base name, so two repositories
        with the same name share a file; the stored root tells them apart.
        """
        return self.cache_dir / f"{os.path.basename(os.path.normpath(repo_root))}.json"

    def lock_path(self, repo_root: str) -> Path:
        path = self.cache_path(repo_root)
        return path.with_name(path.name + LOCK_SUFFIX)

    @contextmanager
    def _acquire_cache_lock(self, repo_root: str, operation: str = "read"):
        """Hold the advisory lock for a repository's snapshot.

        Args:
            repo_root: Repository whose snapshot is locked
            operation: "read" for a shared lock, "write" for an exclusive one

        Raises:
            CacheUnavailable: If locking is unsupported or the lock cannot be taken
        """
        if not HAS_FCNTL:
            raise CacheUnavailable("File locking not available on this platform")

        lock_file = self.lock_path(repo_root)
        try:
            handle = open(lock_file, "a")
        except OSError as e:
            raise CacheUnavailable(f"Cannot open lock file {lock_file}: {e}") from e

        try:
            lock_type = fcntl.LOCK_EX if operation == "write" else fcntl.LOCK_SH
            try:
                fcntl.flock(handle.fileno(), lock_type)
            except OSError as e:
                raise CacheUnavailable(f"Cannot lock {lock_file}: {e}") from e
            logger.debug(f"Acquired {operation} lock on {lock_file}")
            try:
                yield
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
                logger.debug(f"Released {operation} lock on {lock_file}")
        finally:
            handle.close()

    def load_cache(self, repo_root: str) -> Optional[Snapshot]:
        """Load the snapshot for ``repo_root``.

        There is no expiry: any readable snapshot for the same root is
        returned, and callers refresh it in the background.

        Returns:
            The snapshot, or None on any kind of miss (absent, unreadable,
            corrupt, saved for a different root, lock unavailable)
        """
        cache_file = self.cache_path(repo_root)
        if not cache_file.exists():
            logger.debug(f"No cache file at {cache_file}")
            return None

        try:
            with self._acquire_cache_lock(repo_root, operation="read"):
                with open(cache_file, "r", encoding="utf-8") as f:
                    cache_data = json.load(f)
            snapshot = self._deserialize(cache_data)
        except CacheUnavailable as e:
            logger.warning(f"Cache unavailable: {e}")
            return None
        except (OSError, ValueError, TypeError, KeyError) as e:
            logger.warning(f"Failed to load cache {cache_file}: {e}")
            return None

        if snapshot.repo_root != repo_root:
            logger.debug(f"Cache {cache_file} belongs to {snapshot.repo_root}, not {repo_root}")
            return None

        logger.debug(f"Loaded cache with {len(snapshot.worktrees)} worktrees from {snapshot.updated_at}")
        return snapshot

    def save_cache(self, repo_root: str, worktrees: List[Worktree]) -> bool:
        """Save a snapshot for ``repo_root`` atomically under the write lock.

        Returns:
            True if the snapshot was written; failures are logged, not raised
        """
        cache_file = self.cache_path(repo_root)
        cache_data = {
            "repo_root": repo_root,
            "worktrees": [wt.to_dict() for wt in worktrees],
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

        try:
            payload = json.dumps(cache_data, indent=2)
            self.cache_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
            with self._acquire_cache_lock(repo_root, operation="write"):
                self._atomic_write(cache_file, payload)
        except CacheUnavailable as e:
            logger.warning(f"Cache unavailable, not saving: {e}")
            return False
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to save cache {cache_file}: {e}")
            return False

        logger.debug(f"Saved cache with {len(worktrees)} worktrees to {cache_file}")
        return True

    def clear_cache(self, repo_root: str) -> None:
        """Remove the snapshot for ``repo_root``."""
        cache_file = self.cache_path(repo_root)
        try:
            with self._acquire_cache_lock(repo_root, operation="write"):
                cache_file.unlink(missing_ok=True)
            logger.info("Cache cleared")
        except (CacheUnavailable, OSError) as e:
            logger.warning(f"Failed to clear cache: {e}")

    def _atomic_write(self, target: Path, payload: str) -> None:
        """Write ``payload`` to a temp file beside ``target`` and rename it over."""
        fd, temp_name = tempfile.mkstemp(dir=str(target.parent), prefix=f"{target.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_name, target)
        except BaseException:
            try:
                os.unlink(temp_name)
            except OSError:
                pass
            raise

    @staticmethod
    def _deserialize(cache_data) -> Snapshot:
        """Build a Snapshot from parsed JSON.

        Raises:
            ValueError, TypeError, KeyError: If the structure is not a snapshot
        """
        if not isinstance(cache_data, dict):
            raise ValueError("cache data is not an object")
        repo_root = cache_data["repo_root"]
        if not isinstance(repo_root, str):
            raise ValueError("repo_root is not a string")
        raw_worktrees = cache_data["worktrees"]
        if not isinstance(raw_worktrees, list):
            raise ValueError("worktrees is not a list")

        return Snapshot(
            repo_root=repo_root,
            worktrees=[Worktree.from_dict(item) for item in raw_worktrees],
            updated_at=datetime.fromisoformat(cache_data["updated_at"]),
        )
