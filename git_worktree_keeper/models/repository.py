"""Repository model."""

import threading


class Repository:
    """Location and identity of the repository the process is running in.

    Detected once per process. The default branch is the only field that may
    change afterwards (when a configured remote becomes known), so it is read
    and written under a lock; enrichment workers read it concurrently.
    """

    def __init__(self, root: str, main_worktree_root: str, git_dir: str, is_bare: bool,
                 default_branch: str = "main"):
        self.root = root
        self.main_worktree_root = main_worktree_root
        self.git_dir = git_dir
        self.is_bare = is_bare
        self._default_branch = default_branch
        self._lock = threading.Lock()

    @property
    def default_branch(self) -> str:
        with self._lock:
            return self._default_branch

    def set_default_branch(self, branch: str) -> None:
        with self._lock:
            self._default_branch = branch

    def __repr__(self) -> str:
        return (
            f"Repository(root={self.root!r}, main_worktree_root={self.main_worktree_root!r}, "
            f"git_dir={self.git_dir!r}, is_bare={self.is_bare}, default_branch={self.default_branch!r})"
        )
