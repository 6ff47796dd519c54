"""Branch query service for git-worktree-keeper."""

from typing import Iterable, List, Optional, Set

from git_worktree_keeper.exceptions import GitCommandFailed
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.branch import Branch, CommitInfo
from git_worktree_keeper.services.git.repository import get_primary_remote
from git_worktree_keeper.services.git.runner import run_git, git_succeeds, output_lines
from git_worktree_keeper.services.git.status import get_upstream_ref, local_ref

logger = get_logger(__name__)

_FIELD_SEP = "\x1f"


class BranchQueries:
    """Service for querying and comparing branches.

    The comparison primitives (merged-branch set, unique commits) are shared
    by worktree enrichment and deletion safety checks. They raise
    GitCommandFailed instead of guessing, so each caller decides whether a
    failure degrades a display field or blocks a "safe" verdict.
    """

    def __init__(self, repo_path: str, remote_name: str = "", main_root: str = ""):
        """Initialize the branch queries service.

        Args:
            repo_path: Directory inside the repository to run queries from
            remote_name: Configured remote; empty means auto-pick
            main_root: Main worktree root for branch deletion (default: repo_path)
        """
        self.repo_path = repo_path
        self.remote_name = remote_name
        self.main_root = main_root or repo_path

    def _git(self, *args: str) -> str:
        return run_git(*args, cwd=self.repo_path)

    # Comparison primitives

    def _local_or_given(self, name: str) -> str:
        """``refs/heads/<name>`` when that branch exists, else ``name`` unchanged."""
        return local_ref(name) if self.branch_exists(name) else name

    def get_merged_branches(self, into: str) -> Set[str]:
        """Return the set of local branches whose tips are reachable from ``into``.

        One subprocess call regardless of how many branches the caller tests.

        Raises:
            GitCommandFailed: If ``into`` cannot be resolved
        """
        # lstrip=2 keeps the plain name even when a tag makes it ambiguous
        output = self._git("branch", "--merged", self._local_or_given(into), "--format=%(refname:lstrip=2)")
        merged = {line.strip() for line in output_lines(output)}
        logger.debug(f"{len(merged)} branch(es) merged into {into}")
        return merged

    def is_branch_merged(self, branch: str, into: str) -> bool:
        """Check whether ``branch`` is merged into ``into``.

        Raises:
            GitCommandFailed: If the merged-branch query fails
        """
        return branch in self.get_merged_branches(into)

    def is_commit_merged(self, commit: str, into: str) -> bool:
        """Check whether a raw commit is reachable from ``into``.

        Used for detached worktrees, which have no branch name to look up.

        Raises:
            GitCommandFailed: If either ref cannot be resolved
        """
        try:
            self._git("merge-base", "--is-ancestor", commit, self._local_or_given(into))
            return True
        except GitCommandFailed as e:
            # Exit 1 is the "not an ancestor" answer; anything else is an error
            if e.status == 1:
                return False
            raise

    def get_tracking_ref(self, branch: str) -> Optional[str]:
        """Return the full remote-side ref backing ``branch``, if one exists.

        The configured upstream wins while its ref still exists; otherwise a
        same-named branch on the primary remote is used.

        Raises:
            GitCommandFailed: If the upstream config cannot be read
        """
        upstream = get_upstream_ref(self.repo_path, branch)
        if upstream and git_succeeds("rev-parse", "--verify", "--quiet", upstream, cwd=self.repo_path):
            return upstream

        remote = get_primary_remote(self.remote_name, cwd=self.repo_path)
        same_named = f"refs/remotes/{remote}/{branch}"
        if git_succeeds("rev-parse", "--verify", "--quiet", same_named, cwd=self.repo_path):
            return same_named
        return None

    def get_unique_commits(self, branch: str, default_branch: str) -> List[CommitInfo]:
        """List commits reachable from ``branch`` but from nothing recoverable.

        Excludes commits on ``default_branch`` and, when it exists, on the
        branch's remote tracking ref. All refs are passed fully qualified.

        Raises:
            GitCommandFailed: If either ref cannot be resolved
        """
        excluded = [self._local_or_given(default_branch)]
        tracking = self.get_tracking_ref(branch)
        if tracking:
            excluded.append(tracking)

        output = self._git("log", f"--format=%h{_FIELD_SEP}%s", local_ref(branch), "--not", *excluded, "--")
        commits = []
        for line in output_lines(output):
            commit_hash, _, message = line.partition(_FIELD_SEP)
            commits.append(CommitInfo(hash=commit_hash, message=message))

        logger.debug(f"{len(commits)} unique commit(s) on {branch} (excluding {', '.join(excluded)})")
        return commits

    # Branch listing and management

    def list_branches(self) -> List[Branch]:
        """Return all local branches, marking the one checked out here."""
        output = self._git("branch", "--list", "--format=%(HEAD)%(refname:lstrip=2)")
        branches = []
        for line in output_lines(output):
            is_current = line.startswith("*")
            name = line[1:].strip()
            branches.append(Branch(name=name, is_current=is_current))
        return branches

    def list_remote_branches(self) -> List[Branch]:
        """Return all remote-tracking branches, without <remote>/HEAD pointers."""
        output = self._git("branch", "-r", "--format=%(refname:short)")
        branches = []
        for line in output_lines(output):
            name = line.strip()
            # Newer git shortens refs/remotes/origin/HEAD to just "origin"
            if name.endswith("/HEAD") or "/" not in name:
                continue
            branches.append(Branch(name=name, is_remote=True))
        return branches

    def list_tags(self) -> List[Branch]:
        """Return all tags, newest first."""
        output = self._git("tag", "--list", "--sort=-creatordate")
        return [Branch(name=line.strip(), is_tag=True) for line in output_lines(output)]

    def list_all_branches_with_worktree_status(
        self, worktree_branches: Iterable[str], default_branch: str
    ) -> List[Branch]:
        """Return local branches, remote branches and tags in display order.

        Order: current, default, checked out in a worktree, local before
        remote, alphabetical; tags always last.
        """
        local = self.list_branches()
        remote = self.list_remote_branches()
        try:
            tags = self.list_tags()
        except GitCommandFailed as e:
            logger.debug(f"Could not list tags: {e}")
            tags = []

        in_worktree = set(worktree_branches)
        for branch in local:
            branch.is_worktree = branch.name in in_worktree
        for branch in remote:
            # origin/feature -> feature
            _, _, short_name = branch.name.partition("/")
            branch.is_worktree = short_name in in_worktree

        def sort_key(branch: Branch):
            if branch.is_tag:
                return (1,)
            return (
                0,
                not branch.is_current,
                branch.name != default_branch,
                not branch.is_worktree,
                branch.is_remote,
                branch.name,
            )

        # Stable sort keeps tags in newest-first order
        return sorted(local + remote + tags, key=sort_key)

    def branch_exists(self, name: str) -> bool:
        """Check if a local branch exists."""
        return git_succeeds("rev-parse", "--verify", "--quiet", local_ref(name), cwd=self.repo_path)

    def current_branch(self, path: Optional[str] = None) -> str:
        """Return the branch checked out at ``path`` ("HEAD" when detached)."""
        ref = run_git("rev-parse", "--symbolic-full-name", "HEAD", cwd=path or self.repo_path).strip()
        return ref[len("refs/heads/"):] if ref.startswith("refs/heads/") else "HEAD"

    def delete_branch(self, name: str, force: bool = False) -> None:
        """Delete a local branch, running from the main worktree.

        The worktree the process started in may be the one just removed.

        Raises:
            GitCommandFailed: If git refuses (e.g. unmerged without force)
        """
        run_git("branch", "-D" if force else "-d", name, cwd=self.main_root)
        logger.info(f"Deleted branch {name}")

    def rename_branch(self, worktree_path: str, old_name: str, new_name: str) -> None:
        """Rename a branch from within the worktree that has it checked out."""
        run_git("branch", "-m", old_name, new_name, cwd=worktree_path)
        logger.info(f"Renamed branch {old_name} -> {new_name}")
