"""Pytest fixtures for git-worktree-keeper tests"""
import os
import tempfile
from pathlib import Path
import pytest
import git

from git_worktree_keeper.services.git.repository import reset_repo


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        # Resolve symlinks (macOS /var -> /private/var) so paths compare equal to git's
        yield Path(os.path.realpath(tmpdir))


@pytest.fixture(autouse=True)
def fresh_repo_detection():
    """Each test detects its own repository."""
    reset_repo()
    yield
    reset_repo()


@pytest.fixture
def cache_dir(temp_dir):
    """Isolated snapshot cache directory."""
    path = temp_dir / "cache"
    path.mkdir()
    return path


@pytest.fixture
def mock_config(cache_dir):
    """Create a mock configuration dictionary."""
    return {
        'verbose': False,
        'debug': False,
        'worktree_dir': '.worktrees',
        'remote': '',
        'sequential': False,
        'workers': None,
        'refresh': False,
        'cache_dir': str(cache_dir),
    }


@pytest.fixture
def commit_file():
    """Return a helper that writes a file in a worktree and commits it there."""
    def _commit(worktree_path, name: str, content: str, message: str) -> None:
        _commit_in(Path(worktree_path), name, content, message)
    return _commit


def _commit_in(base: Path, name: str, content: str, message: str) -> None:
    (base / name).write_text(content)
    worktree_git = git.Git(str(base))
    worktree_git.add(name)
    worktree_git.commit("-m", message)


@pytest.fixture
def git_repo(temp_dir, monkeypatch):
    """Create a real Git repository for testing and run the test from inside it."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    # Initialize repository
    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    # Create initial commit on main branch
    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    repo.git.branch('-M', 'main')

    # Default worktree location lives inside the main worktree
    (repo_path / ".git" / "info").mkdir(exist_ok=True)
    (repo_path / ".git" / "info" / "exclude").write_text(".worktrees/\n")

    monkeypatch.chdir(repo_path)

    yield repo

    # Cleanup
    repo.close()


@pytest.fixture
def git_repo_with_remote(git_repo, temp_dir):
    """Repository whose main branch is pushed to a bare 'origin'."""
    remote_path = temp_dir / "origin.git"
    git.Repo.init(remote_path, bare=True).close()

    git_repo.create_remote('origin', str(remote_path))
    git_repo.git.push('-u', 'origin', 'main')
    git_repo.git.remote('set-head', 'origin', 'main')

    yield git_repo


@pytest.fixture
def feature_worktree(git_repo):
    """A linked worktree on a new branch 'feature/auth' based on main."""
    path = Path(git_repo.working_dir) / ".worktrees" / "feature-auth"
    git_repo.git.worktree('add', '-b', 'feature/auth', str(path), 'main')
    return path
