"""Thin wrapper around the git executable.

All queries go through ``run_git`` so failures surface as one exception type
carrying the failing arguments and git's stderr.
"""

import os
import re
from typing import Optional

import git

from git_worktree_keeper.exceptions import GitCommandFailed
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)

# GitPython decorates stderr as "\n  stderr: '<text>'"
_STDERR_RE = re.compile(r"^\s*stderr: '(.*)'\s*$", re.DOTALL)


def _clean_stderr(stderr) -> str:
    if not stderr:
        return ""
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")
    match = _STDERR_RE.match(stderr)
    return (match.group(1) if match else stderr).strip()


def run_git(*args: str, cwd: Optional[str] = None) -> str:
    """Run ``git <args>`` in ``cwd`` (default: current directory) and return stdout.

    The trailing newline is stripped; leading whitespace is kept.

    Raises:
        GitCommandFailed: On non-zero exit, missing git, or unusable directory
    """
    workdir = cwd or os.getcwd()
    try:
        return git.Git(workdir).execute(["git", *args])
    except git.exc.GitCommandNotFound as e:
        raise GitCommandFailed(args, None, str(e)) from e
    except git.exc.GitCommandError as e:
        stderr = _clean_stderr(e.stderr)
        logger.debug(f"git {' '.join(args)} failed in {workdir} (exit {e.status}): {stderr}")
        raise GitCommandFailed(args, e.status, stderr) from e
    except OSError as e:
        raise GitCommandFailed(args, None, str(e)) from e


def git_succeeds(*args: str, cwd: Optional[str] = None) -> bool:
    """Return True if the git command exits zero."""
    try:
        run_git(*args, cwd=cwd)
        return True
    except GitCommandFailed:
        return False


def output_lines(output: str) -> list:
    """Split command output into non-empty lines."""
    return [line for line in output.split("\n") if line.strip()]
