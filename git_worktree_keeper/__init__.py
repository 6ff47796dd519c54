"""
git-worktree-keeper - Worktree overview and deletion safety checks for Git
"""

from .__version__ import __version__
from .core import WorktreeKeeper
from .cli.main import main

__all__ = ["WorktreeKeeper", "main", "__version__"]
