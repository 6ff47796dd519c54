"""Command-line interface for git-worktree-keeper.

``main`` runs one subcommand against the repository containing the current
directory; ``build_parser`` exposes the argument layout.
"""

from .main import main
from .args import build_parser, parse_args

__all__ = ["main", "build_parser", "parse_args"]
