"""Command-line argument parsing for git-worktree-keeper."""

import argparse
from git_worktree_keeper.__version__ import __version__


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="git-worktree-keeper",
        description="Overview of git worktrees and safe deletion checks",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"git-worktree-keeper {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--remote", default="", help="Remote to use (default: auto-detect)")
    parser.add_argument(
        "--workers",
        type=int,
        metavar="N",
        help="Number of parallel workers for worktree enrichment (default: auto-detect based on CPU and threading mode)",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Force sequential processing (disable parallelism)",
    )
    parser.add_argument(
        "--worktree-dir",
        default=".worktrees",
        help="Directory for new worktrees, relative to the main worktree (default: .worktrees)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    list_parser = subparsers.add_parser("list", help="List worktrees (default)")
    list_parser.add_argument("--refresh", action="store_true", help="Force refresh and bypass cache")
    list_parser.add_argument("--legend", action="store_true", help="Show the symbol legend")
    list_parser.add_argument("--fetch", action="store_true", help="Fetch all remotes before listing")

    check_parser = subparsers.add_parser("check", help="Show what deleting a worktree would lose")
    check_parser.add_argument("path", help="Path of the worktree")

    create_parser = subparsers.add_parser("create", help="Create a worktree for a branch")
    create_parser.add_argument("branch", help="Branch to check out")
    create_parser.add_argument("--new", action="store_true", help="Create the branch")
    create_parser.add_argument("--base", default="", help="Start point for a new branch")
    create_parser.add_argument("--path", default=None, help="Worktree directory (default: under --worktree-dir)")

    remove_parser = subparsers.add_parser("remove", help="Remove a worktree after a safety check")
    remove_parser.add_argument("path", help="Path of the worktree")
    remove_parser.add_argument("--force", action="store_true", help="Skip confirmations")
    remove_parser.add_argument(
        "--delete-branch", action="store_true", help="Also delete the worktree's local branch"
    )

    push_parser = subparsers.add_parser("push", help="Push a worktree's branch to the primary remote")
    push_parser.add_argument("path", help="Path of the worktree")

    subparsers.add_parser("prune", help="Prune metadata of worktrees whose directories are gone")
    subparsers.add_parser("branches", help="List branches and tags with worktree status")

    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    args = build_parser().parse_args(argv)
    if args.command is None:
        args.command = "list"
        args.refresh = False
        args.legend = False
        args.fetch = False
    return args
