"""Command-line interface for git-worktree-keeper"""

import sys
from rich.console import Console
from git_worktree_keeper.cli.args import parse_args
from git_worktree_keeper.config import Config
from git_worktree_keeper.core import WorktreeKeeper
from git_worktree_keeper.exceptions import GitWorktreeKeeperError
from git_worktree_keeper.logging_config import setup_logging
from git_worktree_keeper.models.safety import SafetyInfo
from git_worktree_keeper.models.worktree import Worktree
from git_worktree_keeper.services.display_service import DisplayService
from git_worktree_keeper.utils.threading import get_threading_info

console = Console()


def confirm_removal(worktree: Worktree, info: SafetyInfo, config: Config) -> bool:
    """Ask the user before removing a worktree that is not plainly safe."""
    if not config.needs_confirmation(info):
        return True

    if config.requires_typed_confirmation(info):
        word = worktree.branch_short if not worktree.is_detached else "delete"
        response = input(f"   Type '{word}' to remove this worktree anyway: ")
        return response.strip() == word

    response = input(f"   Still want to remove {worktree.path}? [y/N] ")
    return response.strip().lower() == "y"


def cmd_list(keeper: WorktreeKeeper, display: DisplayService, args) -> int:
    if args.fetch:
        keeper.fetch()
    worktrees, from_cache = keeper.list_cached()
    display.display_worktree_table(
        worktrees, keeper.repo.main_worktree_root, from_cache=from_cache, show_legend=args.legend
    )
    if from_cache:
        console.print("[dim]Showing cached results; refreshing in the background[/dim]")
    return 0


def cmd_check(keeper: WorktreeKeeper, display: DisplayService, args) -> int:
    worktree = keeper.find_worktree(args.path)
    info = keeper.check_safety(worktree)
    display.display_safety(worktree.path, worktree.branch, info)
    return 0


def cmd_create(keeper: WorktreeKeeper, display: DisplayService, args) -> int:
    path = keeper.create_worktree(args.branch, new_branch=args.new, base_branch=args.base, path=args.path)
    console.print(f"Created worktree for [bold]{args.branch}[/bold] at {path}")
    return 0


def cmd_remove(keeper: WorktreeKeeper, display: DisplayService, args) -> int:
    worktree = keeper.find_worktree(args.path)
    if worktree.is_main:
        console.print("[red]Refusing to remove the main worktree[/red]")
        return 1

    info = keeper.check_safety(worktree)
    display.display_safety(worktree.path, worktree.branch, info)

    if not args.force and not confirm_removal(worktree, info, keeper.config):
        console.print("Skipping removal")
        return 1

    # Git refuses to remove a dirty worktree without --force; the user has confirmed by now
    keeper.remove_worktree(worktree.path, force=args.force or info.has_uncommitted_changes)
    console.print(f"Removed worktree {worktree.path}")

    if args.delete_branch and not worktree.is_detached and worktree.branch:
        keeper.delete_branch(worktree.branch, force=args.force or not info.is_merged)
        console.print(f"Deleted branch {worktree.branch}")
    return 0


def cmd_push(keeper: WorktreeKeeper, display: DisplayService, args) -> int:
    worktree = keeper.find_worktree(args.path)
    remote = keeper.push_branch(worktree)
    console.print(f"Pushed [bold]{worktree.branch}[/bold] to {remote}")
    return 0


def cmd_prune(keeper: WorktreeKeeper, display: DisplayService, args) -> int:
    keeper.prune_worktrees()
    console.print("Pruned orphaned worktree metadata")
    return 0


def cmd_branches(keeper: WorktreeKeeper, display: DisplayService, args) -> int:
    display.display_branches(keeper.list_branches())
    return 0


COMMANDS = {
    "list": cmd_list,
    "check": cmd_check,
    "create": cmd_create,
    "remove": cmd_remove,
    "push": cmd_push,
    "prune": cmd_prune,
    "branches": cmd_branches,
}


def main(argv=None):
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        # Setup logging before creating WorktreeKeeper
        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        config = Config(
            worktree_dir=parsed_args.worktree_dir,
            remote=parsed_args.remote,
            workers=parsed_args.workers,
            sequential=parsed_args.sequential,
            refresh=getattr(parsed_args, "refresh", False),
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
        )

        if parsed_args.debug:
            console.print("[yellow]Debug mode enabled[/yellow]")

            threading_info = get_threading_info()
            console.print("[yellow]Threading Information:[/yellow]")
            console.print(f"  Python version: {threading_info['python_version']}")
            console.print(f"  Threading mode: {threading_info['mode']}")
            console.print(f"  CPU count: {threading_info['cpu_count']}")
            console.print(f"  Optimal workers: {threading_info['optimal_workers']}")
            console.print(f"  Free-threading enabled: {threading_info['free_threading']}")

            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        display = DisplayService(console, verbose=parsed_args.verbose)
        with WorktreeKeeper(config) as keeper:
            return COMMANDS[parsed_args.command](keeper, display, parsed_args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except (GitWorktreeKeeperError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
