"""Display and formatting service for worktree information"""
from rich.console import Console
from rich.table import Table
from typing import List, Optional
from git_worktree_keeper.models.branch import Branch
from git_worktree_keeper.models.safety import SafetyInfo, SafetyLevel
from git_worktree_keeper.models.worktree import Worktree
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.constants import COLUMNS, LEGEND_TEXT, SAFETY_COLORS
from git_worktree_keeper.formatters import (
    format_branch_name,
    format_changes,
    format_sync,
    format_merged,
    format_last_commit,
    format_safety_level,
    format_safety_details,
)

logger = get_logger(__name__)


class DisplayService:
    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose

    def display_worktree_table(
            self,
            worktrees: List[Worktree],
            main_root: str,
            from_cache: bool = False,
            show_legend: bool = False
        ) -> None:
        """Display a table of worktree information."""
        table = Table(title="Worktrees (cached)" if from_cache else "Worktrees")

        for col in COLUMNS:
            table.add_column(col.label, max_width=col.width or None, overflow="ellipsis")

        for wt in worktrees:
            row_style = None
            if wt.is_current:
                row_style = "bold"
            elif wt.is_dirty or wt.unique_commits:
                row_style = SAFETY_COLORS[SafetyLevel.DANGER]

            # Match COLUMNS order: Branch, Path, Changes, Sync, Merged, Unique, Last Commit
            table.add_row(
                format_branch_name(wt),
                wt.short_path(main_root),
                format_changes(wt),
                format_sync(wt),
                format_merged(wt),
                str(wt.unique_commits) if wt.unique_commits else "",
                format_last_commit(wt),
                style=row_style
            )

        self.console.print(table)

        if show_legend:
            self.console.print(LEGEND_TEXT)

    def display_safety(self, path: str, branch: str, info: SafetyInfo) -> None:
        """Display the safety classification for deleting a worktree."""
        color = SAFETY_COLORS[info.level]
        self.console.print(f"[{color}]{format_safety_level(info.level)}[/{color}] {branch} ({path})")
        for line in format_safety_details(info):
            self.console.print(line, highlight=False)

    def display_branches(self, branches: List[Branch]) -> None:
        """Display local branches, remote branches and tags."""
        table = Table()
        table.add_column("Name")
        table.add_column("Kind")
        table.add_column("Worktree")

        for branch in branches:
            if branch.is_tag:
                kind = "tag"
            elif branch.is_remote:
                kind = "remote"
            else:
                kind = "local"
            name = f"* {branch.name}" if branch.is_current else branch.name
            table.add_row(name, kind, "yes" if branch.is_worktree else "", style="dim" if branch.is_tag else None)

        self.console.print(table)
