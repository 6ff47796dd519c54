"""Tests for stash operations in a worktree."""

from pathlib import Path

from git_worktree_keeper.services.git.stash import (
    apply_stash,
    create_stash,
    drop_stash,
    get_stash_count,
    list_stashes,
    parse_stash_list,
    pop_stash_at,
)


class TestParseStashList:
    def test_parses_index_and_message(self):
        output = "stash@{0}: On main: second\nstash@{1}: WIP on main: abc123 Initial commit\n"
        entries = parse_stash_list(output)

        assert [e.index for e in entries] == [0, 1]
        assert entries[0].message == "On main: second"

    def test_skips_malformed_lines(self):
        assert parse_stash_list("garbage\n\nstash@{x}: nope\n") == []


class TestStashOperations:
    """Stash, inspect and restore changes in a real repository."""

    def test_stash_round_trip(self, git_repo):
        path = git_repo.working_dir
        readme = Path(path) / "README.md"
        readme.write_text("edited\n")

        create_stash(path, "my change")
        assert readme.read_text() == "# Test Repository\n"
        assert get_stash_count(path) == 1
        assert list_stashes(path)[0].message.endswith("my change")

        apply_stash(path, 0)
        assert readme.read_text() == "edited\n"
        assert get_stash_count(path) == 1

        drop_stash(path, 0)
        assert get_stash_count(path) == 0

    def test_pop_specific_entry(self, git_repo):
        path = git_repo.working_dir
        readme = Path(path) / "README.md"

        readme.write_text("first\n")
        create_stash(path, "first")
        readme.write_text("second\n")
        create_stash(path, "second")

        pop_stash_at(path, 1)
        assert readme.read_text() == "first\n"
        assert [e.message.endswith("second") for e in list_stashes(path)] == [True]
