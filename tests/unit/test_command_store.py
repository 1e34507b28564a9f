"""
Unit tests for the command store (in-memory SQLite).
"""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from buddy.commands.command_store import CommandStore
from buddy.db.models import Command


@pytest.fixture
def store(db_session):
    return CommandStore(db_session)


def _save(store, tool, text, explanation=""):
    return store.save(Command(tool_name=tool, command_text=text, explanation=explanation))


class TestSave:
    """Tests for CommandStore.save."""

    def test_assigns_identifier(self, store):
        saved = _save(store, "git", "git status", "Shows the working tree status")

        assert saved.id
        assert saved.tool_name == "git"
        assert saved.command_text == "git status"
        assert saved.explanation == "Shows the working tree status"

    def test_identifiers_are_unique(self, store):
        ids = {_save(store, "git", f"git log -{n}").id for n in range(10)}
        assert len(ids) == 10

    def test_keeps_existing_identifier(self, store):
        saved = store.save(Command(id="fixed-id", tool_name="git", command_text="git diff"))
        assert saved.id == "fixed-id"

    def test_missing_explanation_stored_as_empty(self, store):
        saved = store.save(Command(tool_name="git", command_text="git diff", explanation=None))
        assert saved.explanation == ""


class TestFindByTool:
    """Tests for CommandStore.find_by_tool."""

    def test_exact_tool_match_in_insertion_order(self, store):
        _save(store, "git", "git status")
        _save(store, "docker", "docker ps")
        _save(store, "git", "git log")
        _save(store, "gitlab", "gitlab-runner list")

        commands = store.find_by_tool("git")

        assert [c.command_text for c in commands] == ["git status", "git log"]

    def test_tool_match_is_case_sensitive(self, store):
        _save(store, "git", "git status")
        assert store.find_by_tool("GIT") == []

    def test_no_matches(self, store):
        assert store.find_by_tool("terraform") == []


class TestSearchByToolAndText:
    """Tests for CommandStore.search_by_tool_and_text."""

    def test_case_insensitive_substring(self, store):
        _save(store, "git", "git COMMIT -m msg")
        _save(store, "git", "git push origin main")

        results = store.search_by_tool_and_text("git", "commit")

        assert [c.command_text for c in results] == ["git COMMIT -m msg"]

    def test_scoped_to_tool(self, store):
        _save(store, "git", "git commit -m msg")
        _save(store, "svn", "svn commit -m msg")

        results = store.search_by_tool_and_text("svn", "COMMIT")

        assert [c.tool_name for c in results] == ["svn"]

    def test_matches_command_text_only(self, store):
        _save(store, "git", "git push", explanation="Uploads commits")
        assert store.search_by_tool_and_text("git", "commits") == []

    def test_wildcards_match_literally(self, store):
        _save(store, "bash", "echo 100%")
        _save(store, "bash", "echo 1000")
        _save(store, "bash", "ls my_dir")
        _save(store, "bash", "ls myxdir")

        assert [c.command_text for c in store.search_by_tool_and_text("bash", "0%")] == ["echo 100%"]
        assert [c.command_text for c in store.search_by_tool_and_text("bash", "my_d")] == ["ls my_dir"]


class TestCountByTool:
    """Tests for CommandStore.count_by_tool."""

    def test_counts_exact_tool(self, store):
        _save(store, "git", "git status")
        _save(store, "git", "git log")
        _save(store, "docker", "docker ps")

        assert store.count_by_tool("git") == 2
        assert store.count_by_tool("docker") == 1
        assert store.count_by_tool("npm") == 0


def test_store_errors_propagate(db_session):
    """Without tables the store raises instead of returning empty results."""
    from buddy.db.database import engine
    from buddy.db.models import Base

    Base.metadata.drop_all(bind=engine)
    store = CommandStore(db_session)

    with pytest.raises(SQLAlchemyError):
        store.find_by_tool("git")
