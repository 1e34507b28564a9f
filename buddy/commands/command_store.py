"""
Command Store - persistence and lookup of saved commands.

Thin wrapper over a SQLAlchemy session. There is no update or delete path:
commands are written once and read by tool name or by free-text search.
Store errors are not handled here and propagate to the caller.

Example:
    >>> store = CommandStore(db_session)
    >>> saved = store.save(Command(tool_name="git", command_text="git log --oneline"))
    >>> store.search_by_tool_and_text("git", "ONELINE")
    [<Command ... tool='git' text='git log --oneline'>]
"""
from __future__ import annotations

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from buddy.db.models import Command
from buddy.db.models.command import new_command_id


class CommandStore:
    """Read/write access to the ``commands`` table."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def save(self, command: Command) -> Command:
        """
        Persist a command, assigning an identifier if it has none.

        Args:
            command: Unsaved command. ``id`` is normally absent.

        Returns:
            The stored record with ``id`` populated.
        """
        if not command.id:
            command.id = new_command_id()
        if command.explanation is None:
            command.explanation = ""

        self.db.add(command)
        self.db.commit()
        self.db.refresh(command)

        logger.info(f"Saved command {command.id} for tool '{command.tool_name}'")
        return command

    def find_by_tool(self, tool_name: str) -> list[Command]:
        """All commands whose tool name matches exactly, in store order."""
        stmt = select(Command).where(Command.tool_name == tool_name)
        return list(self.db.scalars(stmt))

    def search_by_tool_and_text(self, tool_name: str, text: str) -> list[Command]:
        """
        Commands for ``tool_name`` whose text contains ``text``, ignoring case.

        ``%`` and ``_`` in ``text`` are matched literally.
        """
        stmt = select(Command).where(
            Command.tool_name == tool_name,
            Command.command_text.icontains(text, autoescape=True),
        )
        return list(self.db.scalars(stmt))

    def count_by_tool(self, tool_name: str) -> int:
        """Number of commands saved for ``tool_name``."""
        stmt = select(func.count()).select_from(Command).where(Command.tool_name == tool_name)
        return int(self.db.scalar(stmt) or 0)
