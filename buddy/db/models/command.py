"""
Command model: one learned command-line invocation.

Records are created either directly through the commands API or after a
quiz round. They are never updated in place.
"""
from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


def new_command_id() -> str:
    return str(uuid4())


class Command(Base):
    """A command saved for a CLI tool, with an optional explanation."""

    __tablename__ = "commands"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_command_id)
    tool_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    command_text: Mapped[str] = mapped_column(Text, nullable=False)
    explanation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<Command {self.id} tool={self.tool_name!r} text={self.command_text!r}>"
