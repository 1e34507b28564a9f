"""
Command router for saved commands.

Endpoints for:
- Saving a command
- Listing commands for a tool
- Case-insensitive search within a tool's commands
- Counting a tool's commands
"""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from config import Settings, get_settings
from buddy.api.validation import check_length, require_text
from buddy.commands.command_store import CommandStore
from buddy.db.database import get_session
from buddy.db.models import Command

router = APIRouter()


# ========================================
# Request/Response Models
# ========================================


class CommandCreateRequest(BaseModel):
    """Request model for saving a command. ``id`` is never accepted."""

    model_config = ConfigDict(populate_by_name=True)

    tool_name: Optional[str] = Field(None, alias="toolName", description="CLI tool, e.g. git")
    command_text: Optional[str] = Field(None, alias="commandText", description="The literal command")
    explanation: Optional[str] = Field(None, description="Human-readable explanation")


class CommandResponse(BaseModel):
    """Response model for a saved command."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    tool_name: str = Field(..., alias="toolName")
    command_text: str = Field(..., alias="commandText")
    explanation: str = ""

    @classmethod
    def from_command(cls, command: Command) -> CommandResponse:
        return cls(
            id=command.id,
            tool_name=command.tool_name,
            command_text=command.command_text,
            explanation=command.explanation or "",
        )


class CommandCountResponse(BaseModel):
    """Response model for a tool's command count."""

    model_config = ConfigDict(populate_by_name=True)

    tool_name: str = Field(..., alias="toolName")
    count: int


def get_command_store(db: Session = Depends(get_session)) -> CommandStore:
    """FastAPI dependency for a request-scoped command store."""
    return CommandStore(db)


# ========================================
# Endpoints
# ========================================


@router.post(
    "",
    response_model=CommandResponse,
    status_code=201,
    summary="Save a command",
)
def create_command(
    request: CommandCreateRequest,
    store: CommandStore = Depends(get_command_store),
    settings: Settings = Depends(get_settings),
) -> CommandResponse:
    """Save a command. Returns the stored record with its generated id."""
    tool_name = require_text(request.tool_name, "toolName", settings.max_tool_name_length)
    command_text = require_text(request.command_text, "commandText", settings.max_command_text_length)
    check_length(request.explanation, "explanation", settings.max_explanation_length)

    saved = store.save(
        Command(
            tool_name=tool_name,
            command_text=command_text,
            explanation=request.explanation or "",
        )
    )
    return CommandResponse.from_command(saved)


@router.get(
    "/{tool_name}",
    response_model=List[CommandResponse],
    summary="List commands for a tool",
    responses={204: {"description": "No commands saved for this tool"}},
)
def get_commands_by_tool(
    tool_name: str,
    store: CommandStore = Depends(get_command_store),
    settings: Settings = Depends(get_settings),
):
    """All commands saved for ``tool_name``. 204 when there are none."""
    require_text(tool_name, "toolName", settings.max_tool_name_length)

    commands = store.find_by_tool(tool_name)
    if not commands:
        return Response(status_code=204)
    return [CommandResponse.from_command(c) for c in commands]


@router.get(
    "/{tool_name}/search",
    response_model=List[CommandResponse],
    summary="Search a tool's commands",
    responses={204: {"description": "No matching commands"}},
)
def search_commands(
    tool_name: str,
    search_text: Optional[str] = Query(None, alias="searchText"),
    store: CommandStore = Depends(get_command_store),
    settings: Settings = Depends(get_settings),
):
    """Commands for ``tool_name`` whose text contains ``searchText`` (case-insensitive)."""
    require_text(tool_name, "toolName", settings.max_tool_name_length)
    search_text = require_text(search_text, "searchText", settings.max_search_text_length)

    logger.info(f"Command search: tool={tool_name} text={search_text!r}")
    commands = store.search_by_tool_and_text(tool_name, search_text)
    if not commands:
        return Response(status_code=204)
    return [CommandResponse.from_command(c) for c in commands]


@router.get(
    "/{tool_name}/count",
    response_model=CommandCountResponse,
    summary="Count a tool's commands",
)
def count_commands(
    tool_name: str,
    store: CommandStore = Depends(get_command_store),
    settings: Settings = Depends(get_settings),
) -> CommandCountResponse:
    """Number of commands saved for ``tool_name``."""
    require_text(tool_name, "toolName", settings.max_tool_name_length)
    return CommandCountResponse(tool_name=tool_name, count=store.count_by_tool(tool_name))
