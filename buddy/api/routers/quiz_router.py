"""
Quiz router for LLM-backed command quizzes.

Endpoints for:
- Generating a question for a tool
- Checking a user's answer
- Explaining a command
- Saving the command after a quiz round

LLM failures come back from the gateway as text. With the default
``llm_failure_mode="mask"`` that text is returned with 200 in the usual
field, so clients cannot tell a failure from an answer. With
``"propagate"`` failures become 502, or 504 on timeout.
"""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from config import Settings, get_settings
from buddy.api.routers.command_router import CommandResponse, get_command_store
from buddy.api.validation import check_length, require_text
from buddy.commands.command_store import CommandStore
from buddy.llm import LLMErrorKind, LLMGateway, LLMResult, get_llm_gateway
from buddy.quiz.quiz_service import QuizService

router = APIRouter()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


# ========================================
# Request/Response Models
# ========================================


class QuestionResponse(BaseModel):
    """Response model for a generated question."""

    model_config = ConfigDict(populate_by_name=True)

    question: str
    tool_name: str = Field(..., alias="toolName")


class CheckAnswerRequest(BaseModel):
    """Request model for checking an answer."""

    model_config = ConfigDict(populate_by_name=True)

    question: Optional[str] = None
    answer: Optional[str] = None
    tool_name: Optional[str] = Field(None, alias="toolName")


class FeedbackResponse(BaseModel):
    """Response model for answer feedback."""

    feedback: str


class ExplainRequest(BaseModel):
    """Request model for a command explanation."""

    model_config = ConfigDict(populate_by_name=True)

    command: Optional[str] = None
    tool_name: Optional[str] = Field(None, alias="toolName")


class ExplanationResponse(BaseModel):
    """Response model for a command explanation."""

    explanation: str


class SaveCommandRequest(BaseModel):
    """Request model for saving a command after a quiz."""

    model_config = ConfigDict(populate_by_name=True)

    command: Optional[str] = None
    tool_name: Optional[str] = Field(None, alias="toolName")
    explanation: Optional[str] = None


class ToolsResponse(BaseModel):
    """Response model for the quiz tool list."""

    tools: List[str]


def get_quiz_service(
    gateway: LLMGateway = Depends(get_llm_gateway),
    store: CommandStore = Depends(get_command_store),
) -> QuizService:
    """FastAPI dependency for the quiz service."""
    return QuizService(gateway, store)


def _llm_text(result: LLMResult, settings: Settings) -> str:
    """Text to return for ``result``, or raise if failures are propagated."""
    if result.ok or settings.llm_failure_mode == "mask":
        return result.text

    status = 504 if result.error == LLMErrorKind.TIMEOUT else 502
    raise HTTPException(status_code=status, detail=result.text)


# ========================================
# Endpoints
# ========================================


@router.get("/tools", response_model=ToolsResponse, summary="List quiz tools")
def list_tools(settings: Settings = Depends(get_settings)) -> ToolsResponse:
    """Tools offered to quiz clients."""
    return ToolsResponse(tools=settings.available_tools)


@router.get("/{tool_name}", response_model=QuestionResponse, summary="Generate a question")
def get_quiz_question(
    tool_name: str,
    response: Response,
    quiz: QuizService = Depends(get_quiz_service),
    settings: Settings = Depends(get_settings),
) -> QuestionResponse:
    """Generate a fresh question for ``tool_name``. The response is never cacheable."""
    require_text(tool_name, "toolName", settings.max_tool_name_length)

    logger.info(f"Quiz question requested for '{tool_name}'")
    question = _llm_text(quiz.generate_question(tool_name), settings)

    response.headers.update(NO_CACHE_HEADERS)
    return QuestionResponse(question=question, tool_name=tool_name)


@router.post("/check", response_model=FeedbackResponse, summary="Check an answer")
def check_answer(
    request: CheckAnswerRequest,
    quiz: QuizService = Depends(get_quiz_service),
    settings: Settings = Depends(get_settings),
) -> FeedbackResponse:
    """Evaluate the user's answer to a quiz question."""
    question = require_text(request.question, "question", settings.max_question_length)
    answer = require_text(request.answer, "answer", settings.max_answer_length)
    tool_name = require_text(request.tool_name, "toolName", settings.max_tool_name_length)

    feedback = _llm_text(quiz.evaluate_answer(tool_name, question, answer), settings)
    return FeedbackResponse(feedback=feedback)


@router.post("/explain", response_model=ExplanationResponse, summary="Explain a command")
def explain_command(
    request: ExplainRequest,
    quiz: QuizService = Depends(get_quiz_service),
    settings: Settings = Depends(get_settings),
) -> ExplanationResponse:
    """Explain a command, its flags and common pitfalls."""
    command = require_text(request.command, "command", settings.max_command_text_length)
    tool_name = require_text(request.tool_name, "toolName", settings.max_tool_name_length)

    explanation = _llm_text(quiz.get_command_explanation(tool_name, command), settings)
    return ExplanationResponse(explanation=explanation)


@router.post("/save", response_model=CommandResponse, summary="Save a quizzed command")
def save_command(
    request: SaveCommandRequest,
    quiz: QuizService = Depends(get_quiz_service),
    settings: Settings = Depends(get_settings),
) -> CommandResponse:
    """Save the command and explanation from a quiz round."""
    command = require_text(request.command, "command", settings.max_command_text_length)
    tool_name = require_text(request.tool_name, "toolName", settings.max_tool_name_length)
    if request.explanation is None:
        raise HTTPException(status_code=400, detail="'explanation' is required")
    check_length(request.explanation, "explanation", settings.max_explanation_length)

    saved = quiz.save_command(tool_name, command, request.explanation)
    return CommandResponse.from_command(saved)
