"""
Quiz service: stateless facade over the LLM gateway and the command store.

Each method delegates one call. Nothing is remembered between calls, so a
question -> answer -> save sequence driven by a client carries no
cross-request guarantee.
"""
from __future__ import annotations

from buddy.commands.command_store import CommandStore
from buddy.db.models import Command
from buddy.llm.gateway import LLMGateway, LLMResult


class QuizService:
    """Quiz operations for a single request."""

    def __init__(self, gateway: LLMGateway, store: CommandStore):
        self.gateway = gateway
        self.store = store

    def generate_question(self, tool_name: str) -> LLMResult:
        return self.gateway.generate_question(tool_name)

    def evaluate_answer(self, tool_name: str, question: str, user_answer: str) -> LLMResult:
        return self.gateway.evaluate_answer(tool_name, question, user_answer)

    def get_command_explanation(self, tool_name: str, command: str) -> LLMResult:
        return self.gateway.explain_command(tool_name, command)

    def save_command(self, tool_name: str, command_text: str, explanation: str) -> Command:
        """Save the command the user settled on after a quiz round."""
        command = Command(
            tool_name=tool_name,
            command_text=command_text,
            explanation=explanation,
        )
        return self.store.save(command)
