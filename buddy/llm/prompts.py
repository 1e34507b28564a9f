"""
Prompts for command quiz generation, answer evaluation and command explanation.

Question prompts are randomized on every call:
- a random subset of 3-5 command categories to steer the topic
- a fresh session identifier (epoch millis + random integer)
- sampled temperature, top_p and frequency/presence penalties

Nothing here remembers earlier questions. The "never repeat" wording is an
instruction to the model only.

Evaluation and explanation prompts are fixed-temperature (0.3).
"""
from __future__ import annotations

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

# =============================================================================
# Sampling Parameters
# =============================================================================

QUESTION_TEMPERATURE_RANGE = (0.8, 1.0)
QUESTION_TOP_P_RANGE = (0.9, 1.0)
QUESTION_PENALTY_RANGE = (0.4, 0.8)
QUESTION_CATEGORY_COUNT_RANGE = (3, 5)
SESSION_RANDOM_UPPER_BOUND = 1_000_000

FEEDBACK_TEMPERATURE = 0.3

COMMAND_CATEGORIES = (
    "creating/configuring",
    "managing",
    "inspecting",
    "modifying",
    "troubleshooting",
    "advanced usage",
    "optimization",
    "automation",
    "security",
    "networking",
    "resource management",
    "cleanup tasks",
)

# =============================================================================
# Templates
# =============================================================================

QUESTION_SYSTEM_PROMPT = """You are a command line tutor who writes quiz questions.
Quiz session: {session_id}.
Every question you write must be new. Never repeat a question from this or any previous session,
and never reuse the same scenario with different wording."""

QUESTION_PROMPT = """You are a command line tutor helping users learn {tool_name} commands.
Session ID: {session_id}

Generate ONE practical question that asks the user to provide a specific {tool_name} command.
Pick the task from one of these areas: {categories}.

Rules:
- Describe a realistic task the user would actually run into.
- The task must be solvable with a single {tool_name} command.
- Do NOT repeat any question you have generated before.
- Format your response as a clear, concise question only.
- Do not provide the answer or any hints."""

EVALUATION_PROMPT = """Question about {tool_name}: "{question}"

User's answer: "{user_answer}"

Evaluate if this command correctly solves the task. Respond with:
1. Whether the answer is CORRECT or INCORRECT
2. A brief explanation of why
3. If incorrect, the proper command
4. A tip for remembering this command"""

EXPLANATION_PROMPT = """Explain the following {tool_name} command in detail:

{command}

Include:
1. What this command does
2. Breakdown of each part/flag
3. Common use cases
4. Any potential gotchas or warnings
Format as a concise explanation."""


# =============================================================================
# Request Building
# =============================================================================


@dataclass
class ChatRequest:
    """One chat-completion request, before the model name is attached."""

    messages: list[dict[str, str]]
    temperature: float
    top_p: float | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def prompt(self) -> str:
        """Content of the final user message."""
        return self.messages[-1]["content"]

    def to_payload(self, model: str) -> dict[str, Any]:
        """Convert to the OpenAI-style JSON body. Unset optional fields are omitted."""
        payload: dict[str, Any] = {
            "model": model,
            "messages": self.messages,
            "temperature": self.temperature,
        }
        for key in ("top_p", "frequency_penalty", "presence_penalty"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload


def make_session_id(rng: random.Random, clock: Callable[[], float] = time.time) -> str:
    """Ad hoc session identifier: epoch milliseconds plus a random integer."""
    return f"{int(clock() * 1000)}-{rng.randrange(SESSION_RANDOM_UPPER_BOUND)}"


def pick_categories(rng: random.Random) -> list[str]:
    """Random 3-5 categories, in their canonical order."""
    count = rng.randint(*QUESTION_CATEGORY_COUNT_RANGE)
    chosen = set(rng.sample(COMMAND_CATEGORIES, count))
    return [c for c in COMMAND_CATEGORIES if c in chosen]


def build_question_request(
    tool_name: str,
    rng: random.Random,
    clock: Callable[[], float] = time.time,
) -> ChatRequest:
    """Build a randomized question-generation request for ``tool_name``."""
    session_id = make_session_id(rng, clock)
    categories = pick_categories(rng)

    return ChatRequest(
        messages=[
            {"role": "system", "content": QUESTION_SYSTEM_PROMPT.format(session_id=session_id)},
            {
                "role": "user",
                "content": QUESTION_PROMPT.format(
                    tool_name=tool_name,
                    session_id=session_id,
                    categories=", ".join(categories),
                ),
            },
        ],
        temperature=rng.uniform(*QUESTION_TEMPERATURE_RANGE),
        top_p=rng.uniform(*QUESTION_TOP_P_RANGE),
        frequency_penalty=rng.uniform(*QUESTION_PENALTY_RANGE),
        presence_penalty=rng.uniform(*QUESTION_PENALTY_RANGE),
        metadata={"session_id": session_id, "categories": categories},
    )


def build_evaluation_request(tool_name: str, question: str, user_answer: str) -> ChatRequest:
    """Build the answer-evaluation request."""
    prompt = EVALUATION_PROMPT.format(
        tool_name=tool_name,
        question=question,
        user_answer=user_answer,
    )
    return ChatRequest(
        messages=[{"role": "user", "content": prompt}],
        temperature=FEEDBACK_TEMPERATURE,
    )


def build_explanation_request(tool_name: str, command: str) -> ChatRequest:
    """Build the command-explanation request."""
    prompt = EXPLANATION_PROMPT.format(tool_name=tool_name, command=command)
    return ChatRequest(
        messages=[{"role": "user", "content": prompt}],
        temperature=FEEDBACK_TEMPERATURE,
    )
