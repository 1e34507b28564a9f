"""
LLM gateway for the OpenAI-compatible chat-completion endpoint.

One synchronous HTTP call per operation, no retries, bounded by a wall-clock
deadline. Every failure
(transport error, timeout, non-2xx status, unexpected response body) is
caught here and turned into an ``LLMResult`` whose ``text`` holds a readable
error message, so callers that only look at ``text`` keep working. Callers
that care can inspect ``result.error``.
"""

from __future__ import annotations

import json
import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
from loguru import logger

from buddy.llm.prompts import (
    ChatRequest,
    build_evaluation_request,
    build_explanation_request,
    build_question_request,
)


class LLMErrorKind(str, Enum):
    """Why an LLM call did not produce an answer."""

    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    MALFORMED_RESPONSE = "malformed_response"


@dataclass
class LLMResult:
    """Outcome of one gateway call."""

    text: str
    error: LLMErrorKind | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class LLMGateway:
    """
    Client for quiz questions, answer evaluation and command explanations.

    Example:
        >>> gateway = LLMGateway(api_url=url, api_key=key, model="llama-3.3-70b-versatile")
        >>> result = gateway.generate_question("git")
        >>> print(result.text)
    """

    def __init__(
        self,
        api_url: str,
        api_key: str | None,
        model: str,
        provider_name: str = "Groq",
        timeout_seconds: float = 30.0,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
        monotonic: Callable[[], float] = time.monotonic,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the gateway.

        Args:
            api_url: Full chat-completion URL
            api_key: Bearer token (requests are still sent when missing)
            model: Model identifier sent with every request
            provider_name: Name used in error messages
            timeout_seconds: Ceiling for a whole call, and for each connect/read/write step
            rng: Random source for question sampling (one per gateway)
            clock: Time source for session identifiers
            monotonic: Time source for the call deadline
            transport: Optional httpx transport, used by tests
        """
        self.api_url = api_url
        self.model = model
        self.provider_name = provider_name
        self.rng = rng or random.Random()
        self.clock = clock
        self.monotonic = monotonic
        self.timeout_seconds = timeout_seconds

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self.client = httpx.Client(
            headers=headers,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    # =========================================================================
    # Operations
    # =========================================================================

    def generate_question(self, tool_name: str) -> LLMResult:
        """Ask the model for one practical question about ``tool_name``."""
        request = build_question_request(tool_name, self.rng, self.clock)
        logger.debug(
            f"Question request for '{tool_name}': session={request.metadata['session_id']} "
            f"categories={request.metadata['categories']} temperature={request.temperature:.2f}"
        )
        return self.complete(request)

    def evaluate_answer(self, tool_name: str, question: str, user_answer: str) -> LLMResult:
        """Ask the model to judge ``user_answer`` against ``question``."""
        return self.complete(build_evaluation_request(tool_name, question, user_answer))

    def explain_command(self, tool_name: str, command: str) -> LLMResult:
        """Ask the model to break down ``command``."""
        return self.complete(build_explanation_request(tool_name, command))

    # =========================================================================
    # Transport
    # =========================================================================

    def complete(self, request: ChatRequest) -> LLMResult:
        """Send ``request`` and extract ``choices[0].message.content``."""
        payload = request.to_payload(self.model)
        deadline = self.monotonic() + self.timeout_seconds

        try:
            with self.client.stream("POST", self.api_url, json=payload) as response:
                response.raise_for_status()
                raw = self._read_until(response, deadline)
            body = json.loads(raw)
        except httpx.TimeoutException as e:
            return self._failure(LLMErrorKind.TIMEOUT, str(e))
        except httpx.HTTPStatusError as e:
            status = e.response
            return self._failure(LLMErrorKind.HTTP_STATUS, f"{status.status_code} {status.reason_phrase}")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._failure(LLMErrorKind.TRANSPORT, str(e) or type(e).__name__)
        except ValueError as e:
            # Body was not JSON
            return self._malformed(str(e))

        content = extract_content(body)
        if content is None:
            return self._malformed("missing choices[0].message.content")
        return LLMResult(text=content)

    def _read_until(self, response: httpx.Response, deadline: float) -> bytes:
        """Read the body, giving up once ``deadline`` has passed."""
        chunks = []
        for chunk in response.iter_bytes():
            if self.monotonic() > deadline:
                raise httpx.ReadTimeout(
                    f"no complete response within {self.timeout_seconds:g}s",
                    request=response.request,
                )
            chunks.append(chunk)
        return b"".join(chunks)

    def _failure(self, kind: LLMErrorKind, cause: str) -> LLMResult:
        cause = cause or kind.value
        logger.warning(f"{self.provider_name} API call failed ({kind.value}): {cause}")
        return LLMResult(
            text=f"Error calling {self.provider_name} API: {cause}",
            error=kind,
            detail=cause,
        )

    def _malformed(self, cause: str) -> LLMResult:
        logger.warning(f"Unexpected {self.provider_name} API response: {cause}")
        return LLMResult(
            text=f"Error: Unable to process response from {self.provider_name} API.",
            error=LLMErrorKind.MALFORMED_RESPONSE,
            detail=cause,
        )


def extract_content(body: Any) -> str | None:
    """Return ``choices[0].message.content`` or None if the envelope is not as expected."""
    if not isinstance(body, dict):
        return None
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None
