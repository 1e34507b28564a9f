"""
LLM access for command quizzes.

``get_llm_gateway`` returns a process-wide gateway built from settings. It
doubles as the FastAPI dependency, so tests can override it.
"""
from __future__ import annotations

import threading

from config import get_settings
from buddy.llm.gateway import LLMErrorKind, LLMGateway, LLMResult

_gateway: LLMGateway | None = None
_gateway_lock = threading.Lock()


def get_llm_gateway() -> LLMGateway:
    """Get or create the shared gateway (lazy initialization)."""
    global _gateway
    if _gateway is None:
        with _gateway_lock:
            if _gateway is None:
                settings = get_settings()
                _gateway = LLMGateway(
                    api_url=settings.llm_api_url,
                    api_key=settings.llm_api_key,
                    model=settings.llm_model,
                    provider_name=settings.llm_provider_name,
                    timeout_seconds=settings.llm_timeout_seconds,
                )
    return _gateway


def close_llm_gateway() -> None:
    """Close the shared gateway if one was created."""
    global _gateway
    with _gateway_lock:
        if _gateway is not None:
            _gateway.close()
            _gateway = None


__all__ = [
    "LLMErrorKind",
    "LLMGateway",
    "LLMResult",
    "close_llm_gateway",
    "get_llm_gateway",
]
