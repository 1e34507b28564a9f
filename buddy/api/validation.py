"""
Input checks shared by the routers.

Missing, blank and over-long values are all rejected with 400 before any
store or LLM call is made.
"""
from __future__ import annotations

from fastapi import HTTPException


def require_text(value: str | None, field: str, max_length: int) -> str:
    """Return ``value`` if present, non-blank and within ``max_length``."""
    if value is None or not value.strip():
        raise HTTPException(status_code=400, detail=f"'{field}' is required")
    check_length(value, field, max_length)
    return value


def check_length(value: str | None, field: str, max_length: int) -> None:
    """Reject ``value`` if it is longer than ``max_length`` characters."""
    if value is not None and len(value) > max_length:
        raise HTTPException(
            status_code=400,
            detail=f"'{field}' must be at most {max_length} characters",
        )
