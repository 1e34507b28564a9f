"""
Configuration settings for the command-buddy service.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default="sqlite:///./command_buddy.db",
        description="SQLAlchemy connection string for the command store",
    )

    # ========================================
    # LLM Endpoint (OpenAI-compatible chat completions)
    # ========================================
    llm_api_key: str | None = Field(
        default=None,
        description="Bearer token for the chat-completion endpoint",
    )
    llm_api_url: str = Field(
        default="https://api.groq.com/openai/v1/chat/completions",
        description="Full URL of the chat-completion endpoint",
    )
    llm_provider_name: str = Field(
        default="Groq",
        description="Provider name used in error messages",
    )
    llm_model: str = Field(
        default="llama-3.3-70b-versatile",
        description="Model identifier sent with every request",
    )
    llm_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound for a single outbound LLM call",
    )
    llm_failure_mode: Literal["mask", "propagate"] = Field(
        default="mask",
        description=(
            "mask: LLM failures are returned as 200 with the error text in the payload. "
            "propagate: LLM failures become 502 (504 on timeout)."
        ),
    )

    # ========================================
    # Input Limits
    # ========================================
    max_tool_name_length: int = Field(default=100, ge=1)
    max_command_text_length: int = Field(default=1000, ge=1)
    max_search_text_length: int = Field(default=200, ge=1)
    max_explanation_length: int = Field(default=10000, ge=0)
    max_question_length: int = Field(default=2000, ge=1)
    max_answer_length: int = Field(default=2000, ge=1)

    # ========================================
    # Quiz
    # ========================================
    available_tools: list[str] = Field(
        default_factory=lambda: [
            "git",
            "docker",
            "kubernetes",
            "bash",
            "npm",
            "yarn",
            "mvn",
            "gradle",
            "terraform",
            "aws",
            "gcloud",
        ],
        description="Tools offered to quiz clients",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # API Server
    # ========================================
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8080,
        description="API server port",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins for the browser client",
    )

    def has_llm_configured(self) -> bool:
        """Check if an API key for the LLM endpoint is set."""
        return bool(self.llm_api_key)

    def get_limits(self) -> dict[str, int]:
        """Get input length limits as a dictionary."""
        return {
            "tool_name": self.max_tool_name_length,
            "command_text": self.max_command_text_length,
            "search_text": self.max_search_text_length,
            "explanation": self.max_explanation_length,
            "question": self.max_question_length,
            "answer": self.max_answer_length,
        }

    def get_llm_config(self) -> dict[str, Any]:
        """Get non-sensitive LLM configuration as a dictionary."""
        return {
            "configured": self.has_llm_configured(),
            "provider": self.llm_provider_name,
            "url": self.llm_api_url,
            "model": self.llm_model,
            "timeout_seconds": self.llm_timeout_seconds,
            "failure_mode": self.llm_failure_mode,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
