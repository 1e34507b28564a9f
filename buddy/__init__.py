"""command-buddy: LLM-backed command-line quiz service."""

__version__ = "0.1.0"
