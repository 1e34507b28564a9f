"""
FastAPI application for command-buddy.

Provides REST API for:
- Saved commands (save, list, search, count)
- Command quizzes (question, answer check, explanation, save)

## Data Flow

```
HTTP request
    ↓
Router (validation)
    ↓
QuizService
    ↓                 ↓
LLMGateway        CommandStore
(chat completion)  (SQLAlchemy)
```
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from config import get_settings
from buddy import __version__
from buddy.db.database import check_database, init_db
from buddy.llm import close_llm_gateway
from buddy.logging_config import configure_logging

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    configure_logging(settings)
    logger.info("Starting command-buddy service...")
    init_db()
    if not settings.has_llm_configured():
        logger.warning("LLM_API_KEY is not set; quiz endpoints will return error text")
    logger.info(f"Service started on {settings.api_host}:{settings.api_port}")

    yield

    # Shutdown
    logger.info("Shutting down command-buddy service...")
    close_llm_gateway()


app = FastAPI(
    title="Command Buddy",
    description="""
    Learn command-line tools with LLM-generated quizzes.

    ## Features

    - **Quiz**: Generate a question for a tool, check an answer, explain a command
    - **Commands**: Save learned commands and search them per tool
    """,
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ========================================
# Error Handlers
# ========================================


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed or wrongly-typed input as 400, like missing fields."""
    logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_errors(exc)},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Store failures are not handled by the routers; report them as 500."""
    logger.opt(exception=exc).error(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Database error"})


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Validation errors reduced to JSON-safe location/message pairs."""
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": str(err.get("msg", ""))}
        for err in exc.errors()
    ]


# ========================================
# Health & Status Endpoints
# ========================================


@app.get("/", tags=["Health"])
def root() -> dict[str, str]:
    """Root endpoint returning service info."""
    return {
        "service": "command-buddy",
        "version": __version__,
        "status": "ok",
    }


@app.get("/health", tags=["Health"])
def health_check() -> dict[str, Any]:
    """Health check with an actual database round trip."""
    db_status, db_error = check_database()

    result: dict[str, Any] = {
        "status": "healthy" if db_status == "ok" else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {
            "database": db_status,
            "llm": "configured" if settings.has_llm_configured() else "not_configured",
        },
    }
    if db_error:
        result["errors"] = {"database": db_error}
    return result


@app.get("/config", tags=["Health"])
def get_config() -> dict[str, Any]:
    """Get current configuration (non-sensitive)."""
    return {
        "database_url": settings.database_url.split("@")[-1]
        if "@" in settings.database_url
        else settings.database_url.split(":", 1)[0],
        "llm": settings.get_llm_config(),
        "limits": settings.get_limits(),
        "tools": settings.available_tools,
    }


# ========================================
# Import and mount routers
# ========================================

from buddy.api.routers import command_router, quiz_router  # noqa: E402

app.include_router(command_router.router, prefix="/commands", tags=["Commands"])
app.include_router(quiz_router.router, prefix="/quiz", tags=["Quiz"])
